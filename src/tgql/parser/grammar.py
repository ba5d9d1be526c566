"""
TGQL Grammar - Lark EBNF grammars for query documents and schema definitions.

Two grammars share their value and type-reference rules:

- QUERY_GRAMMAR: a single operation (query or mutation) with optional name,
  variable definitions, aliases, arguments and nested selection sets.
- SCHEMA_GRAMMAR: object types, input types, custom scalars and an optional
  schema block naming the root operation types.

Commas are insignificant and '#' starts a comment, as in GraphQL.
"""

# Rules and terminals used by both grammars
_COMMON_GRAMMAR = r'''
// Values
?value: VARIABLE
      | STRING
      | FLOAT
      | INT
      | "true" -> true_val
      | "false" -> false_val
      | "null" -> null_val
      | NAME -> enum_val
      | list_value
      | object_value

list_value: "[" value* "]"
object_value: "{" object_field* "}"
object_field: NAME ":" value

// Type references: Name, Name!, [Name], [Name!]!, ...
type_ref: named_type
        | list_type
named_type: NAME NON_NULL?
list_type: "[" type_ref "]" NON_NULL?

// Terminals
NAME: /[_A-Za-z][_0-9A-Za-z]*/
VARIABLE: "$" NAME
NON_NULL: "!"
INT: /-?(0|[1-9][0-9]*)/
FLOAT.2: /-?(0|[1-9][0-9]*)(\.[0-9]+([eE][+-]?[0-9]+)?|[eE][+-]?[0-9]+)/
%import common.ESCAPED_STRING -> STRING

// Whitespace, commas and comments
%import common.WS
%ignore WS
COMMA: ","
%ignore COMMA
COMMENT: /#[^\n]*/
%ignore COMMENT
'''

QUERY_GRAMMAR = r'''
start: operation

operation: OPERATION_TYPE NAME? variable_definitions? selection_set
         | selection_set -> shorthand_operation

OPERATION_TYPE: "query" | "mutation"

variable_definitions: "(" variable_definition+ ")"
variable_definition: VARIABLE ":" type_ref default_value?
default_value: "=" value

selection_set: "{" selection+ "}"
selection: alias? NAME arguments? selection_set?
alias: NAME ":"

arguments: "(" argument+ ")"
argument: NAME ":" value
''' + _COMMON_GRAMMAR

SCHEMA_GRAMMAR = r'''
start: definition*

?definition: type_definition
           | input_definition
           | scalar_definition
           | schema_definition

type_definition: "type" NAME "{" field_definition* "}"
input_definition: "input" NAME "{" input_value_definition* "}"
scalar_definition: "scalar" NAME
schema_definition: "schema" "{" root_binding* "}"

root_binding: OPERATION_TYPE ":" NAME
OPERATION_TYPE: "query" | "mutation"

field_definition: NAME argument_definitions? ":" type_ref
argument_definitions: "(" input_value_definition* ")"
input_value_definition: NAME ":" type_ref default_value?
default_value: "=" value
''' + _COMMON_GRAMMAR


def get_grammar(kind: str = "query") -> str:
    """
    Return a TGQL grammar string for use with Lark.

    Args:
        kind: "query" for query documents, "schema" for schema definitions
    """
    if kind == "query":
        return QUERY_GRAMMAR
    if kind == "schema":
        return SCHEMA_GRAMMAR
    raise ValueError(f"Unknown grammar kind: {kind}")
