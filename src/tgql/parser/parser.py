"""
TGQL Parser - Lark-based parsers for query documents and schema definitions.

Parses TGQL strings into the dataclass AST nodes defined in
tgql.parser.ast.
"""

import json
from typing import Optional

from lark import Lark, Transformer
from lark.exceptions import LarkError

from tgql.exceptions import QueryParseError, SchemaParseError
from tgql.parser.grammar import get_grammar
from tgql.parser.ast import (
    OperationType,
    Variable,
    EnumValue,
    TypeRef,
    Argument,
    FieldNode,
    VariableDefinition,
    TGQLQuery,
    InputValueDefinition,
    FieldDefinition,
    TypeDefinition,
    ScalarDefinition,
    SchemaDocument,
)


class _ValueTransformer(Transformer):
    """
    Shared handling of terminals, literal values and type references.
    """

    # --- Terminal handling ---

    def NAME(self, token):
        return str(token)

    def VARIABLE(self, token):
        return Variable(name=str(token)[1:])

    def INT(self, token):
        return int(token)

    def FLOAT(self, token):
        return float(token)

    def STRING(self, token):
        # Decoded as JSON; bad escapes and raw control characters raise ValueError
        return json.loads(str(token))

    def OPERATION_TYPE(self, token):
        return OperationType(str(token))

    # --- Literal values ---

    def true_val(self, _):
        return True

    def false_val(self, _):
        return False

    def null_val(self, _):
        return None

    def enum_val(self, items):
        return EnumValue(name=items[0])

    def list_value(self, items):
        return list(items)

    def object_field(self, items):
        return (items[0], items[1])

    def object_value(self, items):
        return dict(items)

    def default_value(self, items):
        return ("default", items[0])

    # --- Type references ---

    def named_type(self, items):
        return TypeRef(name=items[0], non_null=len(items) > 1)

    def list_type(self, items):
        return TypeRef(of_type=items[0], non_null=len(items) > 1)

    def type_ref(self, items):
        return items[0]


class TGQLTransformer(_ValueTransformer):
    """
    Lark Transformer that converts a query parse tree to TGQL AST nodes.
    """

    # --- Variables ---

    def variable_definition(self, items):
        variable, type_ref = items[0], items[1]
        definition = VariableDefinition(name=variable.name, type_ref=type_ref)
        if len(items) > 2:
            definition.default = items[2][1]
            definition.has_default = True
        return definition

    def variable_definitions(self, items):
        return ("variables", list(items))

    # --- Selections ---

    def alias(self, items):
        return ("alias", items[0])

    def argument(self, items):
        return Argument(name=items[0], value=items[1])

    def arguments(self, items):
        return ("arguments", list(items))

    def selection(self, items):
        node = FieldNode(name="")
        for item in items:
            if isinstance(item, str):
                node.name = item
            elif isinstance(item, tuple) and item[0] == "alias":
                node.alias = item[1]
            elif isinstance(item, tuple) and item[0] == "arguments":
                node.arguments = item[1]
            elif isinstance(item, list):
                node.selections = item
        return node

    def selection_set(self, items):
        return list(items)

    # --- Operations ---

    def operation(self, items):
        query = TGQLQuery()
        for item in items:
            if isinstance(item, OperationType):
                query.operation = item
            elif isinstance(item, str):
                query.name = item
            elif isinstance(item, tuple) and item[0] == "variables":
                query.variable_definitions = item[1]
            elif isinstance(item, list):
                query.selections = item
        return query

    def shorthand_operation(self, items):
        return TGQLQuery(operation=OperationType.QUERY, selections=items[0])

    def start(self, items):
        return items[0]


class SchemaTransformer(_ValueTransformer):
    """
    Lark Transformer that converts a schema parse tree to SchemaDocument.
    """

    def input_value_definition(self, items):
        definition = InputValueDefinition(name=items[0], type_ref=items[1])
        if len(items) > 2:
            definition.default = items[2][1]
            definition.has_default = True
        return definition

    def argument_definitions(self, items):
        return ("arguments", list(items))

    def field_definition(self, items):
        definition = FieldDefinition(name=items[0], type_ref=items[-1])
        for item in items[1:-1]:
            if isinstance(item, tuple) and item[0] == "arguments":
                definition.arguments = item[1]
        return definition

    def type_definition(self, items):
        return TypeDefinition(name=items[0], kind="object", fields=list(items[1:]))

    def input_definition(self, items):
        return TypeDefinition(name=items[0], kind="input", fields=list(items[1:]))

    def scalar_definition(self, items):
        return ScalarDefinition(name=items[0])

    def root_binding(self, items):
        return (items[0], items[1])

    def schema_definition(self, items):
        return dict(items)

    def start(self, items):
        document = SchemaDocument()
        for item in items:
            if isinstance(item, TypeDefinition):
                document.types.append(item)
            elif isinstance(item, ScalarDefinition):
                document.scalars.append(item)
            elif isinstance(item, dict):
                document.roots.update(item)
        return document


class TGQLParser:
    """
    TGQL query parser using Lark.

    Parses query document strings into TGQLQuery AST nodes.

    Example:
        parser = TGQLParser()
        query = parser.parse("{ games { title platform } }")
    """

    def __init__(self):
        self._parser = Lark(
            get_grammar("query"),
            parser='lalr',
            transformer=TGQLTransformer(),
        )

    def parse(self, query_string: str, variables: Optional[dict] = None) -> TGQLQuery:
        """
        Parse a query document into an AST.

        Args:
            query_string: The query document to parse
            variables: Optional dict of variable bindings (name -> value)

        Returns:
            TGQLQuery AST node

        Raises:
            QueryParseError: If parsing fails
        """
        try:
            result = self._parser.parse(query_string)
        except (LarkError, ValueError) as e:
            raise QueryParseError(f"Syntax error in query: {e}") from e

        if variables:
            result.variables = dict(variables)

        return result


class SchemaParser:
    """
    TGQL schema definition parser using Lark.

    Example:
        parser = SchemaParser()
        document = parser.parse("type Game { id: ID! title: String! }")
    """

    def __init__(self):
        self._parser = Lark(
            get_grammar("schema"),
            parser='lalr',
            transformer=SchemaTransformer(),
        )

    def parse(self, schema_string: str) -> SchemaDocument:
        """
        Parse a schema definition document.

        Raises:
            SchemaParseError: If parsing fails
        """
        try:
            return self._parser.parse(schema_string)
        except (LarkError, ValueError) as e:
            raise SchemaParseError(f"Syntax error in schema: {e}") from e


def parse(query_string: str, variables: Optional[dict] = None) -> TGQLQuery:
    """
    Convenience function to parse a query document.

    Creates a parser instance and parses the query string.
    For repeated parsing, use TGQLParser directly for better performance.

    Args:
        query_string: The query document to parse
        variables: Optional dict of variable bindings

    Returns:
        TGQLQuery AST node
    """
    parser = TGQLParser()
    return parser.parse(query_string, variables)


def parse_schema(schema_string: str) -> SchemaDocument:
    """Convenience function to parse a schema definition document."""
    return SchemaParser().parse(schema_string)
