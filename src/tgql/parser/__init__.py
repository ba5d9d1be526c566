"""TGQL Parser module - Grammars, AST nodes, and Lark parsers."""

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
from tgql.parser.parser import TGQLParser, SchemaParser, parse, parse_schema

__all__ = [
    "TGQLParser",
    "SchemaParser",
    "parse",
    "parse_schema",
    "OperationType",
    "Variable",
    "EnumValue",
    "TypeRef",
    "Argument",
    "FieldNode",
    "VariableDefinition",
    "TGQLQuery",
    "InputValueDefinition",
    "FieldDefinition",
    "TypeDefinition",
    "ScalarDefinition",
    "SchemaDocument",
]
