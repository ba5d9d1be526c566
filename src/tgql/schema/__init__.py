"""TGQL Schema module - Type registry, type specs and cardinality descriptors."""

from tgql.schema.types import (
    TypeKind,
    Cardinality,
    ArgumentSpec,
    FieldSpec,
    TypeSpec,
    TYPENAME_FIELD,
    parse_type_string,
)
from tgql.schema.registry import TypeRegistry, BUILTIN_SCALARS

__all__ = [
    "TypeRegistry",
    "BUILTIN_SCALARS",
    "TypeKind",
    "Cardinality",
    "ArgumentSpec",
    "FieldSpec",
    "TypeSpec",
    "TYPENAME_FIELD",
    "parse_type_string",
]
