# -*- encoding: utf-8 -*-
"""
TGQL Schema Types - Data model for declared types, fields and cardinality.

Every field carries a Cardinality descriptor instead of the raw `[T!]!`
markers. The four list combinations stay distinct:

    [T]    is_list, list_nullable, item_nullable
    [T!]   is_list, list_nullable, not item_nullable
    [T]!   is_list, not list_nullable, item_nullable
    [T!]!  is_list, not list_nullable, not item_nullable

For a non-list field only `item_nullable` is meaningful and `list_nullable`
must remain True.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from tgql.exceptions import RegistrationError, UnknownField
from tgql.parser.ast import TypeRef, InputValueDefinition, FieldDefinition


class TypeKind(Enum):
    """Kinds of named types held by the registry."""
    OBJECT = "object"
    INPUT = "input"
    SCALAR = "scalar"


# Single-level type strings: Name, Name!, [Name], [Name!], [Name]!, [Name!]!
_TYPE_STRING = re.compile(r"^(\[)?([_A-Za-z][_0-9A-Za-z]*)(!)?(\])?(!)?$")


@dataclass(frozen=True)
class Cardinality:
    """
    List-or-scalar cardinality and nullability of a field.

    Attributes:
        is_list: True when the field holds a sequence
        list_nullable: Whether the list itself may be null (lists only)
        item_nullable: Whether a (list item or scalar) value may be null
    """
    is_list: bool = False
    list_nullable: bool = True
    item_nullable: bool = True

    @property
    def nullable(self) -> bool:
        """Whether the field value as a whole may be null."""
        return self.list_nullable if self.is_list else self.item_nullable

    def validate(self) -> None:
        """
        Check that the markers are internally consistent.

        Raises:
            RegistrationError: If a non-list field carries a list marker
        """
        if not self.is_list and not self.list_nullable:
            raise RegistrationError(
                "Non-list cardinality cannot declare a non-null list"
            )

    def wrap(self, type_name: str) -> str:
        """Render the type string for `type_name`, e.g. '[Review!]!'."""
        inner = type_name if self.item_nullable else f"{type_name}!"
        if not self.is_list:
            return inner
        return f"[{inner}]" if self.list_nullable else f"[{inner}]!"

    def to_dict(self) -> dict:
        return {
            "is_list": self.is_list,
            "list_nullable": self.list_nullable,
            "item_nullable": self.item_nullable,
        }

    @classmethod
    def from_type_ref(cls, type_ref: TypeRef) -> "Cardinality":
        """
        Build a cardinality from a parsed type reference.

        Raises:
            RegistrationError: For nested list types, which are not supported
        """
        if not type_ref.is_list:
            return cls(is_list=False, item_nullable=not type_ref.non_null)
        if type_ref.of_type.is_list:
            raise RegistrationError(f"Nested list types are not supported: {type_ref}")
        return cls(
            is_list=True,
            list_nullable=not type_ref.non_null,
            item_nullable=not type_ref.of_type.non_null,
        )


def parse_type_string(type_string: str) -> tuple[str, Cardinality]:
    """
    Split a type string such as '[Review!]' into name and cardinality.

    Raises:
        RegistrationError: If the string is malformed or nests lists
    """
    match = _TYPE_STRING.match(type_string.replace(" ", ""))
    if not match:
        raise RegistrationError(f"Unsupported type string: {type_string!r}")
    open_bracket, name, item_bang, close_bracket, list_bang = match.groups()
    if bool(open_bracket) != bool(close_bracket):
        raise RegistrationError(f"Unbalanced brackets in type string: {type_string!r}")
    if not open_bracket:
        if list_bang:
            raise RegistrationError(f"Malformed type string: {type_string!r}")
        return name, Cardinality(is_list=False, item_nullable=not item_bang)
    return name, Cardinality(
        is_list=True,
        list_nullable=not list_bang,
        item_nullable=not item_bang,
    )


_NO_DEFAULT = object()


@dataclass
class ArgumentSpec:
    """
    A declared argument of a field, or a field of an input type.

    Attributes:
        name: Argument name
        type_name: Named type (scalar or input type)
        cardinality: List/nullability descriptor
        default: Default value used when the argument is omitted
        has_default: Whether `default` applies
    """
    name: str
    type_name: str
    cardinality: Cardinality = field(default_factory=Cardinality)
    default: Any = None
    has_default: bool = False

    @property
    def required(self) -> bool:
        """Non-null arguments without a default must be supplied."""
        return not self.cardinality.nullable and not self.has_default

    @property
    def type_string(self) -> str:
        return self.cardinality.wrap(self.type_name)

    @classmethod
    def of(cls, name: str, type_string: str, default: Any = _NO_DEFAULT) -> "ArgumentSpec":
        """Build from a type string, e.g. ArgumentSpec.of("id", "ID!")."""
        type_name, cardinality = parse_type_string(type_string)
        spec = cls(name=name, type_name=type_name, cardinality=cardinality)
        if default is not _NO_DEFAULT:
            spec.default = default
            spec.has_default = True
        return spec

    @classmethod
    def from_definition(cls, definition: InputValueDefinition) -> "ArgumentSpec":
        return cls(
            name=definition.name,
            type_name=definition.type_ref.named_type,
            cardinality=Cardinality.from_type_ref(definition.type_ref),
            default=definition.default,
            has_default=definition.has_default,
        )

    def to_sdl(self) -> str:
        sdl = f"{self.name}: {self.type_string}"
        if self.has_default:
            sdl += f" = {_format_value(self.default)}"
        return sdl


@dataclass
class FieldSpec:
    """
    A field declared on an object type.

    Attributes:
        name: Field name
        type_name: Named type of the value (scalar or object type)
        cardinality: List/nullability descriptor
        arguments: Declared arguments by name, in declaration order
    """
    name: str
    type_name: str
    cardinality: Cardinality = field(default_factory=Cardinality)
    arguments: dict[str, ArgumentSpec] = field(default_factory=dict)

    @property
    def nullable(self) -> bool:
        return self.cardinality.nullable

    @property
    def is_list(self) -> bool:
        return self.cardinality.is_list

    @property
    def type_string(self) -> str:
        return self.cardinality.wrap(self.type_name)

    @classmethod
    def of(cls, name: str, type_string: str, arguments: Optional[list[ArgumentSpec]] = None) -> "FieldSpec":
        """Build from a type string, e.g. FieldSpec.of("reviews", "[Review!]")."""
        type_name, cardinality = parse_type_string(type_string)
        return cls(
            name=name,
            type_name=type_name,
            cardinality=cardinality,
            arguments={arg.name: arg for arg in (arguments or [])},
        )

    @classmethod
    def from_definition(cls, definition: FieldDefinition) -> "FieldSpec":
        return cls(
            name=definition.name,
            type_name=definition.type_ref.named_type,
            cardinality=Cardinality.from_type_ref(definition.type_ref),
            arguments={
                arg.name: ArgumentSpec.from_definition(arg)
                for arg in definition.arguments
            },
        )

    def to_sdl(self) -> str:
        args = ""
        if self.arguments:
            args = "(" + ", ".join(a.to_sdl() for a in self.arguments.values()) + ")"
        return f"{self.name}{args}: {self.type_string}"


# Meta field available on every object type
TYPENAME_FIELD = FieldSpec(
    name="__typename",
    type_name="String",
    cardinality=Cardinality(is_list=False, item_nullable=False),
)


@dataclass
class TypeSpec:
    """
    A named type held by the registry.

    Object types hold FieldSpecs, input types hold ArgumentSpecs (their
    fields are input values), scalars hold nothing.
    """
    name: str
    kind: TypeKind = TypeKind.OBJECT
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def is_object(self) -> bool:
        return self.kind == TypeKind.OBJECT

    @property
    def is_input(self) -> bool:
        return self.kind == TypeKind.INPUT

    @property
    def is_scalar(self) -> bool:
        return self.kind == TypeKind.SCALAR

    def field_names(self) -> list[str]:
        """Declared field names, in declaration order."""
        return list(self.fields.keys())

    def has_field(self, name: str) -> bool:
        return name in self.fields or (self.is_object and name == TYPENAME_FIELD.name)

    def field(self, name: str):
        """
        Get a declared field.

        Raises:
            UnknownField: If the type does not declare `name`
        """
        if name in self.fields:
            return self.fields[name]
        if self.is_object and name == TYPENAME_FIELD.name:
            return TYPENAME_FIELD
        raise UnknownField(self.name, name)

    def to_sdl(self) -> str:
        """Render this type back to schema definition syntax."""
        if self.is_scalar:
            return f"scalar {self.name}"
        keyword = "type" if self.is_object else "input"
        lines = [f"{keyword} {self.name} {{"]
        for spec in self.fields.values():
            lines.append(f"  {spec.to_sdl()}")
        lines.append("}")
        return "\n".join(lines)

    def describe(self) -> dict:
        """Introspection dict for this type."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "fields": [
                {
                    "name": spec.name,
                    "type": spec.type_name,
                    "type_string": spec.type_string,
                    **spec.cardinality.to_dict(),
                }
                for spec in self.fields.values()
            ],
        }


def _format_value(value: Any) -> str:
    """Render a default value literal in SDL syntax."""
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, str):
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
    if isinstance(value, list):
        return "[" + ", ".join(_format_value(v) for v in value) + "]"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{k}: {_format_value(v)}" for k, v in value.items()) + "}"
    if hasattr(value, "name") and not isinstance(value, (int, float)):
        return value.name  # EnumValue
    return str(value)
