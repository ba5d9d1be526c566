# -*- encoding: utf-8 -*-
"""
TGQL Type Registry - Holds declared object types, input types and scalars.

Types are registered once at startup, either programmatically through
register_type() or by loading a schema definition document. After freeze()
the registry is read-only for the process lifetime.

Usage:
    registry = TypeRegistry()
    registry.register_type("Game", {
        "id": "ID!",
        "title": "String!",
        "platform": "[String!]!",
        "reviews": "[Review!]",
    })
    game = registry.get_type("Game")
    game.field("reviews").cardinality.item_nullable   # False
"""

import logging
from collections.abc import Mapping
from typing import Iterator, Optional, Union

from tgql.exceptions import RegistrationError, UnknownType
from tgql.parser.ast import OperationType
from tgql.parser.parser import SchemaParser
from tgql.schema.types import (
    ArgumentSpec,
    FieldSpec,
    TypeKind,
    TypeSpec,
)

logger = logging.getLogger(__name__)

BUILTIN_SCALARS = ("ID", "String", "Int", "Float", "Boolean")

DEFAULT_ROOTS = {
    OperationType.QUERY: "Query",
    OperationType.MUTATION: "Mutation",
}

FieldSpecs = Union[Mapping, list]


class TypeRegistry:
    """
    Registry of named types.

    Attributes:
        _types: Dict mapping type names to TypeSpec instances
        _roots: Dict mapping operation kinds to root type names
    """

    def __init__(self):
        """Initialize a registry holding only the builtin scalars."""
        self._types: dict[str, TypeSpec] = {}
        self._roots: dict[OperationType, str] = dict(DEFAULT_ROOTS)
        self._frozen = False
        for name in BUILTIN_SCALARS:
            self.register_scalar(name)

    @classmethod
    def from_sdl(cls, schema_string: str) -> "TypeRegistry":
        """Create a registry and load a schema definition document into it."""
        registry = cls()
        registry.load_sdl(schema_string)
        return registry

    def __len__(self) -> int:
        """Return number of registered types, builtin scalars included."""
        return len(self._types)

    def __contains__(self, type_name: str) -> bool:
        """Check if a type name is registered."""
        return type_name in self._types

    def __iter__(self) -> Iterator[TypeSpec]:
        return iter(self._types.values())

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    # --- Registration ---

    def register_scalar(self, name: str) -> TypeSpec:
        """
        Register a scalar type.

        Re-registering an existing scalar is a no-op.
        """
        existing = self._types.get(name)
        if existing is not None and existing.is_scalar:
            return existing
        return self._add(TypeSpec(name=name, kind=TypeKind.SCALAR))

    def register_type(
        self,
        name: str,
        field_specs: FieldSpecs,
        kind: TypeKind = TypeKind.OBJECT,
    ) -> TypeSpec:
        """
        Register an object or input type.

        Args:
            name: Type name
            field_specs: Either a mapping of field name to type string
                ({"id": "ID!", "reviews": "[Review!]"}) or a list of
                FieldSpec (object types) / ArgumentSpec (input types)
            kind: TypeKind.OBJECT or TypeKind.INPUT

        Returns:
            The registered TypeSpec

        Raises:
            RegistrationError: On duplicate names, inconsistent cardinality
                or a frozen registry
        """
        if kind == TypeKind.SCALAR:
            raise RegistrationError("Use register_scalar() for scalar types")

        spec_type = FieldSpec if kind == TypeKind.OBJECT else ArgumentSpec
        if isinstance(field_specs, Mapping):
            specs = [spec_type.of(fname, tstring) for fname, tstring in field_specs.items()]
        else:
            specs = list(field_specs)

        fields = {}
        for spec in specs:
            if not isinstance(spec, spec_type):
                raise RegistrationError(
                    f"{name}.{getattr(spec, 'name', spec)} must be a {spec_type.__name__}"
                )
            if spec.name in fields:
                raise RegistrationError(f"Duplicate field {name}.{spec.name}")
            spec.cardinality.validate()
            for arg in getattr(spec, "arguments", {}).values():
                arg.cardinality.validate()
            fields[spec.name] = spec

        if not fields:
            raise RegistrationError(f"Type {name} must declare at least one field")

        return self._add(TypeSpec(name=name, kind=kind, fields=fields))

    def register_input(self, name: str, field_specs: FieldSpecs) -> TypeSpec:
        """Register an input type (used for whitelisted mutation payloads)."""
        return self.register_type(name, field_specs, kind=TypeKind.INPUT)

    def set_root(self, operation: Union[OperationType, str], type_name: str) -> None:
        """Bind a root operation kind to an object type name."""
        self._check_not_frozen()
        self._roots[OperationType(operation)] = type_name

    def _add(self, spec: TypeSpec) -> TypeSpec:
        self._check_not_frozen()
        if spec.name in self._types:
            raise RegistrationError(f"Type {spec.name} is already registered")
        self._types[spec.name] = spec
        logger.debug("registered %s type %s", spec.kind.value, spec.name)
        return spec

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise RegistrationError("Type registry is frozen")

    # --- Lookup ---

    def get_type(self, name: str) -> TypeSpec:
        """
        Get a registered type by name.

        Raises:
            UnknownType: If no type with that name is registered
        """
        spec = self._types.get(name)
        if spec is None:
            raise UnknownType(name)
        return spec

    def has_type(self, name: str) -> bool:
        return name in self._types

    def types(self, kind: Optional[TypeKind] = None) -> list[TypeSpec]:
        """List registered types, optionally filtered by kind."""
        return [t for t in self._types.values() if kind is None or t.kind == kind]

    def root_name(self, operation: Union[OperationType, str]) -> str:
        return self._roots[OperationType(operation)]

    def root_type(self, operation: Union[OperationType, str]) -> TypeSpec:
        """
        Get the root object type for an operation kind.

        Raises:
            UnknownType: If the schema declares no root type for it
        """
        return self.get_type(self.root_name(operation))

    def is_object(self, name: str) -> bool:
        return self.get_type(name).is_object

    # --- Validation ---

    def check(self) -> None:
        """
        Verify that every referenced type exists and is of a usable kind.

        Object fields must reference object or scalar types; arguments and
        input fields must reference scalar or input types.

        Raises:
            UnknownType: If a referenced type is not registered
            RegistrationError: If a reference has the wrong kind
        """
        for spec in self._types.values():
            if spec.is_object:
                for fspec in spec.fields.values():
                    target = self.get_type(fspec.type_name)
                    if target.is_input:
                        raise RegistrationError(
                            f"{spec.name}.{fspec.name} cannot return input type {target.name}"
                        )
                    for arg in fspec.arguments.values():
                        self._check_input_ref(f"{spec.name}.{fspec.name}({arg.name})", arg)
            elif spec.is_input:
                for arg in spec.fields.values():
                    self._check_input_ref(f"{spec.name}.{arg.name}", arg)

        if OperationType.QUERY in self._roots and self._roots[OperationType.QUERY] not in self._types:
            logger.warning("schema declares no %s root type", self._roots[OperationType.QUERY])

    def _check_input_ref(self, where: str, arg: ArgumentSpec) -> None:
        target = self.get_type(arg.type_name)
        if target.is_object:
            raise RegistrationError(f"{where} cannot accept object type {target.name}")

    # --- Schema definition language ---

    def load_sdl(self, schema_string: str) -> None:
        """
        Register every type declared in a schema definition document.

        Raises:
            SchemaParseError: If the document cannot be parsed
            RegistrationError: If a declaration is invalid
        """
        document = SchemaParser().parse(schema_string)

        for scalar in document.scalars:
            self.register_scalar(scalar.name)

        for definition in document.types:
            if definition.kind == "input":
                specs = [ArgumentSpec.from_definition(d) for d in definition.fields]
                self.register_type(definition.name, specs, kind=TypeKind.INPUT)
            else:
                specs = [FieldSpec.from_definition(d) for d in definition.fields]
                self.register_type(definition.name, specs, kind=TypeKind.OBJECT)

        for operation, type_name in document.roots.items():
            self.set_root(operation, type_name)

    def to_sdl(self) -> str:
        """
        Render all non-builtin types back to schema definition syntax.

        A schema block is emitted only when root bindings differ from the
        default Query/Mutation names.
        """
        blocks = [
            spec.to_sdl() for spec in self._types.values()
            if spec.name not in BUILTIN_SCALARS
        ]
        if self._roots != DEFAULT_ROOTS:
            bindings = "\n".join(
                f"  {op.value}: {name}" for op, name in self._roots.items()
            )
            blocks.append(f"schema {{\n{bindings}\n}}")
        return "\n\n".join(blocks) + "\n"

    def describe(self) -> dict:
        """Introspection dict for the whole registry."""
        return {
            "roots": {op.value: name for op, name in self._roots.items()},
            "types": [spec.describe() for spec in self._types.values()],
        }
