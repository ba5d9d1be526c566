# -*- encoding: utf-8 -*-
"""
TGQL Query Validation - Request-shape checks and argument coercion.

Runs before any resolver executes. Everything that can make a request
malformed is detected here and raised as a RequestShapeError:

- root type missing for the operation kind (UnknownType)
- selected field not declared on the traversed type (UnknownField)
- sub-selection on a scalar, missing sub-selection on an object, duplicate
  response keys (InvalidSelection)
- unknown, missing or malformed arguments and variables (InvalidArgument)

The result is a PreparedOperation holding the coerced variables and the
coerced arguments of every selected field, so execution itself never has
to reject a request half-way.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from tgql.exceptions import (
    InvalidArgument,
    InvalidSelection,
    RegistrationError,
    UnknownField,
    UnknownType,
)
from tgql.parser.ast import EnumValue, FieldNode, TGQLQuery, Variable
from tgql.schema.registry import TypeRegistry
from tgql.schema.types import ArgumentSpec, Cardinality, TypeSpec

logger = logging.getLogger(__name__)

_MISSING = object()

# Python types accepted for builtin scalars; custom scalars accept anything
_SCALAR_TYPES = {
    "String": (str,),
    "Int": (int,),
    "Float": (int, float),
    "Boolean": (bool,),
    "ID": (str, int),
}


@dataclass
class PreparedOperation:
    """
    A validated operation, ready for execution.

    Attributes:
        query: The parsed query document
        root_type: Root object type of the operation
        variables: Coerced variable values by name
    """
    query: TGQLQuery
    root_type: TypeSpec
    variables: dict[str, Any] = field(default_factory=dict)
    _arguments: dict[int, dict[str, Any]] = field(default_factory=dict, repr=False)

    def arguments_for(self, node: FieldNode) -> dict[str, Any]:
        """Coerced arguments of a selected field."""
        return self._arguments.get(id(node), {})


def _path_str(path: list) -> str:
    return ".".join(str(p) for p in path) or "<root>"


class QueryValidator:
    """
    Validates query documents against a TypeRegistry.

    Example:
        validator = QueryValidator(registry)
        prepared = validator.prepare(query, variables={"id": "1"})
    """

    def __init__(self, registry: TypeRegistry):
        self._registry = registry

    def prepare(self, query: TGQLQuery, variables: Optional[dict] = None) -> PreparedOperation:
        """
        Validate a query and coerce its variables and arguments.

        Raises:
            RequestShapeError: If the request is malformed
        """
        root_type = self._registry.root_type(query.operation)
        if not root_type.is_object:
            raise UnknownType(root_type.name)

        prepared = PreparedOperation(query=query, root_type=root_type)
        prepared.variables = self._coerce_variables(query, variables or {})
        declared = {d.name for d in query.variable_definitions}
        self._validate_selections(prepared, root_type, query.selections, [], declared)
        logger.debug(
            "validated %s on %s: %d field(s)",
            query.operation_type, root_type.name, len(prepared._arguments),
        )
        return prepared

    # --- Variables ---

    def _coerce_variables(self, query: TGQLQuery, provided: dict) -> dict:
        coerced = {}
        for definition in query.variable_definitions:
            where = f"variable ${definition.name}"
            try:
                cardinality = Cardinality.from_type_ref(definition.type_ref)
            except RegistrationError as e:
                raise InvalidArgument(f"{where}: {e}") from e
            spec = ArgumentSpec(
                name=definition.name,
                type_name=definition.type_ref.named_type,
                cardinality=cardinality,
            )
            if not self._registry.has_type(spec.type_name):
                raise UnknownType(spec.type_name)

            if definition.name in provided:
                value = provided[definition.name]
            elif definition.has_default:
                value = definition.default
            elif not cardinality.nullable:
                raise InvalidArgument(f"{where} of required type {definition.type_ref} was not provided")
            else:
                continue

            coerced[definition.name] = self.coerce_input(spec.type_name, cardinality, value, where, {})
        return coerced

    # --- Selections ---

    def _validate_selections(
        self,
        prepared: PreparedOperation,
        type_spec: TypeSpec,
        nodes: list[FieldNode],
        path: list,
        declared: set[str],
    ) -> None:
        seen = set()
        for node in nodes:
            node_path = path + [node.response_key]
            if node.response_key in seen:
                raise InvalidSelection(
                    f"Duplicate response key '{node.response_key}' at {_path_str(path)}",
                    node_path,
                )
            seen.add(node.response_key)

            if not type_spec.has_field(node.name):
                raise UnknownField(type_spec.name, node.name, node_path)
            fspec = type_spec.field(node.name)
            target = self._registry.get_type(fspec.type_name)

            if target.is_object and not node.has_selection:
                raise InvalidSelection(
                    f"Field '{node.name}' of type {fspec.type_string} must have a selection of subfields",
                    node_path,
                )
            if not target.is_object and node.has_selection:
                raise InvalidSelection(
                    f"Field '{node.name}' of type {fspec.type_string} cannot have a selection of subfields",
                    node_path,
                )

            prepared._arguments[id(node)] = self._coerce_arguments(
                fspec, node, node_path, prepared.variables, declared
            )

            if target.is_object:
                self._validate_selections(prepared, target, node.selections, node_path, declared)

    # --- Arguments ---

    def _coerce_arguments(self, fspec, node: FieldNode, path: list, variables: dict, declared: set[str]) -> dict:
        where = f"field '{_path_str(path)}'"
        arg_specs = getattr(fspec, "arguments", {})
        supplied = node.argument_values()

        for name in supplied:
            if name not in arg_specs:
                raise InvalidArgument(f"Unknown argument '{name}' on {where}", path)

        coerced = {}
        for name, spec in arg_specs.items():
            raw = supplied.get(name, _MISSING)
            if raw is not _MISSING:
                raw = self._substitute(raw, variables, declared, path)

            if raw is _MISSING:
                if spec.has_default:
                    raw = spec.default
                elif spec.required:
                    raise InvalidArgument(
                        f"Missing required argument '{name}' of type {spec.type_string} on {where}", path
                    )
                else:
                    continue

            try:
                coerced[name] = self.coerce_input(
                    spec.type_name, spec.cardinality, raw, f"argument '{name}' on {where}", variables
                )
            except InvalidArgument as e:
                raise InvalidArgument(str(e), path) from e
        return coerced

    def _substitute(self, value: Any, variables: dict, declared: set[str], path: list) -> Any:
        """Replace Variable references, dropping object fields bound to absent variables."""
        if isinstance(value, Variable):
            if value.name not in declared:
                raise InvalidArgument(f"Variable '${value.name}' is not defined", path)
            return variables.get(value.name, _MISSING)
        if isinstance(value, list):
            items = [self._substitute(v, variables, declared, path) for v in value]
            return [None if v is _MISSING else v for v in items]
        if isinstance(value, dict):
            result = {}
            for k, v in value.items():
                v = self._substitute(v, variables, declared, path)
                if v is not _MISSING:
                    result[k] = v
            return result
        return value

    def coerce_input(self, type_name: str, cardinality: Cardinality, value: Any, where: str, variables: dict) -> Any:
        """
        Check and normalise an input value against a declared type.

        Lists accept a single item (wrapped into a one-element list), input
        objects are whitelisted against their declared fields, enum literals
        become strings.

        Raises:
            InvalidArgument: If the value does not fit the type
        """
        if value is None:
            if not cardinality.nullable:
                raise InvalidArgument(f"Expected non-null {cardinality.wrap(type_name)} for {where}")
            return None

        if cardinality.is_list:
            items = value if isinstance(value, list) else [value]
            item_cardinality = Cardinality(is_list=False, item_nullable=cardinality.item_nullable)
            return [
                self.coerce_input(type_name, item_cardinality, item, f"{where}[{i}]", variables)
                for i, item in enumerate(items)
            ]

        if isinstance(value, list):
            raise InvalidArgument(f"Expected {type_name}, found a list for {where}")

        target = self._registry.get_type(type_name)
        if target.is_input:
            return self._coerce_input_object(target, value, where, variables)
        if isinstance(value, EnumValue):
            return value.name
        if isinstance(value, dict):
            raise InvalidArgument(f"Expected {type_name}, found an object for {where}")

        accepted = _SCALAR_TYPES.get(type_name)
        if accepted is not None:
            if isinstance(value, bool) and type_name != "Boolean":
                raise InvalidArgument(f"Expected {type_name}, found {value!r} for {where}")
            if not isinstance(value, accepted):
                raise InvalidArgument(f"Expected {type_name}, found {value!r} for {where}")
            if type_name == "Float":
                return float(value)
            if type_name == "ID":
                return str(value)
        return value

    def _coerce_input_object(self, input_type: TypeSpec, value: Any, where: str, variables: dict) -> dict:
        if not isinstance(value, dict):
            raise InvalidArgument(f"Expected input object {input_type.name} for {where}")

        unknown = [k for k in value if k not in input_type.fields]
        if unknown:
            raise InvalidArgument(
                f"Unknown field(s) {', '.join(sorted(unknown))} for input {input_type.name} in {where}"
            )

        result = {}
        for name, spec in input_type.fields.items():
            if name in value:
                result[name] = self.coerce_input(
                    spec.type_name, spec.cardinality, value[name], f"{where}.{name}", variables
                )
            elif spec.has_default:
                result[name] = spec.default
            elif spec.required:
                raise InvalidArgument(
                    f"Missing required field '{name}' of input {input_type.name} in {where}"
                )
        return result
