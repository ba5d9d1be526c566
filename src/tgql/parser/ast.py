"""
TGQL AST - Abstract Syntax Tree nodes for query documents and schemas.

These dataclasses represent the parsed structure of TGQL documents. Query
nodes are consumed by the executor; schema nodes are consumed by the type
registry when loading SDL.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class OperationType(Enum):
    """Root operation kinds."""
    QUERY = "query"
    MUTATION = "mutation"


@dataclass(frozen=True)
class Variable:
    """
    Reference to an operation variable inside an argument value.

    Represents: $name
    """
    name: str


@dataclass(frozen=True)
class EnumValue:
    """Bare name used as a value (enum literal)."""
    name: str


@dataclass
class TypeRef:
    """
    Reference to a type, possibly wrapped in list and non-null markers.

    `of_type` is set for list types and holds the item type reference.

    Represents: Name, Name!, [Name], [Name!]!
    """
    name: Optional[str] = None
    of_type: Optional["TypeRef"] = None
    non_null: bool = False

    @property
    def is_list(self) -> bool:
        return self.of_type is not None

    @property
    def named_type(self) -> str:
        """The innermost type name."""
        ref = self
        while ref.of_type is not None:
            ref = ref.of_type
        return ref.name

    def __str__(self) -> str:
        if self.of_type is not None:
            inner = f"[{self.of_type}]"
        else:
            inner = self.name
        return f"{inner}!" if self.non_null else inner


Value = Union[str, int, float, bool, None, list, dict, Variable, EnumValue]


@dataclass
class Argument:
    """A single `name: value` argument on a selected field."""
    name: str
    value: Any


@dataclass
class FieldNode:
    """
    A selected field in a query.

    Represents: alias: name(arg: value, ...) { selections }
    """
    name: str
    alias: Optional[str] = None
    arguments: list[Argument] = field(default_factory=list)
    selections: list["FieldNode"] = field(default_factory=list)

    @property
    def response_key(self) -> str:
        """Key under which this field appears in the response."""
        return self.alias or self.name

    @property
    def has_selection(self) -> bool:
        return bool(self.selections)

    def argument_values(self) -> dict[str, Any]:
        """Raw (uncoerced) argument values by name."""
        return {arg.name: arg.value for arg in self.arguments}


@dataclass
class VariableDefinition:
    """
    A variable declared by an operation.

    Represents: $name: Type = default
    """
    name: str
    type_ref: TypeRef
    default: Any = None
    has_default: bool = False


@dataclass
class TGQLQuery:
    """
    Complete query document AST.

    This is the root node of a parsed query, containing:
    - The operation kind (query or mutation)
    - Optional operation name
    - Variable definitions
    - The root selection set
    """
    operation: OperationType = OperationType.QUERY
    name: Optional[str] = None
    variable_definitions: list[VariableDefinition] = field(default_factory=list)
    selections: list[FieldNode] = field(default_factory=list)

    # Variables for parameter binding
    variables: dict[str, Any] = field(default_factory=dict)

    @property
    def operation_type(self) -> str:
        """Return the operation kind as a string."""
        return self.operation.value

    @property
    def root_fields(self) -> list[str]:
        """Names of the root fields, in request order."""
        return [node.name for node in self.selections]


# --- Schema definition nodes ---


@dataclass
class InputValueDefinition:
    """An argument of a field, or a field of an input type."""
    name: str
    type_ref: TypeRef
    default: Any = None
    has_default: bool = False


@dataclass
class FieldDefinition:
    """A field declared on an object type."""
    name: str
    type_ref: TypeRef
    arguments: list[InputValueDefinition] = field(default_factory=list)


@dataclass
class TypeDefinition:
    """
    An object or input type definition.

    `kind` is "object" or "input".
    """
    name: str
    kind: str = "object"
    fields: list[Union[FieldDefinition, InputValueDefinition]] = field(default_factory=list)


@dataclass
class ScalarDefinition:
    """A custom scalar declaration."""
    name: str


@dataclass
class SchemaDocument:
    """
    Complete schema definition AST.

    Attributes:
        types: Object and input type definitions, in declaration order
        scalars: Custom scalar declarations
        roots: Root operation bindings from a `schema { ... }` block
    """
    types: list[TypeDefinition] = field(default_factory=list)
    scalars: list[ScalarDefinition] = field(default_factory=list)
    roots: dict[OperationType, str] = field(default_factory=dict)
