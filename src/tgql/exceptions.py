# -*- encoding: utf-8 -*-
"""
TGQL Exceptions.

Custom exceptions for schema registration, request validation and field
execution.

Two families matter to callers:

- RequestShapeError subclasses are raised before any resolver runs and
  reject the whole request.
- FieldExecutionError subclasses are field-scoped. The executor catches them
  and turns them into FieldError records attached to the response.
"""

from dataclasses import dataclass, field
from typing import Optional, Union


class TGQLError(Exception):
    """Base exception for all TGQL errors."""
    pass


class QueryParseError(TGQLError):
    """Raised when a query document cannot be parsed."""
    pass


class SchemaParseError(TGQLError):
    """Raised when a schema definition document cannot be parsed."""
    pass


class RegistrationError(TGQLError):
    """Raised when a type or resolver cannot be registered."""
    pass


class RequestShapeError(TGQLError):
    """
    Base class for errors in the shape of a request.

    Attributes:
        path: Response path of the offending selection, if known
    """

    def __init__(self, message: str, path: Optional[list] = None):
        super().__init__(message)
        self.path = list(path or [])


class UnknownType(RequestShapeError):
    """Raised when a type name is not declared in the registry."""

    def __init__(self, type_name: str, path: Optional[list] = None):
        super().__init__(f"Unknown type '{type_name}'", path)
        self.type_name = type_name


class UnknownField(RequestShapeError):
    """Raised when a selection references a field the type does not declare."""

    def __init__(self, type_name: str, field_name: str, path: Optional[list] = None):
        super().__init__(
            f"Cannot query field '{field_name}' on type '{type_name}'", path
        )
        self.type_name = type_name
        self.field_name = field_name


class InvalidSelection(RequestShapeError):
    """Raised when a scalar has a sub-selection or an object lacks one."""
    pass


class InvalidArgument(RequestShapeError):
    """Raised for unknown, missing or malformed arguments and variables."""
    pass


class FieldExecutionError(TGQLError):
    """Base class for errors raised while producing a single field value."""
    pass


class ResolverError(FieldExecutionError):
    """
    Raised when a resolver fails while producing a value.

    Attributes:
        wrapped_exception: The original exception raised by the resolver
    """

    def __init__(self, message: str, wrapped_exception: Optional[Exception] = None):
        super().__init__(message)
        self.wrapped_exception = wrapped_exception


class NotFound(FieldExecutionError):
    """Raised when a record targeted by a lookup or mutation does not exist."""

    def __init__(self, kind: str, record_id=None, message: Optional[str] = None):
        super().__init__(message or f"No {kind} record with id {record_id!r}")
        self.kind = kind
        self.record_id = record_id


class NullabilityViolation(FieldExecutionError):
    """Raised when a non-null field produced null."""

    def __init__(self, type_name: str, field_name: str):
        super().__init__(
            f"Cannot return null for non-nullable field {type_name}.{field_name}"
        )
        self.type_name = type_name
        self.field_name = field_name


@dataclass
class FieldError:
    """
    An error record attached to an execution result.

    Attributes:
        path: Response path of the failing field (keys and list indices)
        message: Human-readable description
        fatal: True when the failure nulled an ancestor (non-null field)
        error_type: Name of the exception class that caused the failure
    """
    path: list[Union[str, int]]
    message: str
    fatal: bool = False
    error_type: str = "ResolverError"
    extensions: dict = field(default_factory=dict)

    @property
    def dotted_path(self) -> str:
        """Path rendered as 'games.0.title'."""
        return ".".join(str(p) for p in self.path)

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        d = {
            "path": list(self.path),
            "message": self.message,
            "fatal": self.fatal,
            "type": self.error_type,
        }
        if self.extensions:
            d["extensions"] = dict(self.extensions)
        return d
