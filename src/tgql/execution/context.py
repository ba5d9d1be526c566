"""
TGQL Execution Context - Request-scoped state handed to every resolver.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

from tgql.execution.locks import IdentifierLocks
from tgql.parser.ast import OperationType

if TYPE_CHECKING:
    from tgql.schema.registry import TypeRegistry
    from tgql.store.base import DataStore


@dataclass
class ExecutionContext:
    """
    Shared, read-only view of a request for resolvers.

    Resolvers must treat the context as immutable apart from `extras`,
    which belongs to the caller.

    Attributes:
        registry: Type registry the request is validated against
        store: Data access layer
        variables: Coerced operation variables
        locks: Engine-wide identifier lock table for mutations
        operation: Root operation kind of the request
        extras: Free-form caller data (current user, request id, ...)
    """
    registry: "TypeRegistry"
    store: "DataStore"
    variables: dict[str, Any] = field(default_factory=dict)
    locks: IdentifierLocks = field(default_factory=IdentifierLocks)
    operation: OperationType = OperationType.QUERY
    extras: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Shortcut for extras.get()."""
        return self.extras.get(key, default)
