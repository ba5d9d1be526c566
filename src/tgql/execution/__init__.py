"""
TGQL Execution - Validation, query execution and mutation operations.

Execution:
    QueryExecutor - Concurrent top-down resolution with null propagation
    MutationExecutor - Serial root fields for mutation operations
    ExecutionResult / FieldState - Response tree, errors and field states

Write operations:
    create_operation, delete_operation, update_operation, whitelist
"""

from tgql.execution.context import ExecutionContext
from tgql.execution.locks import IdentifierLocks
from tgql.execution.validation import PreparedOperation, QueryValidator
from tgql.execution.executor import (
    ExecutionResult,
    FieldState,
    QueryExecutor,
    MASKED_MESSAGE,
)
from tgql.execution.mutation import (
    MutationExecutor,
    create_operation,
    delete_operation,
    update_operation,
    whitelist,
    RETURN_COLLECTION,
    RETURN_RECORD,
)

__all__ = [
    "ExecutionContext",
    "IdentifierLocks",
    "PreparedOperation",
    "QueryValidator",
    "ExecutionResult",
    "FieldState",
    "QueryExecutor",
    "MASKED_MESSAGE",
    "MutationExecutor",
    "create_operation",
    "delete_operation",
    "update_operation",
    "whitelist",
    "RETURN_COLLECTION",
    "RETURN_RECORD",
]
