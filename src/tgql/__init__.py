"""
TGQL - Typed Graph Query Language

A schema-driven query engine: clients send a nested selection of fields,
the engine validates it against declared types and resolves it top-down
through per-field resolvers backed by a pluggable data store.

Core Principles:
- "Only what was asked" - the response has exactly the requested shape
- "Fail small" - a failing nullable field nulls itself, not the request

Components:
- TGQL: Main engine interface
- tgql.schema: Type registry and cardinality descriptors
- tgql.resolvers: Resolver map and relation resolver factories
- tgql.store: Data access contract and in-memory store
- tgql.execution: Query and mutation executors
- tgql.demo: Games/reviews/authors example schema

Usage:
    from tgql import TGQL, ResolverMap, MemoryStore

    engine = TGQL(schema=SDL, resolvers=resolvers, store=store)

    # Execute queries
    result = engine.query("{ games { title reviews { rating } } }")
    result.to_dict()

    # Mutations run their root fields in order
    engine.query('mutation { deleteGame(id: "2") { id } }')
"""

from tgql.api.tgql import TGQL
from tgql.config import EngineConfig, configure_logging
from tgql.exceptions import (
    TGQLError,
    QueryParseError,
    SchemaParseError,
    RegistrationError,
    RequestShapeError,
    UnknownType,
    UnknownField,
    InvalidSelection,
    InvalidArgument,
    FieldExecutionError,
    ResolverError,
    NotFound,
    NullabilityViolation,
    FieldError,
)
from tgql.execution import (
    ExecutionContext,
    ExecutionResult,
    FieldState,
    create_operation,
    delete_operation,
    update_operation,
)
from tgql.parser.ast import TGQLQuery, OperationType
from tgql.resolvers import ResolverMap, collection, lookup_by_argument, has_many, belongs_to
from tgql.schema import TypeRegistry, Cardinality
from tgql.store import DataStore, MemoryStore

__all__ = [
    # Main API
    "TGQL",
    "EngineConfig",
    "configure_logging",
    "ExecutionContext",
    "ExecutionResult",
    "FieldState",
    # Schema and resolution
    "TypeRegistry",
    "Cardinality",
    "ResolverMap",
    "collection",
    "lookup_by_argument",
    "has_many",
    "belongs_to",
    "create_operation",
    "delete_operation",
    "update_operation",
    # Storage
    "DataStore",
    "MemoryStore",
    # AST types
    "TGQLQuery",
    "OperationType",
    # Errors
    "TGQLError",
    "QueryParseError",
    "SchemaParseError",
    "RegistrationError",
    "RequestShapeError",
    "UnknownType",
    "UnknownField",
    "InvalidSelection",
    "InvalidArgument",
    "FieldExecutionError",
    "ResolverError",
    "NotFound",
    "NullabilityViolation",
    "FieldError",
]

__version__ = "0.1.0"
