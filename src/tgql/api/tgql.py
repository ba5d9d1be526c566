"""
TGQL - Typed Graph Query Language main API.

This module wires the parser, type registry, resolver map, data store and
executors into a single engine object.

Usage:
    from tgql import TGQL, ResolverMap, MemoryStore

    engine = TGQL(schema=SDL, resolvers=resolvers, store=store)

    # Synchronous query
    result = engine.query("{ games { title platform } }")
    result.to_dict()    # {"data": {"games": [...]}}

    # From a running event loop
    result = await engine.aquery("query ($id: ID!) { game(id: $id) { title } }",
                                 variables={"id": "1"})
"""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Optional, Union

from tgql.config import EngineConfig
from tgql.exceptions import InvalidArgument
from tgql.execution import (
    ExecutionContext,
    ExecutionResult,
    IdentifierLocks,
    MutationExecutor,
    PreparedOperation,
    QueryExecutor,
)
from tgql.parser import TGQLParser, TGQLQuery, OperationType
from tgql.resolvers import ResolverMap
from tgql.schema import TypeRegistry
from tgql.store import DataStore, MemoryStore

logger = logging.getLogger(__name__)


class TGQL:
    """
    TGQL query engine.

    The schema and resolver map are checked and frozen on construction;
    afterwards the engine is safe to share between concurrent requests.

    Attributes:
        registry: Frozen type registry
        resolvers: Frozen resolver map
        store: Data access layer handed to resolvers
        config: Engine configuration
    """

    def __init__(
        self,
        schema: Union[str, TypeRegistry],
        resolvers: Optional[ResolverMap] = None,
        store: Optional[DataStore] = None,
        config: Optional[EngineConfig] = None,
    ):
        """
        Initialize the engine.

        Args:
            schema: Schema definition document, or a populated TypeRegistry
            resolvers: Resolver map (default: property fallback only)
            store: Data store (default: empty MemoryStore)
            config: Engine configuration (default: EngineConfig.from_env())

        Raises:
            SchemaParseError: If `schema` is an unparseable document
            RegistrationError / UnknownType: If the schema is inconsistent
        """
        self.registry = schema if isinstance(schema, TypeRegistry) else TypeRegistry.from_sdl(schema)
        self.resolvers = resolvers if resolvers is not None else ResolverMap()
        self.store = store if store is not None else MemoryStore()
        self.config = config or EngineConfig.from_env()

        self.registry.check()
        self.registry.freeze()
        self.resolvers.freeze()

        for type_name, field_name in self.resolvers.unknown_bindings(self.registry):
            logger.warning("resolver bound to undeclared field %s.%s", type_name, field_name)
        for type_name, field_name in self.resolvers.implicit_relations(self.registry):
            logger.warning(
                "relation %s.%s has no explicit resolver; falling back to the parent property",
                type_name, field_name,
            )

        self._parser = TGQLParser()
        self._locks = IdentifierLocks()
        self._executors = {
            OperationType.QUERY: QueryExecutor(self.registry, self.resolvers, self.config),
            OperationType.MUTATION: MutationExecutor(self.registry, self.resolvers, self.config),
        }

    @property
    def locks(self) -> IdentifierLocks:
        """Engine-wide identifier locks used by mutation operations."""
        return self._locks

    def parse(self, query_string: str, variables: Optional[dict] = None) -> TGQLQuery:
        """
        Parse a query string without executing it.

        Raises:
            QueryParseError: If the query cannot be parsed
        """
        return self._parser.parse(query_string, variables)

    def validate(
        self,
        query: Union[str, TGQLQuery],
        variables: Optional[dict] = None,
    ) -> PreparedOperation:
        """
        Validate a query against the schema without executing it.

        Raises:
            QueryParseError: If the query cannot be parsed
            RequestShapeError: If the request is malformed
        """
        document = self._document(query, variables)
        return self._executors[document.operation].prepare(document, document.variables)

    def query(
        self,
        query: Union[str, TGQLQuery],
        variables: Optional[dict] = None,
        operation_name: Optional[str] = None,
        extras: Optional[dict[str, Any]] = None,
    ) -> ExecutionResult:
        """
        Execute a query or mutation synchronously.

        Must not be called from a running event loop; use aquery() there.

        Raises:
            QueryParseError: If the query cannot be parsed
            RequestShapeError: If the request is malformed
        """
        return asyncio.run(self.aquery(query, variables, operation_name, extras))

    async def aquery(
        self,
        query: Union[str, TGQLQuery],
        variables: Optional[dict] = None,
        operation_name: Optional[str] = None,
        extras: Optional[dict[str, Any]] = None,
    ) -> ExecutionResult:
        """
        Execute a query or mutation.

        Args:
            query: Query document string, or an already parsed TGQLQuery
            variables: Variable values for the operation
            operation_name: When given, must match the document's operation name
            extras: Caller data exposed to resolvers as context.extras

        Returns:
            ExecutionResult with data, field errors and field states

        Raises:
            QueryParseError: If the query cannot be parsed
            RequestShapeError: If the request is malformed
        """
        document = self._document(query, variables)
        if operation_name is not None and operation_name != document.name:
            raise InvalidArgument(
                f"Unknown operation '{operation_name}' (document defines {document.name or 'an anonymous operation'})"
            )

        context = ExecutionContext(
            registry=self.registry,
            store=self.store,
            variables=document.variables,
            locks=self._locks,
            operation=document.operation,
            extras=dict(extras or {}),
        )
        logger.debug("executing %s %s", document.operation_type, document.name or "<anonymous>")
        return await self._executors[document.operation].execute(document, context)

    def _document(self, query: Union[str, TGQLQuery], variables: Optional[dict]) -> TGQLQuery:
        if isinstance(query, TGQLQuery):
            if variables is not None:
                return replace(query, variables=dict(variables))
            return query
        return self.parse(query, variables)
