# -*- encoding: utf-8 -*-
"""
TGQL Query Executor - Resolves a validated query against resolvers.

The executor walks the selection tree top-down. Each selected field goes
through the states

    PENDING -> RESOLVING -> RESOLVED
                        \\-> FAILED

which are recorded per response path in ExecutionResult.states.

Failure handling:
- A failing nullable field becomes null and its error is recorded as
  localized; its siblings are unaffected.
- A failing non-null field (including a resolver returning null for it) is
  recorded as fatal and nulls its nearest nullable ancestor. When there is
  none, the whole `data` becomes null.

Sibling fields are resolved concurrently with asyncio.gather unless the
engine is configured for sequential resolution. Response keys always follow
request order.

Usage:
    executor = QueryExecutor(registry, resolvers)
    result = await executor.execute(query, ExecutionContext(registry, store))
    result.to_dict()
"""

import asyncio
import copy
import inspect
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import partial
from typing import Any, Callable, Optional

from tgql.config import EngineConfig
from tgql.exceptions import (
    FieldError,
    FieldExecutionError,
    InvalidSelection,
    NullabilityViolation,
    ResolverError,
)
from tgql.execution.context import ExecutionContext
from tgql.execution.validation import PreparedOperation, QueryValidator
from tgql.parser.ast import FieldNode, OperationType, TGQLQuery
from tgql.resolvers.resolver_map import ResolverMap
from tgql.schema.registry import TypeRegistry
from tgql.schema.types import TYPENAME_FIELD, FieldSpec, TypeSpec

logger = logging.getLogger(__name__)

MASKED_MESSAGE = "Internal error while resolving field"


class FieldState(Enum):
    """Resolution state of a selected field."""
    PENDING = "pending"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


_TRANSITIONS = {
    None: {FieldState.PENDING},
    FieldState.PENDING: {FieldState.RESOLVING},
    FieldState.RESOLVING: {FieldState.RESOLVED, FieldState.FAILED},
    FieldState.RESOLVED: set(),
    FieldState.FAILED: set(),
}


@dataclass
class ExecutionResult:
    """
    Result of executing a query or mutation.

    Attributes:
        data: Response tree, or None when a failure reached the root
        errors: Field errors in the order they were recorded
        states: Final FieldState per dotted response path
    """
    data: Optional[dict]
    errors: list[FieldError] = field(default_factory=list)
    states: dict[str, FieldState] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when no field failed."""
        return not self.errors

    @property
    def has_fatal(self) -> bool:
        return any(e.fatal for e in self.errors)

    def state_of(self, *path) -> Optional[FieldState]:
        """State of the field at a path, e.g. state_of("games", 0, "title")."""
        return self.states.get(".".join(str(p) for p in path))

    def to_dict(self) -> dict:
        """Convert to the response dictionary: data plus errors when present."""
        d = {"data": self.data}
        if self.errors:
            d["errors"] = [e.to_dict() for e in self.errors]
        return d


class _NullPropagation(Exception):
    """A non-null value failed; the nearest nullable ancestor must become null."""


class _Run:
    """Mutable bookkeeping for a single execution."""

    def __init__(self, prepared: PreparedOperation, context: ExecutionContext):
        self.prepared = prepared
        self.context = context
        self.errors: list[FieldError] = []
        self.states: dict[str, FieldState] = {}

    def transition(self, path: list, state: FieldState) -> None:
        key = ".".join(str(p) for p in path)
        current = self.states.get(key)
        if state not in _TRANSITIONS[current]:
            raise RuntimeError(f"Illegal state transition for {key}: {current} -> {state}")
        self.states[key] = state
        logger.debug("field %s: %s", key, state.value)


class QueryExecutor:
    """
    Executes query operations.

    Attributes:
        registry: Frozen type registry
        resolvers: Resolver map consulted for every field
        config: Engine configuration
    """

    operation = OperationType.QUERY

    def __init__(
        self,
        registry: TypeRegistry,
        resolvers: ResolverMap,
        config: Optional[EngineConfig] = None,
    ):
        self.registry = registry
        self.resolvers = resolvers
        self.config = config or EngineConfig()
        self._validator = QueryValidator(registry)

    def prepare(self, query: TGQLQuery, variables: Optional[dict] = None) -> PreparedOperation:
        """
        Validate a query for this executor.

        Raises:
            RequestShapeError: If the request is malformed
        """
        if query.operation != self.operation:
            raise InvalidSelection(
                f"{type(self).__name__} cannot execute a {query.operation_type} operation"
            )
        return self._validator.prepare(query, variables)

    async def execute(self, query: TGQLQuery, context: ExecutionContext) -> ExecutionResult:
        """
        Validate and execute a query.

        `context.variables` holds the raw request variables; resolvers see
        the coerced values.

        Raises:
            RequestShapeError: Before any resolver runs, if the request is
                malformed
        """
        prepared = self.prepare(query, context.variables)
        context = replace(context, variables=prepared.variables, operation=query.operation)
        run = _Run(prepared, context)

        try:
            data = await self._execute_root(run, prepared.root_type, query.selections)
        except _NullPropagation:
            data = None

        logger.debug(
            "%s executed: %d field(s), %d error(s)",
            query.operation_type, len(run.states), len(run.errors),
        )
        return ExecutionResult(data=data, errors=run.errors, states=run.states)

    async def _execute_root(self, run: _Run, root_type: TypeSpec, nodes: list[FieldNode]) -> dict:
        return await self._execute_selection(run, root_type, None, nodes, [])

    # --- Selection sets ---

    async def _execute_selection(
        self,
        run: _Run,
        type_spec: TypeSpec,
        parent: Any,
        nodes: list[FieldNode],
        path: list,
        serial: bool = False,
    ) -> dict:
        tasks = [
            partial(self._resolve_field, run, type_spec, parent, node, path + [node.response_key])
            for node in nodes
        ]
        values = await self._run_all(tasks, serial)
        return {node.response_key: value for node, value in zip(nodes, values)}

    async def _run_all(self, tasks: list[Callable], serial: bool = False) -> list:
        """
        Run resolution tasks, concurrently unless configured otherwise.

        Every task completes before a null propagation is raised, so
        sibling errors are all recorded.
        """
        if serial or not self.config.concurrent_resolution:
            results, propagation = [], None
            for task in tasks:
                try:
                    results.append(await task())
                except _NullPropagation as e:
                    results.append(None)
                    propagation = propagation or e
            if propagation is not None:
                raise propagation
            return results

        results = await asyncio.gather(*(task() for task in tasks), return_exceptions=True)
        propagation = None
        for result in results:
            if isinstance(result, _NullPropagation):
                propagation = propagation or result
            elif isinstance(result, BaseException):
                raise result
        if propagation is not None:
            raise propagation
        return results

    # --- Fields ---

    async def _resolve_field(
        self,
        run: _Run,
        type_spec: TypeSpec,
        parent: Any,
        node: FieldNode,
        path: list,
    ) -> Any:
        fspec = type_spec.field(node.name)
        run.transition(path, FieldState.PENDING)
        run.transition(path, FieldState.RESOLVING)

        if fspec is TYPENAME_FIELD:
            run.transition(path, FieldState.RESOLVED)
            return type_spec.name

        resolver = self.resolvers.lookup(type_spec.name, node.name)
        args = copy.deepcopy(run.prepared.arguments_for(node))

        try:
            value = await self._invoke(resolver, parent, args, run.context)
            completed = await self._complete(run, type_spec, fspec, node, value, path)
        except _NullPropagation:
            run.transition(path, FieldState.FAILED)
            if fspec.nullable:
                return None
            raise
        except Exception as e:
            run.transition(path, FieldState.FAILED)
            error = e if isinstance(e, FieldExecutionError) else self._wrap(type_spec, node, e)
            return self._report(run, path, error, fatal=not fspec.nullable)

        run.transition(path, FieldState.RESOLVED)
        return completed

    async def _invoke(self, resolver: Callable, parent: Any, args: dict, context: ExecutionContext) -> Any:
        value = resolver(parent, args, context)
        if inspect.isawaitable(value):
            # a cancelled request lets the resolver finish; its result is dropped
            value = await asyncio.shield(value)
        return value

    def _wrap(self, type_spec: TypeSpec, node: FieldNode, exc: Exception) -> ResolverError:
        logger.error(
            "resolver for %s.%s raised %s", type_spec.name, node.name, type(exc).__name__,
            exc_info=exc,
        )
        message = MASKED_MESSAGE if self.config.mask_errors else str(exc) or type(exc).__name__
        return ResolverError(message, wrapped_exception=exc)

    def _report(self, run: _Run, path: list, error: FieldExecutionError, fatal: bool) -> None:
        """Record a field error; raise a null propagation when it is fatal."""
        run.errors.append(
            FieldError(
                path=list(path),
                message=str(error),
                fatal=fatal,
                error_type=type(error).__name__,
            )
        )
        if fatal:
            raise _NullPropagation()
        return None

    # --- Value completion ---

    async def _complete(
        self,
        run: _Run,
        parent_type: TypeSpec,
        fspec: FieldSpec,
        node: FieldNode,
        value: Any,
        path: list,
    ) -> Any:
        if value is None:
            if not fspec.nullable:
                raise NullabilityViolation(parent_type.name, fspec.name)
            return None

        target = self.registry.get_type(fspec.type_name)
        if fspec.is_list:
            if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
                raise ResolverError(
                    f"Expected a list for {parent_type.name}.{fspec.name}, got {type(value).__name__}"
                )
            return await self._complete_list(run, parent_type, fspec, target, node, list(value), path)

        if target.is_object:
            return await self._execute_selection(run, target, value, node.selections, path)
        return value

    async def _complete_list(
        self,
        run: _Run,
        parent_type: TypeSpec,
        fspec: FieldSpec,
        target: TypeSpec,
        node: FieldNode,
        items: list,
        path: list,
    ) -> list:
        item_nullable = fspec.cardinality.item_nullable

        async def complete_item(index: int, item: Any) -> Any:
            item_path = path + [index]
            if item is None:
                if item_nullable:
                    return None
                error = NullabilityViolation(parent_type.name, fspec.name)
                return self._report(run, item_path, error, fatal=True)
            if not target.is_object:
                return item
            try:
                return await self._execute_selection(run, target, item, node.selections, item_path)
            except _NullPropagation:
                if item_nullable:
                    return None
                raise

        return await self._run_all(
            [partial(complete_item, i, item) for i, item in enumerate(items)]
        )
