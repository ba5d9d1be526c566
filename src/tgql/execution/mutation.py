# -*- encoding: utf-8 -*-
"""
TGQL Mutation Executor - Serial root fields and store-backed write operations.

Root fields of a mutation run one after another in request order, so a later
field observes the writes of an earlier one. The selection returned by each
root field is resolved by the regular query machinery.

Operation factories build resolvers for the three write shapes:

    create_operation(kind, argument, input_type)    insert, return new record
    delete_operation(kind, argument="id")           remove if present
    update_operation(kind, argument="id", ...)      partial merge, NotFound if absent

Each read-modify-write holds the engine's identifier lock for (kind, id)
and checks its payload before touching the store.

Usage:
    resolvers.register("Mutation", "addGame",
                       create_operation("games", "game", "AddGameInput"))
    resolvers.register("Mutation", "deleteGame", delete_operation("games"))
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from tgql.exceptions import NotFound, ResolverError
from tgql.execution.context import ExecutionContext
from tgql.execution.executor import QueryExecutor
from tgql.parser.ast import OperationType
from tgql.resolvers.resolver_map import Resolver
from tgql.schema.types import TypeSpec
from tgql.store.base import ID_FIELD

logger = logging.getLogger(__name__)

RETURN_COLLECTION = "collection"
RETURN_RECORD = "record"


class MutationExecutor(QueryExecutor):
    """Executes mutation operations, one root field at a time."""

    operation = OperationType.MUTATION

    async def _execute_root(self, run, root_type, nodes):
        return await self._execute_selection(run, root_type, None, nodes, [], serial=True)


def whitelist(input_spec: Optional[TypeSpec], payload: Any) -> dict:
    """
    Copy only the fields declared on an input type out of a payload.

    Keys absent from the payload stay absent, so the result can be used as a
    partial update. Without an input type every key is kept.

    Raises:
        ResolverError: If the payload is not a mapping
    """
    if not isinstance(payload, Mapping):
        raise ResolverError(f"Expected an input object, got {type(payload).__name__}")
    if input_spec is None:
        return dict(payload)
    return {name: payload[name] for name in input_spec.fields if name in payload}


def _input_spec(context: ExecutionContext, input_type: Optional[str]) -> Optional[TypeSpec]:
    if input_type is None:
        return None
    return context.registry.get_type(input_type)


def create_operation(kind: str, argument: str, input_type: Optional[str] = None) -> Resolver:
    """
    Resolver inserting the record held in `args[argument]`.

    The store assigns a fresh identifier, so two identical payloads create
    two distinct records.
    """
    async def resolve(parent, args, context):
        payload = whitelist(_input_spec(context, input_type), args.get(argument))
        payload.pop(ID_FIELD, None)
        record = context.store.insert(kind, payload)
        logger.debug("created %s %r", kind, record.get(ID_FIELD))
        return record
    resolve.__name__ = f"create_{kind}"
    return resolve


def delete_operation(kind: str, argument: str = ID_FIELD, returning: str = RETURN_COLLECTION) -> Resolver:
    """
    Resolver removing the record whose id is `args[argument]`.

    Deleting an absent record is a no-op. With returning="collection" the
    remaining records of `kind` are returned, with returning="record" the
    deleted record's last value (None when nothing was removed).
    """
    if returning not in (RETURN_COLLECTION, RETURN_RECORD):
        raise ValueError(f"returning must be '{RETURN_COLLECTION}' or '{RETURN_RECORD}'")

    async def resolve(parent, args, context):
        record_id = args.get(argument)
        async with context.locks.hold(kind, record_id):
            previous = context.store.lookup_by_id(kind, record_id)
            removed = context.store.remove(kind, record_id)
        logger.debug("delete %s %r: %s", kind, record_id, "removed" if removed else "no-op")
        if returning == RETURN_RECORD:
            return previous
        return context.store.all(kind)
    resolve.__name__ = f"delete_{kind}"
    return resolve


def update_operation(
    kind: str,
    argument: str = ID_FIELD,
    edits: str = "edits",
    input_type: Optional[str] = None,
) -> Resolver:
    """
    Resolver merging `args[edits]` into the record whose id is `args[argument]`.

    Only fields present in the edits change; applying the same edits twice
    yields the same record.

    Raises:
        NotFound: If no record has that id
    """
    async def resolve(parent, args, context):
        record_id = args.get(argument)
        changes = whitelist(_input_spec(context, input_type), args.get(edits) or {})
        changes.pop(ID_FIELD, None)
        async with context.locks.hold(kind, record_id):
            if context.store.lookup_by_id(kind, record_id) is None:
                raise NotFound(kind, record_id)
            record = context.store.update(kind, record_id, changes)
        logger.debug("updated %s %r: %s", kind, record_id, sorted(changes))
        return record
    resolve.__name__ = f"update_{kind}"
    return resolve
