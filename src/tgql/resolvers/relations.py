# -*- encoding: utf-8 -*-
"""
TGQL Relation Resolvers - Factories for the common store-backed resolvers.

    collection(kind)                  all records of a kind
    lookup_by_argument(kind, "id")    one record by an argument value, or None
    has_many(kind, foreign_key)       one-to-many back reference
    belongs_to(kind, foreign_key)     required single reference

has_many returns records in store order and an empty list when nothing
matches. belongs_to raises NotFound instead of returning None, so a field
declared non-null fails (and propagates) rather than silently yielding null.

Usage:
    resolvers.register("Author", "reviews", has_many("reviews", "author_id"))
    resolvers.register("Review", "author", belongs_to("authors", "author_id"))
"""

from collections.abc import Mapping
from typing import Any

from tgql.exceptions import NotFound
from tgql.resolvers.resolver_map import Resolver
from tgql.store.base import ID_FIELD


def _read(parent: Any, name: str) -> Any:
    if isinstance(parent, Mapping):
        return parent.get(name)
    return getattr(parent, name, None)


def collection(kind: str) -> Resolver:
    """Resolver returning every record of `kind` in store order."""
    def resolve(parent, args, context):
        return context.store.all(kind)
    resolve.__name__ = f"collection_{kind}"
    return resolve


def lookup_by_argument(kind: str, argument: str = ID_FIELD) -> Resolver:
    """Resolver returning the record whose id is `args[argument]`, or None."""
    def resolve(parent, args, context):
        return context.store.lookup_by_id(kind, args.get(argument))
    resolve.__name__ = f"lookup_{kind}"
    return resolve


def has_many(kind: str, foreign_key: str, key: str = ID_FIELD) -> Resolver:
    """
    Resolver for a one-to-many back reference.

    Returns the `kind` records whose `foreign_key` equals the parent's `key`.
    """
    def resolve(parent, args, context):
        return context.store.filter_by_foreign_key(kind, foreign_key, _read(parent, key))
    resolve.__name__ = f"has_many_{kind}_by_{foreign_key}"
    return resolve


def belongs_to(kind: str, foreign_key: str) -> Resolver:
    """
    Resolver for a single reference held in the parent's `foreign_key`.

    Raises:
        NotFound: If no `kind` record matches
    """
    def resolve(parent, args, context):
        target_id = _read(parent, foreign_key)
        record = None
        if target_id is not None:
            record = context.store.lookup_by_id(kind, target_id)
        if record is None:
            raise NotFound(
                kind,
                target_id,
                message=f"No {kind} record matches {foreign_key}={target_id!r}",
            )
        return record
    resolve.__name__ = f"belongs_to_{kind}_by_{foreign_key}"
    return resolve
