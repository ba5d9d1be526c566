"""
TGQL Resolvers - Resolver map, fallback strategies and relation factories.

Resolution:
    ResolverMap - (type, field) -> resolver registry with per-type fallback
    property_resolver - Default fallback reading the same-named property
    mapping_property / attribute_property - Narrower fallback strategies

Relations:
    collection, lookup_by_argument, has_many, belongs_to
"""

from tgql.resolvers.resolver_map import (
    ResolverMap,
    Resolver,
    Strategy,
    property_resolver,
    mapping_property,
    attribute_property,
)
from tgql.resolvers.relations import (
    collection,
    lookup_by_argument,
    has_many,
    belongs_to,
)

__all__ = [
    "ResolverMap",
    "Resolver",
    "Strategy",
    "property_resolver",
    "mapping_property",
    "attribute_property",
    "collection",
    "lookup_by_argument",
    "has_many",
    "belongs_to",
]
