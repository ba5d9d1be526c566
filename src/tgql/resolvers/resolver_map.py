# -*- encoding: utf-8 -*-
"""
TGQL Resolver Map - (type name, field name) -> resolver registry.

Lookup is two-tier:

1. An explicit resolver registered for (type, field).
2. Otherwise the fallback strategy of the type, bound to the field name.
   Unless set_default() installs another strategy, the fallback is
   property_resolver, which reads the same-named property off the parent.

This is how plain scalar fields ("title", "platform") need no resolver at
all while relational fields ("reviews", "author") get one.

Usage:
    resolvers = ResolverMap()

    @resolvers.resolver("Game", "reviews")
    def game_reviews(parent, args, context):
        return context.store.filter_by_foreign_key("reviews", "game_id", parent["id"])

    resolvers.freeze()
    resolvers.lookup("Game", "title")     # property fallback
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional, TYPE_CHECKING

from tgql.exceptions import RegistrationError

if TYPE_CHECKING:
    from tgql.execution.context import ExecutionContext
    from tgql.schema.registry import TypeRegistry

logger = logging.getLogger(__name__)

# resolver(parent, args, context) -> value (or awaitable of value)
Resolver = Callable[[Any, dict, "ExecutionContext"], Any]

# strategy(field_name) -> resolver
Strategy = Callable[[str], Resolver]


def mapping_property(field_name: str) -> Resolver:
    """Strategy reading `parent[field_name]` off mapping parents."""
    def resolve(parent, args, context):
        if parent is None:
            return None
        return parent.get(field_name)
    resolve.__name__ = f"mapping_property_{field_name}"
    return resolve


def attribute_property(field_name: str) -> Resolver:
    """Strategy reading the `field_name` attribute off object parents."""
    def resolve(parent, args, context):
        return getattr(parent, field_name, None)
    resolve.__name__ = f"attribute_property_{field_name}"
    return resolve


def property_resolver(field_name: str) -> Resolver:
    """
    Default strategy: same-named key of a mapping parent, else attribute.
    """
    by_key = mapping_property(field_name)
    by_attr = attribute_property(field_name)

    def resolve(parent, args, context):
        if isinstance(parent, Mapping):
            return by_key(parent, args, context)
        return by_attr(parent, args, context)
    resolve.__name__ = f"property_{field_name}"
    return resolve


class ResolverMap:
    """
    Registry of field resolvers keyed by (type name, field name).

    Bindings are registered during startup; freeze() makes the map
    immutable for the process lifetime.

    Attributes:
        _resolvers: Dict mapping (type, field) to resolver callables
        _defaults: Dict mapping type names to fallback strategies
    """

    def __init__(self, default_strategy: Strategy = property_resolver):
        """Initialize empty map with a global fallback strategy."""
        self._resolvers: dict[tuple[str, str], Resolver] = {}
        self._defaults: dict[str, Strategy] = {}
        self._default_strategy = default_strategy
        self._frozen = False

    def __len__(self) -> int:
        """Return number of explicit bindings."""
        return len(self._resolvers)

    def __contains__(self, key: tuple[str, str]) -> bool:
        """Check if (type, field) has an explicit binding."""
        return key in self._resolvers

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject any further registration."""
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise RegistrationError("Resolver map is frozen")

    def register(self, type_name: str, field_name: str, fn: Resolver) -> Resolver:
        """
        Bind a resolver to (type, field).

        Raises:
            RegistrationError: If already bound, not callable, or frozen
        """
        self._check_not_frozen()
        if not callable(fn):
            raise RegistrationError(f"Resolver for {type_name}.{field_name} is not callable")
        key = (type_name, field_name)
        if key in self._resolvers:
            raise RegistrationError(f"Resolver for {type_name}.{field_name} already registered")
        self._resolvers[key] = fn
        logger.debug("registered resolver %s.%s", type_name, field_name)
        return fn

    def resolver(self, type_name: str, field_name: str) -> Callable[[Resolver], Resolver]:
        """Decorator form of register()."""
        def decorator(fn: Resolver) -> Resolver:
            return self.register(type_name, field_name, fn)
        return decorator

    def register_many(self, bindings: Mapping) -> None:
        """
        Register a nested mapping {type: {field: resolver}}.
        """
        for type_name, fields in bindings.items():
            for field_name, fn in fields.items():
                self.register(type_name, field_name, fn)

    def set_default(self, type_name: str, strategy: Strategy) -> None:
        """Install the fallback strategy for one type."""
        self._check_not_frozen()
        self._defaults[type_name] = strategy

    def strategy_for(self, type_name: str) -> Strategy:
        return self._defaults.get(type_name, self._default_strategy)

    def is_explicit(self, type_name: str, field_name: str) -> bool:
        return (type_name, field_name) in self._resolvers

    def get(self, type_name: str, field_name: str) -> Optional[Resolver]:
        """Explicit resolver for (type, field), or None."""
        return self._resolvers.get((type_name, field_name))

    def lookup(self, type_name: str, field_name: str) -> Resolver:
        """
        Resolve the resolver for (type, field).

        Returns the explicit binding when present, else the type's fallback
        strategy bound to the field name.
        """
        fn = self._resolvers.get((type_name, field_name))
        if fn is not None:
            return fn
        return self.strategy_for(type_name)(field_name)

    def bindings(self) -> list[tuple[str, str]]:
        """List explicit (type, field) bindings, in registration order."""
        return list(self._resolvers.keys())

    def implicit_relations(self, registry: "TypeRegistry") -> list[tuple[str, str]]:
        """
        List object-typed fields that rely on the property fallback.

        Such fields only work when the stored record embeds the related
        value under the same name.
        """
        result = []
        for spec in registry.types():
            if not spec.is_object:
                continue
            for fspec in spec.fields.values():
                target = registry.get_type(fspec.type_name)
                if target.is_object and not self.is_explicit(spec.name, fspec.name):
                    result.append((spec.name, fspec.name))
        return result

    def unknown_bindings(self, registry: "TypeRegistry") -> list[tuple[str, str]]:
        """List explicit bindings naming a type or field the registry lacks."""
        return [
            (type_name, field_name)
            for type_name, field_name in self._resolvers
            if not registry.has_type(type_name)
            or not registry.get_type(type_name).has_field(field_name)
        ]
