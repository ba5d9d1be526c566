"""
Tests for TGQL Resolver Map and relation resolver factories.
"""

from types import SimpleNamespace

import pytest

from tgql.exceptions import NotFound, RegistrationError
from tgql.resolvers import (
    ResolverMap,
    attribute_property,
    belongs_to,
    collection,
    has_many,
    lookup_by_argument,
    mapping_property,
    property_resolver,
)
from tgql.schema import TypeRegistry
from tgql.store import MemoryStore


class TestFallbackStrategies:
    """Tests for the property fallback strategies."""

    def test_property_resolver_reads_mapping(self):
        """Test mapping parents are read by key."""
        resolve = property_resolver("title")

        assert resolve({"title": "Zelda"}, {}, None) == "Zelda"

    def test_property_resolver_reads_attribute(self):
        """Test object parents are read by attribute."""
        resolve = property_resolver("title")

        assert resolve(SimpleNamespace(title="Elden Ring"), {}, None) == "Elden Ring"

    def test_missing_property_is_none(self):
        """Test absent properties resolve to None."""
        assert property_resolver("price")({"title": "Zelda"}, {}, None) is None
        assert attribute_property("price")(SimpleNamespace(), {}, None) is None

    def test_mapping_property_ignores_attributes(self):
        """Test the narrower mapping strategy."""
        assert mapping_property("title")({"title": "Mario Kart"}, {}, None) == "Mario Kart"
        assert mapping_property("title")(None, {}, None) is None


class TestResolverMap:
    """Tests for ResolverMap class."""

    @pytest.fixture
    def resolvers(self):
        return ResolverMap()

    def test_register_and_lookup(self, resolvers):
        """Test explicit bindings win over the fallback."""
        def game_reviews(parent, args, context):
            return []

        resolvers.register("Game", "reviews", game_reviews)

        assert resolvers.lookup("Game", "reviews") is game_reviews
        assert resolvers.is_explicit("Game", "reviews")
        assert ("Game", "reviews") in resolvers
        assert len(resolvers) == 1

    def test_lookup_falls_back_to_property(self, resolvers):
        """Test unbound fields read the same-named parent property."""
        resolve = resolvers.lookup("Game", "title")

        assert not resolvers.is_explicit("Game", "title")
        assert resolve({"title": "Zelda"}, {}, None) == "Zelda"

    def test_decorator_registration(self, resolvers):
        """Test resolver() decorator."""
        @resolvers.resolver("Review", "author")
        def review_author(parent, args, context):
            return {"name": "mario"}

        assert resolvers.get("Review", "author") is review_author

    def test_duplicate_registration_rejected(self, resolvers):
        """Test a (type, field) pair can only be bound once."""
        resolvers.register("Game", "reviews", lambda p, a, c: [])

        with pytest.raises(RegistrationError):
            resolvers.register("Game", "reviews", lambda p, a, c: [])

    def test_non_callable_rejected(self, resolvers):
        """Test resolvers must be callable."""
        with pytest.raises(RegistrationError):
            resolvers.register("Game", "reviews", "not a function")

    def test_frozen_map(self, resolvers):
        """Test registration after freeze() fails."""
        resolvers.freeze()

        assert resolvers.frozen
        with pytest.raises(RegistrationError):
            resolvers.register("Game", "reviews", lambda p, a, c: [])
        with pytest.raises(RegistrationError):
            resolvers.set_default("Game", attribute_property)

    def test_set_default_strategy(self, resolvers):
        """Test a per-type fallback strategy."""
        resolvers.set_default("Game", attribute_property)

        assert resolvers.lookup("Game", "title")({"title": "Zelda"}, {}, None) is None
        assert resolvers.lookup("Game", "title")(SimpleNamespace(title="Zelda"), {}, None) == "Zelda"
        assert resolvers.strategy_for("Review") is property_resolver

    def test_register_many(self, resolvers):
        """Test nested mapping registration keeps order."""
        resolvers.register_many({
            "Query": {"games": collection("games")},
            "Game": {"reviews": has_many("reviews", "game_id")},
        })

        assert resolvers.bindings() == [("Query", "games"), ("Game", "reviews")]

    def test_implicit_relations(self, resolvers):
        """Test object-typed fields without explicit resolvers are reported."""
        registry = TypeRegistry.from_sdl("""
            type Game { id: ID! reviews: [Review!] }
            type Review { id: ID! game: Game! }
        """)
        resolvers.register("Game", "reviews", has_many("reviews", "game_id"))

        assert resolvers.implicit_relations(registry) == [("Review", "game")]

    def test_unknown_bindings(self, resolvers):
        """Test bindings naming undeclared fields are reported."""
        registry = TypeRegistry.from_sdl("type Game { id: ID! }")
        resolvers.register("Game", "price", lambda p, a, c: 0)
        resolvers.register("Publisher", "name", lambda p, a, c: "")

        assert resolvers.unknown_bindings(registry) == [("Game", "price"), ("Publisher", "name")]


class TestRelationResolvers:
    """Tests for store-backed relation factories."""

    @pytest.fixture
    def context(self):
        store = MemoryStore()
        store.load("games", [
            {"id": "g1", "title": "Zelda"},
            {"id": "g2", "title": "Elden Ring"},
        ])
        store.load("reviews", [
            {"id": 1, "game_id": "g1", "author_id": "a1"},
            {"id": 2, "game_id": "g2", "author_id": "a1"},
            {"id": 3, "game_id": "g1", "author_id": "missing"},
        ])
        store.load("authors", [{"id": "a1", "name": "mario"}])
        return SimpleNamespace(store=store)

    def test_collection(self, context):
        """Test collection returns every record in store order."""
        games = collection("games")(None, {}, context)

        assert [g["id"] for g in games] == ["g1", "g2"]

    def test_lookup_by_argument(self, context):
        """Test lookup by id argument."""
        resolve = lookup_by_argument("games")

        assert resolve(None, {"id": "g2"}, context)["title"] == "Elden Ring"
        assert resolve(None, {"id": "g9"}, context) is None

    def test_has_many_filters_by_foreign_key(self, context):
        """Test one-to-many length equals the matching record count."""
        resolve = has_many("reviews", "game_id")

        assert [r["id"] for r in resolve({"id": "g1"}, {}, context)] == [1, 3]
        assert [r["id"] for r in resolve({"id": "g2"}, {}, context)] == [2]

    def test_has_many_empty(self, context):
        """Test no matches yields an empty list, not None."""
        assert has_many("reviews", "game_id")({"id": "g3"}, {}, context) == []

    def test_belongs_to(self, context):
        """Test required single reference lookup."""
        resolve = belongs_to("authors", "author_id")

        assert resolve({"author_id": "a1"}, {}, context)["name"] == "mario"

    def test_belongs_to_missing_raises(self, context):
        """Test a dangling reference fails instead of returning None."""
        resolve = belongs_to("authors", "author_id")

        with pytest.raises(NotFound):
            resolve({"author_id": "missing"}, {}, context)
        with pytest.raises(NotFound):
            resolve({}, {}, context)
