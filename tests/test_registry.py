"""
Tests for TGQL Type Registry.

Tests type registration, cardinality descriptors, SDL loading and
introspection.
"""

import pytest

from tgql.exceptions import RegistrationError, UnknownField, UnknownType
from tgql.parser.ast import OperationType
from tgql.schema import (
    ArgumentSpec,
    Cardinality,
    FieldSpec,
    TypeKind,
    TypeRegistry,
    BUILTIN_SCALARS,
    parse_type_string,
)


class TestCardinality:
    """Tests for cardinality descriptors."""

    @pytest.mark.parametrize("type_string,is_list,list_nullable,item_nullable", [
        ("String", False, True, True),
        ("String!", False, True, False),
        ("[Review]", True, True, True),
        ("[Review!]", True, True, False),
        ("[Review]!", True, False, True),
        ("[Review!]!", True, False, False),
    ])
    def test_parse_type_string(self, type_string, is_list, list_nullable, item_nullable):
        """Test all four list combinations stay distinct."""
        name, cardinality = parse_type_string(type_string)

        assert name in ("String", "Review")
        assert cardinality == Cardinality(is_list, list_nullable, item_nullable)
        assert cardinality.wrap(name) == type_string

    def test_nullable(self):
        """Test overall nullability depends on list-ness."""
        assert Cardinality(is_list=True, list_nullable=True, item_nullable=False).nullable
        assert not Cardinality(is_list=True, list_nullable=False, item_nullable=True).nullable
        assert not Cardinality(is_list=False, item_nullable=False).nullable

    def test_non_list_cannot_declare_non_null_list(self):
        """Test inconsistent markers are rejected."""
        with pytest.raises(RegistrationError):
            Cardinality(is_list=False, list_nullable=False).validate()

    @pytest.mark.parametrize("bad", ["[[String]]", "[String", "String]", "String!!", "", "[String!]!!"])
    def test_malformed_type_strings(self, bad):
        """Test nested lists and malformed strings are rejected."""
        with pytest.raises(RegistrationError):
            parse_type_string(bad)

    def test_to_dict(self):
        """Test descriptor dict form."""
        _, cardinality = parse_type_string("[Game]!")

        assert cardinality.to_dict() == {
            "is_list": True,
            "list_nullable": False,
            "item_nullable": True,
        }


class TestTypeRegistry:
    """Tests for TypeRegistry class."""

    @pytest.fixture
    def registry(self):
        """Registry holding the Game/Review pair."""
        registry = TypeRegistry()
        registry.register_type("Game", {
            "id": "ID!",
            "title": "String!",
            "platform": "[String!]!",
            "reviews": "[Review!]",
        })
        registry.register_type("Review", {
            "id": "ID!",
            "rating": "Int!",
            "game": "Game!",
        })
        return registry

    def test_builtin_scalars(self):
        """Test builtin scalars are present from the start."""
        registry = TypeRegistry()

        for name in BUILTIN_SCALARS:
            assert registry.get_type(name).is_scalar
        assert len(registry) == len(BUILTIN_SCALARS)

    def test_register_and_get(self, registry):
        """Test registered types are retrievable with ordered fields."""
        game = registry.get_type("Game")

        assert game.kind == TypeKind.OBJECT
        assert game.field_names() == ["id", "title", "platform", "reviews"]
        assert "Game" in registry

    def test_field_cardinality(self, registry):
        """Test field descriptors reflect the type string."""
        reviews = registry.get_type("Game").field("reviews")

        assert reviews.type_name == "Review"
        assert reviews.is_list
        assert reviews.nullable
        assert reviews.cardinality.item_nullable is False

    def test_get_unknown_type(self, registry):
        """Test unknown type lookup raises UnknownType."""
        with pytest.raises(UnknownType) as exc_info:
            registry.get_type("Publisher")

        assert exc_info.value.type_name == "Publisher"

    def test_unknown_field(self, registry):
        """Test unknown field lookup raises UnknownField."""
        with pytest.raises(UnknownField):
            registry.get_type("Game").field("price")

    def test_typename_on_object_types(self, registry):
        """Test __typename is implicitly available on objects."""
        game = registry.get_type("Game")

        assert game.has_field("__typename")
        assert game.field("__typename").type_string == "String!"
        assert "__typename" not in game.field_names()

    def test_duplicate_type_rejected(self, registry):
        """Test a type name can only be registered once."""
        with pytest.raises(RegistrationError):
            registry.register_type("Game", {"id": "ID!"})

    def test_duplicate_field_rejected(self):
        """Test duplicate field specs are rejected."""
        registry = TypeRegistry()
        with pytest.raises(RegistrationError):
            registry.register_type("Game", [FieldSpec.of("id", "ID!"), FieldSpec.of("id", "String")])

    def test_empty_type_rejected(self):
        """Test a type must declare fields."""
        with pytest.raises(RegistrationError):
            TypeRegistry().register_type("Empty", {})

    def test_nested_list_rejected(self):
        """Test nested list fields are rejected at registration."""
        with pytest.raises(RegistrationError):
            TypeRegistry().register_type("Grid", {"cells": "[[Int]]"})

    def test_inconsistent_cardinality_rejected(self):
        """Test a non-list spec carrying a list marker is rejected."""
        spec = FieldSpec(name="id", type_name="ID", cardinality=Cardinality(is_list=False, list_nullable=False))
        with pytest.raises(RegistrationError):
            TypeRegistry().register_type("Broken", [spec])

    def test_frozen_registry(self, registry):
        """Test registration after freeze() fails."""
        registry.freeze()

        assert registry.frozen
        with pytest.raises(RegistrationError):
            registry.register_type("Author", {"name": "String!"})

    def test_register_scalar_idempotent(self):
        """Test re-registering a scalar is a no-op."""
        registry = TypeRegistry()
        first = registry.register_scalar("Date")

        assert registry.register_scalar("Date") is first

    def test_check_unknown_reference(self):
        """Test check() detects references to unregistered types."""
        registry = TypeRegistry()
        registry.register_type("Game", {"publisher": "Publisher"})

        with pytest.raises(UnknownType):
            registry.check()

    def test_check_object_returning_input(self):
        """Test object fields cannot return input types."""
        registry = TypeRegistry()
        registry.register_input("GameInput", {"title": "String!"})
        registry.register_type("Game", {"draft": "GameInput"})

        with pytest.raises(RegistrationError):
            registry.check()

    def test_check_argument_of_object_type(self):
        """Test arguments cannot accept object types."""
        registry = TypeRegistry()
        registry.register_type("Game", {"id": "ID!"})
        registry.register_type("Query", [
            FieldSpec.of("similar", "[Game]", arguments=[ArgumentSpec.of("to", "Game")]),
        ])

        with pytest.raises(RegistrationError):
            registry.check()

    def test_check_passes(self, registry):
        """Test check() accepts a consistent registry."""
        registry.check()

    def test_root_types(self, registry):
        """Test default and overridden root bindings."""
        registry.register_type("Query", {"games": "[Game]"})

        assert registry.root_type(OperationType.QUERY).name == "Query"
        assert registry.root_name("mutation") == "Mutation"

        registry.set_root("query", "Game")
        assert registry.root_type("query").name == "Game"

    def test_types_by_kind(self, registry):
        """Test filtering registered types by kind."""
        registry.register_input("AddGameInput", {"title": "String!"})

        assert [t.name for t in registry.types(TypeKind.OBJECT)] == ["Game", "Review"]
        assert [t.name for t in registry.types(TypeKind.INPUT)] == ["AddGameInput"]


class TestSchemaDefinitionLanguage:
    """Tests for SDL loading and introspection."""

    SDL = """
    scalar Date

    type Game {
      id: ID!
      title: String!
      platform: [String!]!
      reviews: [Review!]
    }

    type Review {
      id: ID!
      rating: Int!
      game: Game!
    }

    type Query {
      games(limit: Int = 10): [Game]
      game(id: ID!): Game
    }

    input AddGameInput {
      title: String!
      platform: [String!]!
    }
    """

    @pytest.fixture
    def registry(self):
        return TypeRegistry.from_sdl(self.SDL)

    def test_load_sdl(self, registry):
        """Test SDL types, inputs and scalars are registered."""
        assert registry.get_type("Game").is_object
        assert registry.get_type("AddGameInput").is_input
        assert registry.get_type("Date").is_scalar

    def test_sdl_arguments(self, registry):
        """Test field arguments and defaults from SDL."""
        games = registry.get_type("Query").field("games")
        game = registry.get_type("Query").field("game")

        assert games.arguments["limit"].has_default
        assert games.arguments["limit"].default == 10
        assert game.arguments["id"].required

    def test_input_fields_are_argument_specs(self, registry):
        """Test input type fields are input values."""
        title = registry.get_type("AddGameInput").field("title")

        assert isinstance(title, ArgumentSpec)
        assert title.required

    def test_to_sdl_round_trip(self, registry):
        """Test introspection preserves every cardinality combination."""
        reloaded = TypeRegistry.from_sdl(registry.to_sdl())

        for name in ("Game", "Review", "Query", "AddGameInput"):
            original = registry.get_type(name)
            copy = reloaded.get_type(name)
            assert original.field_names() == copy.field_names()
            for field_name in original.field_names():
                assert original.field(field_name).type_string == copy.field(field_name).type_string

    def test_type_to_sdl(self, registry):
        """Test rendering one type."""
        sdl = registry.get_type("Game").to_sdl()

        assert "platform: [String!]!" in sdl
        assert "reviews: [Review!]" in sdl
        assert sdl.startswith("type Game {")

    def test_schema_block_overrides_roots(self):
        """Test a schema block changes root bindings and is rendered back."""
        registry = TypeRegistry.from_sdl("""
            type RootQuery { ping: String }
            schema { query: RootQuery }
        """)

        assert registry.root_type("query").name == "RootQuery"
        assert "query: RootQuery" in registry.to_sdl()

    def test_describe(self, registry):
        """Test introspection dict."""
        described = registry.get_type("Game").describe()
        platform = next(f for f in described["fields"] if f["name"] == "platform")

        assert described["kind"] == "object"
        assert platform["type_string"] == "[String!]!"
        assert platform["is_list"] is True
        assert platform["list_nullable"] is False
        assert platform["item_nullable"] is False
