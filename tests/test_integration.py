"""
Integration tests for TGQL.

Tests the full flow from query string to execution result through the TGQL
engine, over the demo schema and over a mocked data store.
"""

import asyncio
import logging

import pytest
from unittest.mock import Mock

from tgql import (
    TGQL,
    EngineConfig,
    ExecutionResult,
    QueryParseError,
    RegistrationError,
    ResolverMap,
    UnknownField,
    UnknownType,
    InvalidArgument,
    configure_logging,
    has_many,
    collection,
)
from tgql.demo import SCHEMA, build_engine, build_resolvers
from tgql.store import DataStore


class TestTGQLIntegration:
    """Integration tests for TGQL class over the demo domain."""

    @pytest.fixture
    def engine(self):
        return build_engine()

    def test_games_title_platform(self, engine):
        """Test the canonical end-to-end query."""
        result = engine.query("{ games { title platform } }")

        assert isinstance(result, ExecutionResult)
        assert result.data["games"][0] == {"title": "Zelda, Tears of the Kingdom", "platform": ["Switch"]}
        assert all(set(g) == {"title", "platform"} for g in result.data["games"])
        assert len(result.data["games"]) == 5

    def test_game_with_reviews_and_authors(self, engine):
        """Test relations across three types."""
        result = engine.query('{ game(id: "2") { title reviews { rating author { name verified } } } }')

        assert result.data == {"game": {
            "title": "Final Fantasy 7 Remake",
            "reviews": [
                {"rating": 9, "author": {"name": "mario", "verified": True}},
                {"rating": 7, "author": {"name": "mario", "verified": True}},
            ],
        }}

    def test_author_back_reference(self, engine):
        """Test one-to-many length equals matching review count."""
        result = engine.query('{ author(id: "2") { name reviews { id game { title } } } }')

        reviews = result.data["author"]["reviews"]
        assert [r["id"] for r in reviews] == ["2", "4", "5"]
        assert reviews[0]["game"]["title"] == "Zelda, Tears of the Kingdom"

    def test_review_lookup(self, engine):
        """Test single record lookup by id."""
        result = engine.query('{ review(id: "3") { rating content game { title } } }')

        assert result.data == {"review": {"rating": 7, "content": "lorem ipsum", "game": {"title": "Elden Ring"}}}

    def test_named_operation(self, engine):
        """Test operation_name must match the document."""
        query = "query AllAuthors { authors { name } }"

        assert engine.query(query, operation_name="AllAuthors").ok
        with pytest.raises(InvalidArgument):
            engine.query(query, operation_name="Other")

    def test_parse_error(self, engine):
        """Test syntax errors raise before execution."""
        with pytest.raises(QueryParseError):
            engine.query("{ games { title }")

    def test_unknown_field(self, engine):
        """Test request-shape errors raise out of query()."""
        with pytest.raises(UnknownField):
            engine.query("{ games { price } }")

    def test_validate_without_executing(self, engine):
        """Test validate() coerces variables without touching resolvers."""
        prepared = engine.validate("query ($id: ID!) { game(id: $id) { title } }", {"id": 3})

        assert prepared.variables == {"id": "3"}
        assert prepared.root_type.name == "Query"

    def test_dangling_reference_after_delete(self, engine):
        """Test deleting a game nulls reviews pointing at it, with errors."""
        engine.query('mutation { deleteGame(id: "3") { id } }')

        result = engine.query("{ reviews { id game { title } } }")

        reviews = result.data["reviews"]
        assert reviews[2] is None
        assert reviews[0] == {"id": "1", "game": {"title": "Final Fantasy 7 Remake"}}
        assert result.errors[0].path == ["reviews", 2, "game"]
        assert result.errors[0].fatal is True

    def test_aquery_from_event_loop(self, engine):
        """Test the async entry point."""
        async def scenario():
            return await engine.aquery(
                "query ($id: ID!) { game(id: $id) { title } }",
                variables={"id": "5"},
            )

        result = asyncio.run(scenario())

        assert result.data == {"game": {"title": "Pokemon Scarlet"}}

    def test_extras_reach_resolvers(self):
        """Test caller extras are exposed on the context."""
        resolvers = ResolverMap()
        resolvers.register("Query", "whoami", lambda parent, args, context: context.get("user"))
        engine = TGQL("type Query { whoami: String }", resolvers=resolvers, config=EngineConfig())

        assert engine.query("{ whoami }", extras={"user": "peach"}).data == {"whoami": "peach"}

    def test_engine_freezes_registrations(self, engine):
        """Test the schema and resolver map are read-only after startup."""
        assert engine.registry.frozen
        assert engine.resolvers.frozen
        with pytest.raises(RegistrationError):
            engine.resolvers.register("Game", "price", lambda p, a, c: 0)

    def test_inconsistent_schema_rejected(self):
        """Test references to undeclared types fail at startup."""
        with pytest.raises(UnknownType):
            TGQL("type Query { games: [Game] }", config=EngineConfig())

    def test_implicit_relation_warning(self, caplog):
        """Test object fields without explicit resolvers are reported."""
        resolvers = build_resolvers()
        schema = SCHEMA.replace("type Query {", "type Query {\n  featured: Game")

        with caplog.at_level(logging.WARNING, logger="tgql"):
            TGQL(schema, resolvers=resolvers, config=EngineConfig())

        assert "Query.featured" in caplog.text


class TestTGQLWithMockStore:
    """Tests that resolvers only reach data through the store contract."""

    @pytest.fixture
    def store(self):
        store = Mock(spec=DataStore)
        store.all.return_value = [{"id": "1", "title": "Zelda", "platform": ["Switch"]}]
        store.filter_by_foreign_key.return_value = [{"id": "9", "rating": 8}]
        return store

    @pytest.fixture
    def engine(self, store):
        resolvers = ResolverMap()
        resolvers.register("Query", "games", collection("games"))
        resolvers.register("Game", "reviews", has_many("reviews", "game_id"))
        schema = """
            type Game { id: ID! title: String! platform: [String!]! reviews: [Review!] }
            type Review { id: ID! rating: Int! }
            type Query { games: [Game] }
        """
        return TGQL(schema, resolvers=resolvers, store=store, config=EngineConfig())

    def test_store_calls(self, engine, store):
        """Test the store is consulted per relation with the parent id."""
        result = engine.query("{ games { title reviews { rating } } }")

        assert result.data == {"games": [{"title": "Zelda", "reviews": [{"rating": 8}]}]}
        store.all.assert_called_once_with("games")
        store.filter_by_foreign_key.assert_called_once_with("reviews", "game_id", "1")

    def test_unrequested_relations_not_resolved(self, engine, store):
        """Test relation resolvers only run when selected."""
        engine.query("{ games { title } }")

        store.filter_by_foreign_key.assert_not_called()


class TestEngineConfig:
    """Tests for environment-driven configuration."""

    def test_defaults(self):
        """Test defaults with an empty environment."""
        config = EngineConfig.from_env({})

        assert config.log_level == "WARNING"
        assert config.concurrent_resolution is True
        assert config.mask_errors is False

    def test_from_env(self):
        """Test TGQL_* variables are read."""
        config = EngineConfig.from_env({
            "TGQL_LOG_LEVEL": "debug",
            "TGQL_CONCURRENT_RESOLUTION": "false",
            "TGQL_MASK_ERRORS": "1",
        })

        assert config.log_level == "DEBUG"
        assert config.concurrent_resolution is False
        assert config.mask_errors is True

    def test_invalid_values(self):
        """Test unrecognised values are rejected."""
        with pytest.raises(ValueError):
            EngineConfig.from_env({"TGQL_MASK_ERRORS": "maybe"})
        with pytest.raises(ValueError):
            EngineConfig.from_env({"TGQL_LOG_LEVEL": "LOUD"})

    def test_configure_logging(self):
        """Test the configured level is applied to the package logger."""
        logger = configure_logging(EngineConfig(log_level="DEBUG"))

        assert logger.name == "tgql"
        assert logger.level == logging.DEBUG
        logger.setLevel(logging.NOTSET)
