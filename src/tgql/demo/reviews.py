# -*- encoding: utf-8 -*-
"""
TGQL Demo - Games, reviews and authors.

A small review site: games have many reviews, every review belongs to one
game and one author. Scalar fields are read straight off the stored records;
the relations and root fields have explicit resolvers.

Usage:
    from tgql.demo import build_engine

    engine = build_engine()
    engine.query('{ game(id: "1") { title reviews { rating author { name } } } }')
"""

from tgql.api.tgql import TGQL
from tgql.config import EngineConfig
from tgql.execution.mutation import create_operation, delete_operation, update_operation
from tgql.resolvers import ResolverMap, belongs_to, collection, has_many, lookup_by_argument
from tgql.store.memory import MemoryStore

SCHEMA = """
type Game {
  id: ID!
  title: String!
  platform: [String!]!
  reviews: [Review!]
}

type Review {
  id: ID!
  rating: Int!
  content: String!
  game: Game!
  author: Author!
}

type Author {
  id: ID!
  name: String!
  verified: Boolean!
  reviews: [Review!]
}

type Query {
  games: [Game]
  game(id: ID!): Game
  reviews: [Review]
  review(id: ID!): Review
  authors: [Author]
  author(id: ID!): Author
}

input AddGameInput {
  title: String!
  platform: [String!]!
}

input EditGameInput {
  title: String
  platform: [String!]
}

type Mutation {
  addGame(game: AddGameInput!): Game
  deleteGame(id: ID!): [Game]
  updateGame(id: ID!, edits: EditGameInput!): Game
}
"""

GAMES = [
    {"id": "1", "title": "Zelda, Tears of the Kingdom", "platform": ["Switch"]},
    {"id": "2", "title": "Final Fantasy 7 Remake", "platform": ["PS5", "Xbox"]},
    {"id": "3", "title": "Elden Ring", "platform": ["PS5", "Xbox", "PC"]},
    {"id": "4", "title": "Mario Kart", "platform": ["Switch"]},
    {"id": "5", "title": "Pokemon Scarlet", "platform": ["PS5", "Xbox", "PC"]},
]

AUTHORS = [
    {"id": "1", "name": "mario", "verified": True},
    {"id": "2", "name": "yoshi", "verified": False},
    {"id": "3", "name": "peach", "verified": True},
]

REVIEWS = [
    {"id": "1", "rating": 9, "content": "lorem ipsum", "author_id": "1", "game_id": "2"},
    {"id": "2", "rating": 10, "content": "lorem ipsum", "author_id": "2", "game_id": "1"},
    {"id": "3", "rating": 7, "content": "lorem ipsum", "author_id": "3", "game_id": "3"},
    {"id": "4", "rating": 5, "content": "lorem ipsum", "author_id": "2", "game_id": "4"},
    {"id": "5", "rating": 8, "content": "lorem ipsum", "author_id": "2", "game_id": "5"},
    {"id": "6", "rating": 7, "content": "lorem ipsum", "author_id": "1", "game_id": "2"},
    {"id": "7", "rating": 10, "content": "lorem ipsum", "author_id": "3", "game_id": "1"},
]


def build_store() -> MemoryStore:
    """In-memory store seeded with the demo records."""
    store = MemoryStore()
    store.load("games", GAMES)
    store.load("authors", AUTHORS)
    store.load("reviews", REVIEWS)
    return store


def build_resolvers() -> ResolverMap:
    resolvers = ResolverMap()
    resolvers.register_many({
        "Query": {
            "games": collection("games"),
            "game": lookup_by_argument("games"),
            "reviews": collection("reviews"),
            "review": lookup_by_argument("reviews"),
            "authors": collection("authors"),
            "author": lookup_by_argument("authors"),
        },
        "Game": {
            "reviews": has_many("reviews", "game_id"),
        },
        "Author": {
            "reviews": has_many("reviews", "author_id"),
        },
        "Review": {
            "game": belongs_to("games", "game_id"),
            "author": belongs_to("authors", "author_id"),
        },
        "Mutation": {
            "addGame": create_operation("games", "game", "AddGameInput"),
            "deleteGame": delete_operation("games"),
            "updateGame": update_operation("games", edits="edits", input_type="EditGameInput"),
        },
    })
    return resolvers


def build_engine(store=None, config=None) -> TGQL:
    """Engine over the demo schema; a freshly seeded store unless one is given."""
    return TGQL(
        schema=SCHEMA,
        resolvers=build_resolvers(),
        store=store if store is not None else build_store(),
        config=config or EngineConfig(),
    )
