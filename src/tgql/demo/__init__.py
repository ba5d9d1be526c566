"""TGQL Demo module - Games/reviews/authors schema, seed data and resolvers."""

from tgql.demo.reviews import (
    SCHEMA,
    GAMES,
    AUTHORS,
    REVIEWS,
    build_store,
    build_resolvers,
    build_engine,
)

__all__ = [
    "SCHEMA",
    "GAMES",
    "AUTHORS",
    "REVIEWS",
    "build_store",
    "build_resolvers",
    "build_engine",
]
