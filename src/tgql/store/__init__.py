"""TGQL Store module - Data access contract and in-memory implementation."""

from tgql.store.base import DataStore, Record, ID_FIELD
from tgql.store.memory import MemoryStore, random_id

__all__ = [
    "DataStore",
    "Record",
    "ID_FIELD",
    "MemoryStore",
    "random_id",
]
