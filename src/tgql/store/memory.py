# -*- encoding: utf-8 -*-
"""
TGQL In-Memory Store - Reference DataStore backed by Python dicts.

Records of each kind live in an insertion-ordered dict keyed by id, so
"store order" is insertion order. Every operation holds a reentrant lock,
making each single call atomic across threads, and every returned record
is a deep copy so callers can never mutate stored state.

Usage:
    store = MemoryStore()
    store.load("games", [{"id": "1", "title": "Zelda", "platform": ["Switch"]}])
    store.update("games", "1", {"title": "Zelda II"})
"""

import logging
import uuid
from copy import deepcopy
from threading import RLock
from typing import Any, Callable, Iterable, Optional

from tgql.exceptions import NotFound
from tgql.store.base import DataStore, Record, ID_FIELD

logger = logging.getLogger(__name__)


def random_id() -> str:
    """Default identifier factory: a random UUID4 hex string."""
    return uuid.uuid4().hex


class MemoryStore(DataStore):
    """
    An in-memory DataStore.

    Attributes:
        id_factory: Zero-argument callable producing candidate identifiers.
            Candidates that collide with an existing id are discarded.
    """

    def __init__(self, id_factory: Optional[Callable[[], Any]] = None):
        self.id_factory = id_factory or random_id
        self.reset()

    def reset(self) -> None:
        """
        Reset all internal data structures.
        """
        self.lock = RLock()
        self.records: dict[str, dict[Any, Record]] = {}

    def load(self, kind: str, records: Iterable[Record]) -> None:
        """
        Seed records that already carry identifiers, keeping their ids.

        Raises:
            ValueError: If a record lacks an id or duplicates an existing one
        """
        with self.lock:
            table = self.records.setdefault(kind, {})
            for record in records:
                if ID_FIELD not in record:
                    raise ValueError(f"{kind} record has no {ID_FIELD!r}: {record!r}")
                record_id = record[ID_FIELD]
                if record_id in table:
                    raise ValueError(f"duplicate {kind} id {record_id!r}")
                table[record_id] = deepcopy(dict(record))

    def kinds(self) -> list[str]:
        with self.lock:
            return list(self.records.keys())

    def count(self, kind: str) -> int:
        """
        Return the number of records of a kind.
        """
        with self.lock:
            return len(self.records.get(kind, {}))

    def create_id(self, kind: str) -> Any:
        with self.lock:
            table = self.records.get(kind, {})
            while True:
                candidate = self.id_factory()
                if candidate not in table:
                    return candidate
                logger.debug("discarding colliding %s id %r", kind, candidate)

    def lookup_by_id(self, kind: str, record_id: Any) -> Optional[Record]:
        with self.lock:
            record = self.records.get(kind, {}).get(record_id)
            # return a *copy* so as not to mutate dict in store
            return deepcopy(record) if record is not None else None

    def filter_by_foreign_key(self, kind: str, fk_field: str, value: Any) -> list[Record]:
        with self.lock:
            return [
                deepcopy(record)
                for record in self.records.get(kind, {}).values()
                if record.get(fk_field) == value
            ]

    def all(self, kind: str) -> list[Record]:
        with self.lock:
            return [deepcopy(r) for r in self.records.get(kind, {}).values()]

    def insert(self, kind: str, record: Record) -> Record:
        """
        Insert one record, replacing any id it carries with a fresh one.
        """
        with self.lock:
            stored = deepcopy(dict(record))
            stored[ID_FIELD] = self.create_id(kind)
            self.records.setdefault(kind, {})[stored[ID_FIELD]] = stored
            logger.debug("inserted %s %r", kind, stored[ID_FIELD])
            return deepcopy(stored)

    def remove(self, kind: str, record_id: Any) -> bool:
        with self.lock:
            table = self.records.get(kind, {})
            if record_id not in table:
                return False
            del table[record_id]
            logger.debug("removed %s %r", kind, record_id)
            return True

    def update(self, kind: str, record_id: Any, partial: Record) -> Record:
        with self.lock:
            table = self.records.get(kind, {})
            if record_id not in table:
                raise NotFound(kind, record_id)

            merged = deepcopy(table[record_id])
            for key, value in partial.items():
                if key == ID_FIELD:
                    continue
                merged[key] = deepcopy(value)

            # swap in the merged copy only once it is complete
            table[record_id] = merged
            logger.debug("updated %s %r fields=%s", kind, record_id, sorted(partial))
            return deepcopy(merged)
