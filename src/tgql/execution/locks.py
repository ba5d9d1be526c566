"""
TGQL Identifier Locks - Per-(kind, id) serialisation of store writes.

Mutation operations wrap their read-modify-write steps in hold(kind, id)
so two concurrent mutations on the same record never interleave. Locks on
different identifiers are independent.

Entries are thread locks, so one table serialises writers across event
loops: TGQL.query() runs every request on its own loop via asyncio.run,
possibly from several threads at once. Waiting never blocks the loop, and
a waiter cancelled while waiting never ends up owning the lock.
"""

import asyncio
import threading
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

# Back-off between acquisition attempts while another holder has the key
POLL_INTERVAL = 0.002


class IdentifierLocks:
    """
    Table of locks keyed by (kind, record id).

    Usage:
        locks = IdentifierLocks()
        async with locks.hold("games", "1"):
            record = store.lookup_by_id("games", "1")
            ...
    """

    def __init__(self, poll_interval: float = POLL_INTERVAL):
        self._poll_interval = poll_interval
        self._table_lock = threading.Lock()
        self._locks: dict[tuple[str, Any], threading.Lock] = {}
        self._users: dict[tuple[str, Any], int] = {}

    def __len__(self) -> int:
        """Number of identifiers currently held or awaited."""
        with self._table_lock:
            return len(self._locks)

    def is_locked(self, kind: str, record_id: Any) -> bool:
        with self._table_lock:
            lock = self._locks.get((kind, record_id))
        return lock is not None and lock.locked()

    def _enter(self, key: tuple[str, Any]) -> threading.Lock:
        with self._table_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            self._users[key] = self._users.get(key, 0) + 1
            return lock

    def _leave(self, key: tuple[str, Any]) -> None:
        with self._table_lock:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    @asynccontextmanager
    async def hold(self, kind: str, record_id: Any) -> AsyncIterator[None]:
        """Acquire the lock for (kind, record_id) for the duration of the block."""
        key = (kind, record_id)
        lock = self._enter(key)
        try:
            while not lock.acquire(blocking=False):
                await asyncio.sleep(self._poll_interval)
            try:
                yield
            finally:
                lock.release()
        finally:
            self._leave(key)
