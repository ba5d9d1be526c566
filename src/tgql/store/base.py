# -*- encoding: utf-8 -*-
"""
TGQL Data Access Layer - Abstract store contract consumed by the engine.

The engine never touches storage internals. Resolvers and mutation operations
reach records only through this interface. Implement it for each backend
(in-memory, SQL, key-value, ...).

Records are plain mappings carrying a unique identifier under ID_FIELD.
The store exclusively owns record storage and identity generation; callers
only ever receive copies.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

Record = dict

ID_FIELD = "id"


class DataStore(ABC):
    """
    Abstract record store, partitioned by entity kind.

    An entity kind is a plain string such as "games" or "reviews"; it does
    not have to match a schema type name.
    """

    @abstractmethod
    def lookup_by_id(self, kind: str, record_id: Any) -> Optional[Record]:
        """
        Get a single record by identifier.

        Returns:
            A copy of the record, or None if no record has that id
        """
        ...

    @abstractmethod
    def filter_by_foreign_key(self, kind: str, fk_field: str, value: Any) -> list[Record]:
        """
        Get every record whose `fk_field` equals `value`.

        Returns:
            Possibly empty list of record copies, in store order
        """
        ...

    @abstractmethod
    def insert(self, kind: str, record: Record) -> Record:
        """
        Store a new record, assigning it a fresh identifier.

        Any identifier already present in `record` is replaced.

        Returns:
            A copy of the stored record, including its identifier
        """
        ...

    @abstractmethod
    def remove(self, kind: str, record_id: Any) -> bool:
        """
        Delete a record.

        Returns:
            True if something was removed, False if no record matched
        """
        ...

    @abstractmethod
    def update(self, kind: str, record_id: Any, partial: Record) -> Record:
        """
        Merge `partial` into an existing record.

        Keys absent from `partial` keep their prior values.

        Returns:
            A copy of the updated record

        Raises:
            NotFound: If no record has that id
        """
        ...

    @abstractmethod
    def all(self, kind: str) -> list[Record]:
        """Return copies of every record of a kind, in store order."""
        ...

    @abstractmethod
    def create_id(self, kind: str) -> Any:
        """
        Generate an identifier that collides with no existing record.
        """
        ...

    def kinds(self) -> list[str]:
        """List the entity kinds known to the store."""
        return []
