"""
Abstract Record Store Interface

DESIGN DECISION: The engine never talks to a database directly.
It consumes plain records through this interface. This allows us to:
1. Keep Google Sheets as the default backend
2. Use in-memory storage for testing and dry runs
3. Swap in a real database later
4. Keep the ledger rules decoupled from storage implementation

The interface is intentionally simple - we're not building an ORM.
Four operations over named collections, with equality filters.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


Record = dict[str, Any]


class RecordStore(ABC):
    """
    Abstract interface for record storage operations.

    Any storage implementation (Google Sheets, in-memory, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def find(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[Record]:
        """
        Find records in a collection.

        Args:
            collection: Collection name (see models.Collection)
            filters: Field -> value equality filters, all must match

        Returns:
            Matching records, each including its "id"

        Raises:
            StorageError: If the lookup fails
        """
        pass

    @abstractmethod
    async def insert(self, collection: str, record: Record) -> Record:
        """
        Insert a record.

        The store generates the identifier synchronously and returns
        the stored record including "id". Callers rely on this to link
        ledger entries to freshly created pledges.

        Raises:
            StorageError: If insert fails
            DuplicateError: If the record carries an id that already exists
        """
        pass

    @abstractmethod
    async def update(
        self,
        collection: str,
        record_id: str,
        patch: Record,
    ) -> None:
        """
        Apply a partial update to one record.

        Raises:
            StorageError: If update fails
            NotFoundError: If the record doesn't exist
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> None:
        """
        Delete one record.

        Raises:
            StorageError: If delete fails
            NotFoundError: If the record doesn't exist
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Record not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate record."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
