"""
In-Memory Record Store

Dict-backed implementation of the record store, used by the test-suite
and by dry runs of an import. Records are deep-copied on the way in and
out so callers can never mutate stored state by accident.
"""

import copy
from typing import Any, Optional
from uuid import uuid4

from wedding_ledger.services.storage.interface import (
    DuplicateError,
    NotFoundError,
    Record,
    RecordStore,
)


class InMemoryRecordStore(RecordStore):
    """Record store that keeps everything in process memory."""

    def __init__(self, initial: Optional[dict[str, list[Record]]] = None):
        self._collections: dict[str, dict[str, Record]] = {}
        for collection, records in (initial or {}).items():
            for record in records:
                self._insert_now(collection, record)

    def _table(self, collection: str) -> dict[str, Record]:
        return self._collections.setdefault(collection, {})

    def _insert_now(self, collection: str, record: Record) -> Record:
        table = self._table(collection)
        stored = copy.deepcopy(record)
        record_id = stored.get("id") or str(uuid4())
        if record_id in table:
            raise DuplicateError(f"{collection} record already exists: {record_id}")
        stored["id"] = record_id
        table[record_id] = stored
        return copy.deepcopy(stored)

    async def find(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[Record]:
        filters = filters or {}
        return [
            copy.deepcopy(record)
            for record in self._table(collection).values()
            if all(record.get(key) == value for key, value in filters.items())
        ]

    async def insert(self, collection: str, record: Record) -> Record:
        return self._insert_now(collection, record)

    async def update(
        self,
        collection: str,
        record_id: str,
        patch: Record,
    ) -> None:
        table = self._table(collection)
        if record_id not in table:
            raise NotFoundError(f"{collection} record not found: {record_id}")
        updates = {k: copy.deepcopy(v) for k, v in patch.items() if k != "id"}
        table[record_id].update(updates)

    async def delete(self, collection: str, record_id: str) -> None:
        table = self._table(collection)
        if record_id not in table:
            raise NotFoundError(f"{collection} record not found: {record_id}")
        del table[record_id]

    def count(self, collection: str) -> int:
        """Number of records in a collection."""
        return len(self._table(collection))
