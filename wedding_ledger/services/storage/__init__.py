"""
Storage Services Package

Provides the abstract record store and its implementations.
Google Sheets is the default backend; the in-memory store serves tests
and dry runs.
"""

from wedding_ledger.services.storage.interface import (
    ConnectionError,
    DuplicateError,
    NotFoundError,
    Record,
    RecordStore,
    StorageError,
)
from wedding_ledger.services.storage.memory import InMemoryRecordStore
from wedding_ledger.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
)

__all__ = [
    # Interface
    "Record",
    "RecordStore",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsRecordStore",
    "InMemoryRecordStore",
]
