"""Shared fixtures: in-memory stores and stores that fail on demand."""

from datetime import date
from decimal import Decimal
from typing import Callable, Optional

import pytest

from wedding_ledger.activity import ActivityLogger
from wedding_ledger.config import ImportSettings
from wedding_ledger.models.finance import Collection, Pledge
from wedding_ledger.rules import refresh_pledge
from wedding_ledger.services.storage import InMemoryRecordStore, StorageError


WEDDING_ID = "wedding-1"
TODAY = date(2025, 6, 15)


class FailingRecordStore(InMemoryRecordStore):
    """
    In-memory store that raises StorageError for selected writes.

    `fail_when(operation, collection, payload)` is consulted before every
    insert and update; returning True makes that call fail.
    """

    def __init__(
        self,
        initial=None,
        fail_when: Optional[Callable[[str, str, dict], bool]] = None,
    ):
        super().__init__(initial)
        self.fail_when = fail_when or (lambda operation, collection, payload: False)
        self.calls: list[tuple[str, str]] = []

    async def insert(self, collection, record):
        self.calls.append(("insert", collection))
        if self.fail_when("insert", collection, record):
            raise StorageError(f"insert into {collection} refused")
        return await super().insert(collection, record)

    async def update(self, collection, record_id, patch):
        self.calls.append(("update", collection))
        if self.fail_when("update", collection, {"id": record_id, **patch}):
            raise StorageError(f"update of {collection} {record_id} refused")
        await super().update(collection, record_id, patch)


def make_pledge(
    name: str,
    pledged: str,
    paid: str = "0",
    pledge_id: Optional[str] = None,
) -> Pledge:
    """A stored-looking pledge with consistent balance and status."""
    return refresh_pledge(Pledge(
        id=pledge_id,
        wedding_id=WEDDING_ID,
        contributor_name=name,
        amount_pledged=Decimal(pledged),
        amount_paid=Decimal(paid),
    ))


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def activity_logger():
    return ActivityLogger("wedding_ledger.tests")


@pytest.fixture
def import_settings():
    return ImportSettings()


async def seed_pledges(store, *pledges: Pledge) -> list[Pledge]:
    """Insert pledges and return them with their store ids."""
    seeded = []
    for pledge in pledges:
        record = pledge.to_record()
        if pledge.id:
            record["id"] = pledge.id
        stored = await store.insert(Collection.PLEDGES.value, record)
        seeded.append(Pledge.from_record(stored))
    return seeded


async def ledger_entries(store) -> list[dict]:
    return await store.find(Collection.CASH_TRANSACTIONS.value)
