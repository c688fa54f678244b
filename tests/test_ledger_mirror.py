"""Tests for the ledger mirror and the pledge-linked entry lock."""

import pytest
from datetime import date
from decimal import Decimal

from wedding_ledger.ledger import (
    LedgerEntryLockedError,
    LedgerMirror,
    ensure_entry_editable,
    mirror_payment,
)
from wedding_ledger.models import CashLedgerEntry, Collection, LedgerSourceType
from wedding_ledger.services.storage import StorageError

from conftest import FailingRecordStore


def _mirror(old_paid: str, new_paid: str):
    return mirror_payment(
        pledge_id="p1",
        contributor_name="Jane Doe",
        old_paid=Decimal(old_paid),
        new_paid=Decimal(new_paid),
        on_date=date(2025, 12, 30),
        note="Pledge payment - Cash",
        wedding_id="w1",
    )


class TestMirrorPayment:
    """Tests for computing the mirrored entry."""

    @pytest.mark.parametrize("old_paid, new_paid", [("0", "0"), ("500", "500"), ("500", "200")])
    def test_no_entry_without_increase(self, old_paid, new_paid):
        """Test that unchanged or lower paid amounts produce nothing."""
        assert _mirror(old_paid, new_paid) is None

    def test_entry_holds_delta(self):
        """Test one entry of exactly new - old is produced."""
        entry = _mirror("50000", "80000")
        assert entry.amount == Decimal("30000")
        assert entry.source_type == LedgerSourceType.PLEDGE
        assert entry.source_reference_id == "p1"
        assert entry.contributor_name == "Jane Doe"
        assert entry.transaction_date == date(2025, 12, 30)
        assert entry.is_pledge_linked is True


class TestLedgerMirror:
    """Tests for posting mirrored entries to the store."""

    @pytest.mark.asyncio
    async def test_post_payment_inserts_entry(self, store, activity_logger):
        """Test the entry is stored with an id."""
        mirror = LedgerMirror(store, activity_logger)
        entry = await mirror.post_payment(
            pledge_id="p1",
            contributor_name="Jane",
            old_paid=Decimal("0"),
            new_paid=Decimal("1000"),
            on_date=date(2025, 1, 1),
            note=None,
            wedding_id="w1",
        )
        assert entry.id is not None
        records = await store.find(Collection.CASH_TRANSACTIONS.value)
        assert len(records) == 1
        assert records[0]["amount"] == "1000"
        assert records[0]["source_reference_id"] == "p1"

    @pytest.mark.asyncio
    async def test_post_payment_skips_decrease(self, store, activity_logger):
        """Test that nothing is written when paid did not rise."""
        mirror = LedgerMirror(store, activity_logger)
        entry = await mirror.post_payment(
            pledge_id="p1",
            contributor_name="Jane",
            old_paid=Decimal("1000"),
            new_paid=Decimal("400"),
            on_date=date(2025, 1, 1),
            note=None,
            wedding_id="w1",
        )
        assert entry is None
        assert store.count(Collection.CASH_TRANSACTIONS.value) == 0

    @pytest.mark.asyncio
    async def test_post_payment_propagates_storage_error(self, activity_logger):
        """Test insert failures reach the caller."""
        failing = FailingRecordStore(fail_when=lambda op, collection, payload: True)
        mirror = LedgerMirror(failing, activity_logger)
        with pytest.raises(StorageError):
            await mirror.post_payment(
                pledge_id="p1",
                contributor_name="Jane",
                old_paid=Decimal("0"),
                new_paid=Decimal("10"),
                on_date=date(2025, 1, 1),
                note=None,
                wedding_id="w1",
            )


class TestEntryLock:
    """Tests for ensure_entry_editable."""

    def test_pledge_linked_entry_locked(self):
        """Test pledge-linked entries cannot be edited directly."""
        entry = _mirror("0", "100")
        with pytest.raises(LedgerEntryLockedError) as exc_info:
            ensure_entry_editable(entry)
        assert exc_info.value.entry is entry

    @pytest.mark.parametrize("source_type", [LedgerSourceType.GIFT, LedgerSourceType.OTHER])
    def test_direct_entries_editable(self, source_type):
        """Test gift and other entries pass the guard."""
        entry = CashLedgerEntry(
            wedding_id="w1",
            transaction_date=date(2025, 1, 1),
            amount=Decimal("100"),
            source_type=source_type,
        )
        ensure_entry_editable(entry)
