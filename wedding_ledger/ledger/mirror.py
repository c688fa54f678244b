"""
Ledger Mirror

CRITICAL: This module is the ONLY code path that writes pledge-linked
cash ledger entries.

Whenever a pledge's paid amount goes up (direct edit, public form,
bulk import) the increase is mirrored into the cash ledger as one new
entry holding the positive delta. Decreases produce nothing: pledge
edits never remove ledger history.

Pledge-linked entries are immutable afterwards. `ensure_entry_editable`
is the guard that any ledger edit or delete must call first.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from wedding_ledger.activity import ActivityLogger
from wedding_ledger.models.finance import (
    CashLedgerEntry,
    Collection,
    LedgerSourceType,
)
from wedding_ledger.services.storage import RecordStore


class LedgerEntryLockedError(Exception):
    """A pledge-linked ledger entry was about to be edited or deleted."""

    def __init__(self, entry: CashLedgerEntry):
        self.entry = entry
        super().__init__(
            "This transaction is linked to a pledge. "
            "Edit the pledge to change its payments."
        )


def mirror_payment(
    pledge_id: str,
    contributor_name: str,
    old_paid: Decimal,
    new_paid: Decimal,
    on_date: date,
    note: Optional[str],
    wedding_id: str,
) -> Optional[CashLedgerEntry]:
    """
    Compute the ledger entry mirroring a change in a pledge's paid amount.

    Returns None when the paid amount did not increase.
    """
    if new_paid <= old_paid:
        return None

    return CashLedgerEntry(
        wedding_id=wedding_id,
        transaction_date=on_date,
        amount=new_paid - old_paid,
        source_type=LedgerSourceType.PLEDGE,
        source_reference_id=pledge_id,
        contributor_name=contributor_name,
        notes=note,
    )


def ensure_entry_editable(entry: CashLedgerEntry) -> None:
    """
    Raise if a ledger entry may not be edited or deleted directly.

    Raises:
        LedgerEntryLockedError: For entries mirrored from a pledge
    """
    if entry.is_pledge_linked:
        raise LedgerEntryLockedError(entry)


class LedgerMirror:
    """Posts mirrored pledge payments to the cash ledger."""

    def __init__(
        self,
        store: RecordStore,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._store = store
        self._activity = activity_logger or ActivityLogger()

    async def post_payment(
        self,
        pledge_id: str,
        contributor_name: str,
        old_paid: Decimal,
        new_paid: Decimal,
        on_date: date,
        note: Optional[str],
        wedding_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[CashLedgerEntry]:
        """
        Insert the mirrored entry, if there is one.

        Returns the stored entry (with its id), or None when nothing
        was posted.

        Raises:
            StorageError: If the insert fails
        """
        entry = mirror_payment(
            pledge_id=pledge_id,
            contributor_name=contributor_name,
            old_paid=old_paid,
            new_paid=new_paid,
            on_date=on_date,
            note=note,
            wedding_id=wedding_id,
        )
        if entry is None:
            return None

        stored = await self._store.insert(
            Collection.CASH_TRANSACTIONS.value,
            entry.to_record(),
        )
        posted = CashLedgerEntry.from_record(stored)

        self._activity.log_ledger_entry_posted(
            entry_id=posted.id,
            pledge_id=pledge_id,
            amount=str(posted.amount),
            correlation_id=correlation_id,
        )
        return posted
