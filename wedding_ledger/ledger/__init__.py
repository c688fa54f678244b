"""Cash ledger mirroring."""

from wedding_ledger.ledger.mirror import (
    LedgerEntryLockedError,
    LedgerMirror,
    ensure_entry_editable,
    mirror_payment,
)

__all__ = [
    "LedgerEntryLockedError",
    "LedgerMirror",
    "ensure_entry_editable",
    "mirror_payment",
]
