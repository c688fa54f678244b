"""
Core Data Models for Wedding Ledger

These models define the schemas for every record the engine reads or writes
through the record store:
1. Budget items, pledges and vendor contracts (money-tracking entities)
2. Cash ledger entries
3. Expenditures and the wedding itself (read for summaries)

All money-tracking entities share the same shape: a planned amount, a paid
amount, a balance and a status. The balance and status are DERIVED
(see wedding_ledger.rules.derivation) and must never be persisted out of sync.

DESIGN DECISION: Records cross the storage boundary as plain dicts.
`to_record()` dumps in JSON mode (Decimal -> str, date -> ISO string) so the
same record works for every backend, and `from_record()` parses them back.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Collection(str, Enum):
    """Record store collections used by the engine."""
    WEDDINGS = "weddings"
    BUDGET_ITEMS = "budget_items"
    PLEDGES = "pledges"
    CASH_TRANSACTIONS = "cash_transactions"
    VENDORS = "vendors"
    EXPENDITURES = "expenditures"


class MonetaryStatus(str, Enum):
    """
    Status shared by every money-tracking entity.

    fulfilled: paid covers the planned amount (planned > 0)
    partial:   something paid, not everything
    pending:   nothing paid, or nothing planned
    """
    PENDING = "pending"
    PARTIAL = "partial"
    FULFILLED = "fulfilled"


class LedgerSourceType(str, Enum):
    """Where money in the cash ledger came from."""
    PLEDGE = "pledge"  # Mirrored from a pledge payment, never edited directly
    GIFT = "gift"
    OTHER = "other"


class Derivation(NamedTuple):
    """Derived balance and status of a money-tracking entity."""
    balance: Decimal
    status: MonetaryStatus


# =============================================================================
# BASE RECORD
# =============================================================================

class LedgerRecord(BaseModel):
    """Base for every record stored in a collection."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = Field(
        default=None,
        description="Identifier assigned by the record store on insert"
    )

    @model_validator(mode="before")
    @classmethod
    def blank_cells_use_defaults(cls, data: Any) -> Any:
        """Empty stored cells (None or "") fall back to the field default, 0 for money."""
        if not isinstance(data, dict):
            return data
        return {
            key: value for key, value in data.items()
            if not (
                (value is None or value == "")
                and key in cls.model_fields
                and not cls.model_fields[key].is_required()
            )
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]):
        """Build a model from a plain store record."""
        return cls.model_validate(record)

    def to_record(self) -> dict[str, Any]:
        """Plain store record, without the store-owned id."""
        return self.model_dump(mode="json", exclude={"id"})


# =============================================================================
# WEDDING (external collaborator, read only)
# =============================================================================

class Wedding(LedgerRecord):
    """The wedding all other records belong to."""

    bride_name: str = Field(default="", max_length=200)
    groom_name: str = Field(default="", max_length=200)
    wedding_date: Optional[date] = None
    expected_guests: int = Field(
        default=0,
        ge=0,
        description="Headcount that guest-dependent budget items scale with"
    )
    currency: Optional[str] = Field(
        default=None,
        min_length=3,
        max_length=3,
        description="Display currency (no conversion is ever done)"
    )

    @property
    def couple_names(self) -> str:
        names = [n for n in (self.groom_name, self.bride_name) if n]
        return " & ".join(names)


# =============================================================================
# MONEY-TRACKING ENTITIES
# =============================================================================

class BudgetItem(LedgerRecord):
    """
    A budget line.

    If `is_guest_dependent`, quantity = expected_guests * guest_multiplier.
    The planned amount is always quantity * unit_cost.
    """

    wedding_id: str
    section_id: Optional[str] = None
    item_name: str = Field(..., min_length=1, max_length=200)

    quantity: Decimal = Field(default=Decimal("1"), ge=0)
    unit_cost: Decimal = Field(default=Decimal("0"), ge=0)

    amount: Decimal = Field(
        default=Decimal("0"),
        description="Planned amount (quantity * unit_cost)"
    )
    paid: Decimal = Field(default=Decimal("0"), ge=0)
    balance: Decimal = Decimal("0")
    status: MonetaryStatus = MonetaryStatus.PENDING

    is_guest_dependent: bool = False
    guest_multiplier: Decimal = Field(default=Decimal("0"), ge=0)

    notes: Optional[str] = Field(default=None, max_length=1000)


class Pledge(LedgerRecord):
    """
    A promised contribution and what has been paid against it so far.

    Created by direct entry, by public submission or by bulk import.
    Every increase of `amount_paid` is mirrored into the cash ledger.
    """

    wedding_id: str
    contributor_name: str = Field(..., min_length=1, max_length=200)

    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=200)

    amount_pledged: Decimal = Field(default=Decimal("0"), ge=0)
    amount_paid: Decimal = Field(default=Decimal("0"), ge=0)
    balance: Decimal = Decimal("0")
    status: MonetaryStatus = MonetaryStatus.PENDING

    payment_method: Optional[str] = Field(default=None, max_length=100)
    pledge_fulfillment_date: Optional[date] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class VendorContract(LedgerRecord):
    """A contract with a vendor and what has been paid on it."""

    wedding_id: str
    vendor_name: str = Field(..., min_length=1, max_length=200)
    service_type: Optional[str] = Field(default=None, max_length=100)

    contract_amount: Decimal = Field(default=Decimal("0"), ge=0)
    amount_paid: Decimal = Field(default=Decimal("0"), ge=0)
    balance: Decimal = Decimal("0")
    status: MonetaryStatus = MonetaryStatus.PENDING

    notes: Optional[str] = Field(default=None, max_length=1000)


# =============================================================================
# CASH LEDGER
# =============================================================================

class CashLedgerEntry(LedgerRecord):
    """
    Money physically received.

    CRITICAL: Entries with source_type=pledge are written ONLY by the
    ledger mirror, as the positive delta of a pledge payment. They are
    never edited or deleted afterwards.
    """

    wedding_id: str
    transaction_date: date
    amount: Decimal = Field(..., gt=0)
    source_type: LedgerSourceType = LedgerSourceType.OTHER
    source_reference_id: Optional[str] = Field(
        default=None,
        description="Pledge this entry mirrors (pledge entries only)"
    )
    contributor_name: Optional[str] = Field(default=None, max_length=200)
    notes: Optional[str] = Field(default=None, max_length=1000)

    @property
    def is_pledge_linked(self) -> bool:
        return (
            self.source_type == LedgerSourceType.PLEDGE
            and self.source_reference_id is not None
        )


class Expenditure(LedgerRecord):
    """Money spent. Only read here, for summaries."""

    wedding_id: str
    expense_date: date
    category: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    amount: Decimal = Field(..., ge=0)
    payment_method: Optional[str] = None
    vendor_name: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
