"""
Data Models Package

This package contains all Pydantic models used in the Wedding Ledger engine.
All data flowing through the engine must conform to these schemas.
"""

from wedding_ledger.models.finance import (
    BudgetItem,
    CashLedgerEntry,
    Collection,
    Derivation,
    Expenditure,
    LedgerRecord,
    LedgerSourceType,
    MonetaryStatus,
    Pledge,
    VendorContract,
    Wedding,
)
from wedding_ledger.models.imports import (
    ImportAction,
    ImportPreviewRow,
    ImportResult,
    MatchRule,
    ParsedPledge,
    ParseStats,
)
from wedding_ledger.models.results import (
    RescaleReport,
    ValidationIssue,
    ValidationResult,
)
from wedding_ledger.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Records
    "BudgetItem",
    "CashLedgerEntry",
    "Collection",
    "Derivation",
    "Expenditure",
    "LedgerRecord",
    "LedgerSourceType",
    "MonetaryStatus",
    "Pledge",
    "VendorContract",
    "Wedding",
    # Import models
    "ImportAction",
    "ImportPreviewRow",
    "ImportResult",
    "MatchRule",
    "ParsedPledge",
    "ParseStats",
    # Results
    "RescaleReport",
    "ValidationIssue",
    "ValidationResult",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
