"""
Activity Event Models

Significant engine actions (imports, pledge writes, ledger postings,
guest-count batches) are described as typed events and written to the
structured local log. This provides:
1. Traceability of every ledger posting back to the run that made it
2. Debugging information when a candidate fails
3. Correlation of all events of one import run

DESIGN DECISION: Events are NOT persisted. The cash ledger is the only
history the system keeps; these events exist for the operator's log.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActivityEventType(str, Enum):
    """Types of events we log."""
    # Bulk import
    IMPORT_STARTED = "import_started"
    IMPORT_CANDIDATE_FAILED = "import_candidate_failed"
    IMPORT_COMPLETED = "import_completed"

    # Pledges
    PLEDGE_CREATED = "pledge_created"
    PLEDGE_UPDATED = "pledge_updated"

    # Ledger
    LEDGER_ENTRY_POSTED = "ledger_entry_posted"

    # Budget
    GUEST_COUNT_CHANGED = "guest_count_changed"
    BATCH_ROLLED_BACK = "batch_rolled_back"

    # System
    STORAGE_ERROR = "storage_error"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """A single activity event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    # What record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Collection of the record (e.g., 'pledges', 'cash_transactions')"
    )
    entity_id: Optional[str] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one run (e.g., one import)"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.pledge_created(pledge_id, name, correlation_id)
        event = ActivityEventBuilder.ledger_entry_posted(entry_id, pledge_id, "30000", correlation_id)
    """

    @staticmethod
    def import_started(
        wedding_id: str,
        candidates: int,
        skipped_lines: int,
        correlation_id: UUID,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.IMPORT_STARTED,
            entity_type="weddings",
            entity_id=wedding_id,
            correlation_id=correlation_id,
            description=f"Pledge import started with {candidates} candidates",
            details={
                "candidates": candidates,
                "skipped_lines": skipped_lines,
            },
        )

    @staticmethod
    def import_candidate_failed(
        name: str,
        line_number: int,
        error_message: str,
        correlation_id: UUID,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.IMPORT_CANDIDATE_FAILED,
            severity=ActivitySeverity.WARNING,
            entity_type="pledges",
            correlation_id=correlation_id,
            description=f"Import of line {line_number} failed",
            details={
                "name": name,
                "line_number": line_number,
            },
            error_message=error_message,
        )

    @staticmethod
    def import_completed(
        wedding_id: str,
        created: int,
        updated: int,
        errors: int,
        correlation_id: UUID,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.IMPORT_COMPLETED,
            severity=ActivitySeverity.WARNING if errors else ActivitySeverity.INFO,
            entity_type="weddings",
            entity_id=wedding_id,
            correlation_id=correlation_id,
            description=f"Pledge import completed: {created} created, {updated} updated, {errors} failed",
            details={
                "created": created,
                "updated": updated,
                "errors": errors,
            },
        )

    @staticmethod
    def pledge_created(
        pledge_id: str,
        contributor_name: str,
        amount_pledged: str,
        correlation_id: Optional[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PLEDGE_CREATED,
            entity_type="pledges",
            entity_id=pledge_id,
            correlation_id=correlation_id,
            description=f"Pledge created: {contributor_name}",
            details={
                "contributor_name": contributor_name,
                "amount_pledged": amount_pledged,
            },
        )

    @staticmethod
    def pledge_updated(
        pledge_id: str,
        contributor_name: str,
        old_paid: str,
        new_paid: str,
        correlation_id: Optional[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PLEDGE_UPDATED,
            entity_type="pledges",
            entity_id=pledge_id,
            correlation_id=correlation_id,
            description=f"Pledge updated: {contributor_name}",
            details={
                "contributor_name": contributor_name,
                "old_paid": old_paid,
                "new_paid": new_paid,
            },
        )

    @staticmethod
    def ledger_entry_posted(
        entry_id: str,
        pledge_id: str,
        amount: str,
        correlation_id: Optional[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LEDGER_ENTRY_POSTED,
            entity_type="cash_transactions",
            entity_id=entry_id,
            correlation_id=correlation_id,
            description=f"Ledger entry posted for pledge payment of {amount}",
            details={
                "pledge_id": pledge_id,
                "amount": amount,
            },
        )

    @staticmethod
    def guest_count_changed(
        wedding_id: str,
        old_count: int,
        new_count: int,
        items_updated: int,
        correlation_id: Optional[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.GUEST_COUNT_CHANGED,
            entity_type="weddings",
            entity_id=wedding_id,
            correlation_id=correlation_id,
            description=f"Expected guests changed from {old_count} to {new_count}",
            details={
                "old_count": old_count,
                "new_count": new_count,
                "items_updated": items_updated,
            },
        )

    @staticmethod
    def batch_rolled_back(
        wedding_id: str,
        reverted: int,
        error_message: str,
        correlation_id: Optional[UUID],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.BATCH_ROLLED_BACK,
            severity=ActivitySeverity.ERROR,
            entity_type="weddings",
            entity_id=wedding_id,
            correlation_id=correlation_id,
            description=f"Guest-count batch rolled back ({reverted} writes reverted)",
            details={"reverted": reverted},
            error_message=error_message,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORAGE_ERROR,
            severity=ActivitySeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
            correlation_id=correlation_id,
        )
