"""
Activity Logger

DESIGN DECISION: Every significant engine action is logged.
This provides:
1. Traceability of ledger postings back to the run that made them
2. Debugging capability when a candidate fails to import
3. Correlation IDs to group all events of one run

The activity logger:
- Writes structured JSON events through structlog
- Never persists events (the cash ledger is the only kept history)
- Gracefully handles failures (a logging problem never breaks an import)
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from wedding_ledger.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivitySeverity,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class ActivityLogger:
    """Central activity logging service."""

    def __init__(self, logger_name: str = "wedding_ledger"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: ActivityEvent) -> bool:
        """
        Log an activity event.

        Returns False if the event could not be written.
        """
        log_dict = event.to_log_dict()
        try:
            if event.severity == ActivitySeverity.ERROR:
                self._logger.error("activity_event", **log_dict)
            elif event.severity == ActivitySeverity.WARNING:
                self._logger.warning("activity_event", **log_dict)
            elif event.severity == ActivitySeverity.DEBUG:
                self._logger.debug("activity_event", **log_dict)
            else:
                self._logger.info("activity_event", **log_dict)
        except Exception:
            # A broken log handler must not abort an import
            return False
        return True

    def log_import_started(
        self,
        wedding_id: str,
        candidates: int,
        skipped_lines: int,
        correlation_id: UUID,
    ) -> None:
        """Log the start of a bulk import."""
        self.log(ActivityEventBuilder.import_started(
            wedding_id=wedding_id,
            candidates=candidates,
            skipped_lines=skipped_lines,
            correlation_id=correlation_id,
        ))

    def log_candidate_failed(
        self,
        name: str,
        line_number: int,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log one candidate that could not be imported."""
        self.log(ActivityEventBuilder.import_candidate_failed(
            name=name,
            line_number=line_number,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_import_completed(
        self,
        wedding_id: str,
        created: int,
        updated: int,
        errors: int,
        correlation_id: UUID,
    ) -> None:
        """Log the end of a bulk import."""
        self.log(ActivityEventBuilder.import_completed(
            wedding_id=wedding_id,
            created=created,
            updated=updated,
            errors=errors,
            correlation_id=correlation_id,
        ))

    def log_pledge_created(
        self,
        pledge_id: str,
        contributor_name: str,
        amount_pledged: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.pledge_created(
            pledge_id=pledge_id,
            contributor_name=contributor_name,
            amount_pledged=amount_pledged,
            correlation_id=correlation_id,
        ))

    def log_pledge_updated(
        self,
        pledge_id: str,
        contributor_name: str,
        old_paid: str,
        new_paid: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.pledge_updated(
            pledge_id=pledge_id,
            contributor_name=contributor_name,
            old_paid=old_paid,
            new_paid=new_paid,
            correlation_id=correlation_id,
        ))

    def log_ledger_entry_posted(
        self,
        entry_id: str,
        pledge_id: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.ledger_entry_posted(
            entry_id=entry_id,
            pledge_id=pledge_id,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_guest_count_changed(
        self,
        wedding_id: str,
        old_count: int,
        new_count: int,
        items_updated: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.guest_count_changed(
            wedding_id=wedding_id,
            old_count=old_count,
            new_count=new_count,
            items_updated=items_updated,
            correlation_id=correlation_id,
        ))

    def log_batch_rolled_back(
        self,
        wedding_id: str,
        reverted: int,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.batch_rolled_back(
            wedding_id=wedding_id,
            reverted=reverted,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a run (e.g., one import).
    Pass it through all subsequent operations.
    """
    return uuid4()
