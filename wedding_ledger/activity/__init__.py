"""Activity logging package."""

from wedding_ledger.activity.logger import ActivityLogger, create_correlation_id

__all__ = ["ActivityLogger", "create_correlation_id"]
