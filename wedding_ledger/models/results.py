"""Validation and batch result models."""

from typing import Optional

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix for the user"
    )


class ValidationResult(BaseModel):
    """Result of validating directly entered pledge data."""

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]


class RescaleReport(BaseModel):
    """
    Outcome of a guest-count change.

    The guest count and the rescaled items form one batch: if any write
    fails, the writes already applied are reverted and `rolled_back` is set.
    """

    wedding_updated: bool = False
    items_updated: int = 0
    errors: list[str] = Field(default_factory=list)
    rolled_back: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.errors
