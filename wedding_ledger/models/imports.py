"""
Bulk Import Models

CRITICAL: A ParsedPledge is PROPOSED data read from human-typed text.
It is only trusted after it has been reconciled against the existing
pledges (matched, merged, and mirrored into the ledger).
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from wedding_ledger.models.finance import MonetaryStatus, Pledge


class MatchRule(str, Enum):
    """Which contributor matching rule fired, in precedence order."""
    EXACT = "exact"
    CONTAINS = "contains"
    HONORIFIC = "honorific"


class ImportAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"


class ParsedPledge(BaseModel):
    """One candidate pledge read from a numbered line of bulk text."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    name: str = Field(..., min_length=1)
    amount_pledged: Decimal = Field(..., gt=0)
    amount_paid: Decimal = Field(default=Decimal("0"), ge=0)
    balance: Decimal = Field(
        ...,
        description="Stated balance when the line gives one, else derived"
    )
    status: MonetaryStatus
    line_number: int = Field(..., ge=1, description="1-based line in the submitted text")
    raw_text: str


class ParseStats(BaseModel):
    """Counters for one parse run, reset on every run."""

    lines_read: int = 0
    candidates: int = 0
    ignored: int = Field(default=0, description="Non-empty lines without an `N.` prefix")
    rejected: int = Field(default=0, description="Numbered lines that did not parse")

    @property
    def skipped(self) -> int:
        return self.ignored + self.rejected


class ImportPreviewRow(BaseModel):
    """What an import would do with one candidate."""

    candidate: ParsedPledge
    action: ImportAction
    matched_pledge: Optional[Pledge] = None
    match_rule: Optional[MatchRule] = None


class ImportResult(BaseModel):
    """
    Outcome of one reconciliation run.

    Partial success is normal: `errors` lists the candidates that failed,
    everything else has already been applied.
    """

    created: int = 0
    updated: int = 0
    errors: list[str] = Field(default_factory=list)

    ledger_entries_posted: int = 0
    candidates: int = 0
    skipped_lines: int = 0

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def summary_text(self) -> str:
        """Short report suitable for showing to the user."""
        heading = "Import completed with errors" if self.has_errors else "Import successful"
        lines = [
            heading,
            f"Created: {self.created} pledge(s)",
            f"Updated: {self.updated} pledge(s)",
        ]
        if self.skipped_lines:
            lines.append(f"Skipped lines: {self.skipped_lines}")
        if self.errors:
            lines.append("Errors:")
            lines.extend(f"  - {error}" for error in self.errors)
        return "\n".join(lines)
