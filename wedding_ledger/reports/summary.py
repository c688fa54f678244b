"""
Financial Summary

Dashboard figures for one wedding, computed from records already loaded
from the store. Percentages are 0 when their denominator is 0.
"""

from decimal import Decimal
from typing import Iterable

from pydantic import BaseModel

from wedding_ledger.models.finance import (
    BudgetItem,
    CashLedgerEntry,
    Expenditure,
    Pledge,
    Wedding,
)


ZERO = Decimal("0")
HUNDRED = Decimal("100")


class FinancialSummary(BaseModel):
    """Totals shown on the wedding overview."""

    total_budget: Decimal = ZERO
    total_paid: Decimal = ZERO
    total_balance: Decimal = ZERO
    percentage_covered: Decimal = ZERO

    total_pledges: Decimal = ZERO
    pledges_paid: Decimal = ZERO
    pledges_outstanding: Decimal = ZERO
    pledge_fulfillment_rate: Decimal = ZERO

    cash_at_hand: Decimal = ZERO
    total_expenditure: Decimal = ZERO
    budget_per_guest: Decimal = ZERO

    @property
    def cash_remaining(self) -> Decimal:
        """Cash at hand less everything spent. Negative means overspent."""
        return self.cash_at_hand - self.total_expenditure


def _percent(part: Decimal, whole: Decimal) -> Decimal:
    if whole <= 0:
        return ZERO
    return part / whole * HUNDRED


def build_summary(
    wedding: Wedding,
    budget_items: Iterable[BudgetItem],
    pledges: Iterable[Pledge],
    ledger_entries: Iterable[CashLedgerEntry],
    expenditures: Iterable[Expenditure],
) -> FinancialSummary:
    """Aggregate the overview figures for a wedding."""
    budget_items = list(budget_items)
    pledges = list(pledges)

    total_budget = sum((item.amount for item in budget_items), ZERO)
    total_paid = sum((item.paid for item in budget_items), ZERO)
    total_pledges = sum((p.amount_pledged for p in pledges), ZERO)
    pledges_paid = sum((p.amount_paid for p in pledges), ZERO)

    budget_per_guest = ZERO
    if wedding.expected_guests > 0:
        budget_per_guest = total_budget / wedding.expected_guests

    return FinancialSummary(
        total_budget=total_budget,
        total_paid=total_paid,
        total_balance=sum((item.balance for item in budget_items), ZERO),
        percentage_covered=_percent(total_paid, total_budget),
        total_pledges=total_pledges,
        pledges_paid=pledges_paid,
        pledges_outstanding=sum((p.balance for p in pledges), ZERO),
        pledge_fulfillment_rate=_percent(pledges_paid, total_pledges),
        cash_at_hand=sum((entry.amount for entry in ledger_entries), ZERO),
        total_expenditure=sum((e.amount for e in expenditures), ZERO),
        budget_per_guest=budget_per_guest,
    )
