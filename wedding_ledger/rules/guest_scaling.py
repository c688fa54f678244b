"""
Guest-Scaling Resolver

Guest-dependent budget lines (catering per head, chairs, favours) follow
the wedding's expected guest count:

    quantity = guests * guest_multiplier
    amount   = quantity * unit_cost

Balance and status are then re-derived against the line's existing `paid`.
Lines that do not depend on guests are returned unchanged.

Rescaling is idempotent. Persisting the result is the job of
GuestCountFlow in the orchestrator, which treats it as one batch.
"""

from decimal import Decimal
from typing import Iterable

from wedding_ledger.models.finance import BudgetItem
from wedding_ledger.rules.derivation import budget_amount, refresh_budget_item


def rescale_item(item: BudgetItem, guest_count: int) -> BudgetItem:
    """Recompute one guest-dependent item for a guest count."""
    quantity = Decimal(guest_count) * item.guest_multiplier
    rescaled = item.model_copy(update={
        "quantity": quantity,
        "amount": budget_amount(quantity, item.unit_cost),
    })
    return refresh_budget_item(rescaled)


def rescale(items: Iterable[BudgetItem], new_guest_count: int) -> list[BudgetItem]:
    """
    Recompute every guest-dependent item for a new guest count.

    Raises:
        ValueError: If the guest count is negative
    """
    if new_guest_count < 0:
        raise ValueError(f"Guest count cannot be negative: {new_guest_count}")

    return [
        rescale_item(item, new_guest_count) if item.is_guest_dependent else item
        for item in items
    ]


def changed_items(
    before: Iterable[BudgetItem],
    after: Iterable[BudgetItem],
) -> list[tuple[BudgetItem, BudgetItem]]:
    """Pairs of (old, new) for items whose stored values changed."""
    return [
        (old, new)
        for old, new in zip(before, after)
        if old.to_record() != new.to_record()
    ]
