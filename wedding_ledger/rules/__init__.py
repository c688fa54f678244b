"""Financial derivation and guest-scaling rules."""

from wedding_ledger.rules.derivation import (
    budget_amount,
    derive,
    refresh_budget_item,
    refresh_pledge,
    refresh_vendor_contract,
)
from wedding_ledger.rules.guest_scaling import changed_items, rescale, rescale_item

__all__ = [
    "budget_amount",
    "changed_items",
    "derive",
    "refresh_budget_item",
    "refresh_pledge",
    "refresh_vendor_contract",
    "rescale",
    "rescale_item",
]
