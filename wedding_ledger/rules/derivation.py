"""
Derivation Rules

Every money-tracking entity (budget item, pledge, vendor contract) has
the same shape: a planned amount, a paid amount, a balance and a status.
The balance and status are never entered by hand; they are derived here.

DESIGN DECISION: Plain functions with no storage and no state.
Callers refresh a model copy before persisting it, so a stored record
can never carry a balance that disagrees with its planned and paid amounts.

Overpayment is allowed and shows up as a negative balance.
"""

from decimal import Decimal

from wedding_ledger.models.finance import (
    BudgetItem,
    Derivation,
    MonetaryStatus,
    Pledge,
    VendorContract,
)


def derive(planned: Decimal, paid: Decimal) -> Derivation:
    """
    Derive balance and status from a planned and a paid amount.

    fulfilled: paid >= planned and planned > 0
    partial:   0 < paid < planned
    pending:   everything else, including planned == 0
    """
    balance = planned - paid

    if planned > 0 and paid >= planned:
        status = MonetaryStatus.FULFILLED
    elif 0 < paid < planned:
        status = MonetaryStatus.PARTIAL
    else:
        status = MonetaryStatus.PENDING

    return Derivation(balance=balance, status=status)


def budget_amount(quantity: Decimal, unit_cost: Decimal) -> Decimal:
    """Planned amount of a budget line."""
    return quantity * unit_cost


def refresh_budget_item(item: BudgetItem) -> BudgetItem:
    """Copy of the item with balance and status derived from amount and paid."""
    derived = derive(item.amount, item.paid)
    return item.model_copy(update={
        "balance": derived.balance,
        "status": derived.status,
    })


def refresh_pledge(pledge: Pledge) -> Pledge:
    derived = derive(pledge.amount_pledged, pledge.amount_paid)
    return pledge.model_copy(update={
        "balance": derived.balance,
        "status": derived.status,
    })


def refresh_vendor_contract(contract: VendorContract) -> VendorContract:
    derived = derive(contract.contract_amount, contract.amount_paid)
    return contract.model_copy(update={
        "balance": derived.balance,
        "status": derived.status,
    })
