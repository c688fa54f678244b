"""
Pledge List Message

Renders the numbered pledge list that gets shared back to the group
chat. The list uses the same grammar the import parser reads, so an
edited copy of a shared list can be pasted straight back in.

    1. Jane Doe 500,000 ✅
    2. John K 200,000 🅿️ paid 50,000 balance 150,000
    3. Uncle Sam 100,000 🅿️
"""

from decimal import ROUND_DOWN, Decimal
from typing import Sequence

from wedding_ledger.importing.parser import DONE_MARKER, PARTIAL_MARKER
from wedding_ledger.models.finance import MonetaryStatus, Pledge, Wedding
from wedding_ledger.reports.currency import format_number


# Amounts within a cent count as settled
_TOLERANCE = Decimal("0.01")


def _ordinal_suffix(day: int) -> str:
    if 3 < day < 21:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def render_header(wedding: Wedding) -> str:
    title = f"Pledges towards the wedding of {wedding.couple_names}"
    if wedding.wedding_date:
        day = wedding.wedding_date.day
        title += (
            f" - {day}{_ordinal_suffix(day)} "
            f"{wedding.wedding_date.strftime('%B %Y')}"
        )
    return f"{title}\n\nBelow is the updated list of pledges received:"


def render_pledge_line(position: int, pledge: Pledge) -> str:
    """One numbered line for a pledge."""
    head = f"{position}. {pledge.contributor_name} {format_number(pledge.amount_pledged)}"

    if pledge.balance <= _TOLERANCE or pledge.status == MonetaryStatus.FULFILLED:
        return f"{head} {DONE_MARKER}"
    if pledge.amount_paid > _TOLERANCE:
        # Paid is truncated so a pasted-back list never claims money not received
        return (
            f"{head} {PARTIAL_MARKER} paid {format_number(pledge.amount_paid, ROUND_DOWN)}"
            f" balance {format_number(pledge.balance)}"
        )
    return f"{head} {PARTIAL_MARKER}"


def render_pledge_list(pledges: Sequence[Pledge], wedding: Wedding) -> str:
    """The full shareable message."""
    header = render_header(wedding)
    if not pledges:
        return f"{header}\n\nNo pledges to display."

    lines = [render_pledge_line(i, p) for i, p in enumerate(pledges, start=1)]
    return header + "\n\n" + "\n".join(lines)
