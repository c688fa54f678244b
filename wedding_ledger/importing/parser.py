"""
Free-Text Pledge List Parser

Reads the numbered contribution lists that committees keep in group
chats, e.g.:

    Wedding contributions
    1. Jane Doe 500,000✅
    2. John K 200k 🅿️ paid 50k balance 150k
    3. Uncle Sam 100,000

Only lines starting with `<integer>.` are list items; everything else
(headers, blank lines, chatter) is ignored. A list item becomes a
ParsedPledge, or is rejected when its amount is missing or not positive.

DESIGN DECISION: The parser never raises.
Human-typed text is messy. A bad line is counted and skipped, and the
counts are exposed through `stats` so the caller can report them.

NOTE: A balance stated on the line is taken literally, even when it
disagrees with pledged minus paid. Source lists are often rounded by
hand and the stated figure is what the committee agreed on.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Iterable, Iterator, Optional

from pydantic import ValidationError

from wedding_ledger.models.finance import MonetaryStatus
from wedding_ledger.models.imports import ParsedPledge, ParseStats


DONE_MARKER = "\u2705"  # check mark
PARTIAL_MARKER = "\U0001F17F\uFE0F"  # squared P, emoji presentation

_ORDINAL = re.compile(r"^\d+\.\s*")
_AMOUNT = r"[\d,]+[kK]?"
_ITEM = re.compile(
    r"^(?P<name>.+?)\s+(?P<amount>-?" + _AMOUNT + r")"
    r"\s*(?P<marker>\u2705|\U0001F17F\uFE0F?)?"
)
_PAID = re.compile(r"\bpaid\s+(" + _AMOUNT + r")", re.IGNORECASE)
_BALANCE = re.compile(r"\bbalance\s+(" + _AMOUNT + r")", re.IGNORECASE)


def parse_amount(token: str) -> Optional[Decimal]:
    """
    Parse an amount token such as `500,000`, `200k` or `-50K`.

    Separators are dropped, a `k` suffix multiplies by 1000 and the sign
    is discarded. Returns None if the token holds no number.
    """
    cleaned = token.replace(",", "").strip().lower()
    multiplier = Decimal("1")
    if cleaned.endswith("k"):
        cleaned = cleaned[:-1]
        multiplier = Decimal("1000")

    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None

    return abs(value * multiplier)


def _labelled_amount(pattern: re.Pattern, text: str) -> Optional[Decimal]:
    match = pattern.search(text)
    if match is None:
        return None
    return parse_amount(match.group(1))


def is_list_item(line: str) -> bool:
    """True if the line starts with a `N.` ordinal."""
    return _ORDINAL.match(line.strip()) is not None


def parse_line(raw: str, line_number: int) -> Optional[ParsedPledge]:
    """
    Parse one list item.

    Returns None if the line is not a list item or does not parse.
    """
    line = raw.strip()
    if not is_list_item(line):
        return None

    content = _ORDINAL.sub("", line, count=1).strip()
    match = _ITEM.match(content)
    if match is None:
        return None

    amount_pledged = parse_amount(match.group("amount"))
    if amount_pledged is None or amount_pledged <= 0:
        return None

    if DONE_MARKER in content:
        amount_paid = amount_pledged
        balance = Decimal("0")
    else:
        # Labels are only looked for after the amount, so a contributor
        # called "Balance" cannot be mistaken for one
        remainder = content[match.end("amount"):]
        paid = _labelled_amount(_PAID, remainder)
        stated_balance = _labelled_amount(_BALANCE, remainder)

        amount_paid = paid if paid is not None else Decimal("0")
        if stated_balance is not None:
            balance = stated_balance
        else:
            balance = amount_pledged - amount_paid

    if amount_paid >= amount_pledged:
        status = MonetaryStatus.FULFILLED
        balance = Decimal("0")
    elif amount_paid > 0:
        status = MonetaryStatus.PARTIAL
    else:
        status = MonetaryStatus.PENDING

    try:
        return ParsedPledge(
            name=match.group("name").strip(),
            amount_pledged=amount_pledged,
            amount_paid=amount_paid,
            balance=balance,
            status=status,
            line_number=line_number,
            raw_text=raw,
        )
    except ValidationError:
        return None


class PledgeListParser:
    """
    Turns bulk text into candidate pledges.

    Each call to `parse_lines` or `parse_text` starts a fresh run and
    resets `stats`. Results are produced lazily, so stats are complete
    once the returned iterator is exhausted.
    """

    def __init__(self):
        self.stats = ParseStats()

    def parse_lines(self, lines: Iterable[str]) -> Iterator[ParsedPledge]:
        """Lazily parse a sequence of lines."""
        self.stats = ParseStats()
        return self._run(lines, self.stats)

    def parse_text(self, text: str) -> Iterator[ParsedPledge]:
        """Lazily parse a whole pasted message."""
        return self.parse_lines(text.splitlines())

    def parse_all(self, text: str) -> list[ParsedPledge]:
        """Parse a whole message eagerly."""
        return list(self.parse_text(text))

    @staticmethod
    def _run(lines: Iterable[str], stats: ParseStats) -> Iterator[ParsedPledge]:
        for line_number, raw in enumerate(lines, start=1):
            stats.lines_read += 1
            if not raw.strip():
                continue
            if not is_list_item(raw):
                stats.ignored += 1
                continue

            candidate = parse_line(raw, line_number)
            if candidate is None:
                stats.rejected += 1
                continue

            stats.candidates += 1
            yield candidate
