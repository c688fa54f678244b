"""
Contributor Matcher

Decides whether a name read from bulk text refers to a contributor who
already has a pledge. Rules, in precedence order:

1. EXACT      - normalised names are equal
2. CONTAINS   - either normalised name contains the other
3. HONORIFIC  - with a leading honorific removed from both names,
                equal or containing

Each rule is tried against every existing record before the next rule
is tried, and the first hit wins. There is no ambiguity detection.

DESIGN DECISION: Matching is deliberately permissive.
A duplicate pledge splits one contributor's payments across two records,
which is harder to notice than a wrong merge. The cost is that a short
name like "Ann" merges into "Anna Smith".
"""

import re
from operator import attrgetter
from typing import Callable, NamedTuple, Optional, Sequence, TypeVar

from wedding_ledger.models.imports import MatchRule


HONORIFICS = ("family of", "family", "counsel", "uncle", "prof", "mrs", "mr", "dr")

_HONORIFIC_PREFIX = re.compile(
    r"^(?:" + "|".join(re.escape(h) for h in HONORIFICS) + r")\.?\s+",
    re.IGNORECASE,
)

T = TypeVar("T")


class ContributorMatch(NamedTuple):
    """An existing record and the rule that matched it."""
    record: object
    rule: MatchRule


def normalize_name(name: Optional[str]) -> str:
    """Lowercase, trim and collapse internal whitespace."""
    if not name:
        return ""
    return " ".join(name.lower().split())


def strip_honorific(normalized: str) -> str:
    """Remove one leading honorific such as `mrs` or `family of`."""
    return _HONORIFIC_PREFIX.sub("", normalized, count=1).strip()


def _exact(candidate: str, existing: str) -> bool:
    return candidate == existing


def _contains(candidate: str, existing: str) -> bool:
    return candidate in existing or existing in candidate


def _honorific(candidate: str, existing: str) -> bool:
    bare_candidate = strip_honorific(candidate)
    bare_existing = strip_honorific(existing)
    if not bare_candidate or not bare_existing:
        return False
    return _exact(bare_candidate, bare_existing) or _contains(bare_candidate, bare_existing)


_RULES: list[tuple[MatchRule, Callable[[str, str], bool]]] = [
    (MatchRule.EXACT, _exact),
    (MatchRule.CONTAINS, _contains),
    (MatchRule.HONORIFIC, _honorific),
]


def match_contributor(
    name: str,
    records: Sequence[T],
    key: Callable[[T], str] = attrgetter("contributor_name"),
) -> Optional[ContributorMatch]:
    """
    Find the existing record a name refers to.

    Args:
        name: Contributor name as read from the text
        records: Existing records (pledges by default)
        key: Returns the contributor name of a record

    Returns:
        The first match under rule precedence, or None
    """
    candidate = normalize_name(name)
    if not candidate:
        return None

    names = [(record, normalize_name(key(record))) for record in records]
    names = [(record, existing) for record, existing in names if existing]

    for rule, applies in _RULES:
        for record, existing in names:
            if applies(candidate, existing):
                return ContributorMatch(record=record, rule=rule)

    return None


def find_match(
    name: str,
    records: Sequence[T],
    key: Callable[[T], str] = attrgetter("contributor_name"),
) -> Optional[T]:
    """The existing record a name refers to, if any."""
    match = match_contributor(name, records, key=key)
    return match.record if match else None
