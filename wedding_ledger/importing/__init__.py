"""Bulk text import: list parsing and contributor matching."""

from wedding_ledger.importing.matcher import (
    ContributorMatch,
    find_match,
    match_contributor,
    normalize_name,
    strip_honorific,
)
from wedding_ledger.importing.parser import (
    DONE_MARKER,
    PARTIAL_MARKER,
    PledgeListParser,
    parse_amount,
    parse_line,
)

__all__ = [
    "ContributorMatch",
    "DONE_MARKER",
    "PARTIAL_MARKER",
    "PledgeListParser",
    "find_match",
    "match_contributor",
    "normalize_name",
    "parse_amount",
    "parse_line",
    "strip_honorific",
]
