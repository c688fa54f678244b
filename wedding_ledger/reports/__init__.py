"""Reports: currency display, financial summary and the shareable pledge list."""

from wedding_ledger.reports.currency import (
    CURRENCIES,
    format_currency,
    format_number,
    get_currency_symbol,
)
from wedding_ledger.reports.message import render_pledge_list
from wedding_ledger.reports.summary import FinancialSummary, build_summary

__all__ = [
    "CURRENCIES",
    "FinancialSummary",
    "build_summary",
    "format_currency",
    "format_number",
    "get_currency_symbol",
    "render_pledge_list",
]
