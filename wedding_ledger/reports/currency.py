"""
Currency Display

Each wedding has one display currency. Amounts are only ever formatted,
never converted.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple, Optional


class Currency(NamedTuple):
    code: str
    symbol: str
    name: str


CURRENCIES = [
    Currency("USD", "$", "US Dollar"),
    Currency("EUR", "€", "Euro"),
    Currency("GBP", "£", "British Pound"),
    Currency("UGX", "UGX", "Ugandan Shilling"),
    Currency("KES", "KES", "Kenyan Shilling"),
    Currency("TZS", "TZS", "Tanzanian Shilling"),
    Currency("ZAR", "R", "South African Rand"),
    Currency("NGN", "₦", "Nigerian Naira"),
    Currency("GHS", "₵", "Ghanaian Cedi"),
    Currency("INR", "₹", "Indian Rupee"),
    Currency("JPY", "¥", "Japanese Yen"),
    Currency("CNY", "¥", "Chinese Yuan"),
    Currency("AUD", "A$", "Australian Dollar"),
    Currency("CAD", "C$", "Canadian Dollar"),
]

_BY_CODE = {currency.code: currency for currency in CURRENCIES}


def get_currency(code: Optional[str]) -> Optional[Currency]:
    if not code:
        return None
    return _BY_CODE.get(code.upper())


def get_currency_symbol(code: Optional[str] = "USD") -> str:
    """Symbol for a currency code, `$` when unknown."""
    currency = get_currency(code)
    return currency.symbol if currency else "$"


def format_number(amount: Optional[Decimal], rounding: str = ROUND_HALF_UP) -> str:
    """Whole amount with thousands separators, e.g. `500,000`."""
    value = Decimal(amount or 0).quantize(Decimal("1"), rounding=rounding)
    return f"{value:,}"


def format_currency(amount: Optional[Decimal], code: Optional[str] = "USD") -> str:
    """
    Format an amount for display.

    Known currencies render as symbol plus whole amount (`UGX500,000`).
    Unknown codes render the bare amount with two decimals.
    """
    currency = get_currency(code)
    if currency is None:
        value = Decimal(amount or 0).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        return f"{value}"
    return f"{currency.symbol}{format_number(amount)}"
