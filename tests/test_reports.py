"""Tests for currency display, the financial summary and the pledge list."""

import pytest
from datetime import date
from decimal import Decimal

from wedding_ledger.importing import PledgeListParser
from wedding_ledger.models import BudgetItem, CashLedgerEntry, Expenditure, Wedding
from wedding_ledger.reports import (
    build_summary,
    format_currency,
    get_currency_symbol,
    render_pledge_list,
)

from conftest import make_pledge


class TestCurrency:
    """Tests for currency formatting."""

    @pytest.mark.parametrize(
        "amount, code, expected",
        [
            (Decimal("500000"), "UGX", "UGX500,000"),
            (Decimal("1234.56"), "USD", "$1,235"),
            (Decimal("99.5"), "EUR", "€100"),
            (None, "KES", "KES0"),
            (Decimal("10"), "XYZ", "10.00"),
            (Decimal("1500"), "usd", "$1,500"),
        ],
    )
    def test_format_currency(self, amount, code, expected):
        """Test symbols, separators and whole-number rounding."""
        assert format_currency(amount, code) == expected

    def test_currency_symbol(self):
        """Test symbols and the dollar fallback."""
        assert get_currency_symbol("NGN") == "₦"
        assert get_currency_symbol("XYZ") == "$"


class TestBuildSummary:
    """Tests for the overview figures."""

    def test_summary_totals(self):
        """Test budget, pledge and cash aggregates."""
        wedding = Wedding(id="w1", expected_guests=100)
        items = [
            BudgetItem(wedding_id="w1", item_name="Venue", amount=Decimal("6000"),
                       paid=Decimal("3000"), balance=Decimal("3000")),
            BudgetItem(wedding_id="w1", item_name="Food", amount=Decimal("4000"),
                       paid=Decimal("0"), balance=Decimal("4000")),
        ]
        pledges = [make_pledge("A", "1000", "1000"), make_pledge("B", "3000", "500")]
        cash = [CashLedgerEntry(wedding_id="w1", transaction_date=date(2025, 1, 1),
                                amount=Decimal("1500"))]
        spent = [Expenditure(wedding_id="w1", expense_date=date(2025, 1, 2),
                             category="Venue", amount=Decimal("2000"))]

        summary = build_summary(wedding, items, pledges, cash, spent)

        assert summary.total_budget == Decimal("10000")
        assert summary.total_paid == Decimal("3000")
        assert summary.total_balance == Decimal("7000")
        assert summary.percentage_covered == Decimal("30")
        assert summary.total_pledges == Decimal("4000")
        assert summary.pledges_paid == Decimal("1500")
        assert summary.pledges_outstanding == Decimal("2500")
        assert summary.pledge_fulfillment_rate == Decimal("37.5")
        assert summary.cash_at_hand == Decimal("1500")
        assert summary.total_expenditure == Decimal("2000")
        assert summary.cash_remaining == Decimal("-500")
        assert summary.budget_per_guest == Decimal("100")

    def test_empty_summary_is_zero_safe(self):
        """Test zero denominators give zero, not errors."""
        summary = build_summary(Wedding(id="w1"), [], [], [], [])
        assert summary.percentage_covered == 0
        assert summary.pledge_fulfillment_rate == 0
        assert summary.budget_per_guest == 0


class TestRenderPledgeList:
    """Tests for the shareable pledge list."""

    def _wedding(self):
        return Wedding(id="w1", groom_name="Tim", bride_name="Todza", wedding_date=date(2026, 2, 21))

    def test_line_formats(self):
        """Test the three line shapes."""
        pledges = [
            make_pledge("Jane Doe", "500000", "500000"),
            make_pledge("John K", "200000", "50000"),
            make_pledge("Uncle Sam", "100000"),
        ]
        text = render_pledge_list(pledges, self._wedding())
        lines = text.splitlines()

        assert lines[0] == "Pledges towards the wedding of Tim & Todza - 21st February 2026"
        assert "1. Jane Doe 500,000 \u2705" in lines
        assert "2. John K 200,000 \U0001F17F\uFE0F paid 50,000 balance 150,000" in lines
        assert "3. Uncle Sam 100,000 \U0001F17F\uFE0F" in lines

    def test_rendered_list_parses_back(self):
        """Test the shared list can be pasted straight back into an import."""
        pledges = [
            make_pledge("Jane Doe", "500000", "500000"),
            make_pledge("John K", "200000", "50000"),
            make_pledge("Uncle Sam", "100000"),
        ]
        parser = PledgeListParser()
        parsed = parser.parse_all(render_pledge_list(pledges, self._wedding()))

        assert [(p.name, p.amount_pledged, p.amount_paid) for p in parsed] == [
            ("Jane Doe", Decimal("500000"), Decimal("500000")),
            ("John K", Decimal("200000"), Decimal("50000")),
            ("Uncle Sam", Decimal("100000"), Decimal("0")),
        ]
        assert parser.stats.rejected == 0

    def test_fractional_paid_not_rounded_up(self):
        """Test paid is truncated so re-importing the list posts nothing new."""
        pledge = make_pledge("Jane Doe", "100000", "50000.50")
        line = render_pledge_list([pledge], self._wedding()).splitlines()[-1]

        assert "paid 50,000 " in line
        [parsed] = PledgeListParser().parse_all(line)
        assert parsed.amount_paid <= pledge.amount_paid

    def test_empty_list(self):
        """Test a wedding without pledges says so."""
        assert render_pledge_list([], self._wedding()).endswith("No pledges to display.")
