"""Tests for the command line entry point."""

import pytest
from decimal import Decimal

from wedding_ledger.cli import build_parser, main
from wedding_ledger.models import BudgetItem, Collection, Wedding
from wedding_ledger.services.storage import InMemoryRecordStore

from conftest import WEDDING_ID


LIST_TEXT = "Pledges\n1. Jane Doe 500,000\u2705\n2. John K 200k paid 50k\n3. no amount\n"


@pytest.fixture
def list_file(tmp_path):
    path = tmp_path / "pledges.txt"
    path.write_text(LIST_TEXT, encoding="utf-8")
    return path


class TestCli:
    """Tests for wedding-ledger commands."""

    def test_parse_command(self, list_file, capsys):
        """Test parse prints candidates and skip counts."""
        assert main(["parse", str(list_file)]) == 0
        out = capsys.readouterr().out
        assert "line 2: Jane Doe | pledged 500,000 | paid 500,000 | balance 0 | fulfilled" in out
        assert "line 3: John K" in out
        assert "2 pledge(s) read, 2 line(s) skipped" in out

    def test_import_command(self, list_file, capsys):
        """Test import reconciles into the given store."""
        store = InMemoryRecordStore()
        code = main(["import", str(list_file), "--wedding-id", WEDDING_ID], store=store)
        assert code == 0
        assert store.count(Collection.PLEDGES.value) == 2
        assert store.count(Collection.CASH_TRANSACTIONS.value) == 2
        assert "Created: 2 pledge(s)" in capsys.readouterr().out

    def test_import_dry_run_writes_nothing(self, list_file, capsys):
        """Test --dry-run only prints decisions."""
        store = InMemoryRecordStore()
        code = main(
            ["import", str(list_file), "--wedding-id", WEDDING_ID, "--dry-run"],
            store=store,
        )
        assert code == 0
        assert store.count(Collection.PLEDGES.value) == 0
        out = capsys.readouterr().out
        assert "create: Jane Doe" in out

    def test_missing_file(self, tmp_path, capsys):
        """Test unreadable input is reported."""
        assert main(["parse", str(tmp_path / "missing.txt")]) == 2
        assert "Could not read input" in capsys.readouterr().out

    def test_guests_command(self, capsys):
        """Test guests rescales the budget."""
        wedding = Wedding(expected_guests=10)
        item = BudgetItem(
            wedding_id=WEDDING_ID,
            item_name="Food",
            quantity=Decimal("10"),
            unit_cost=Decimal("5"),
            amount=Decimal("50"),
            is_guest_dependent=True,
            guest_multiplier=Decimal("1"),
        )
        store = InMemoryRecordStore({
            Collection.WEDDINGS.value: [{**wedding.to_record(), "id": WEDDING_ID}],
            Collection.BUDGET_ITEMS.value: [item.to_record()],
        })

        code = main(["guests", "--wedding-id", WEDDING_ID, "--count", "20"], store=store)

        assert code == 0
        assert "1 budget item(s) rescaled" in capsys.readouterr().out

    def test_guests_unknown_wedding(self, capsys):
        """Test failures give a non-zero exit code."""
        code = main(["guests", "--wedding-id", "nope", "--count", "20"], store=InMemoryRecordStore())
        assert code == 1
        assert "Wedding not found: nope" in capsys.readouterr().out

    def test_negative_count_refused(self):
        """Test argparse rejects a negative guest count."""
        with pytest.raises(SystemExit):
            main(["guests", "--wedding-id", WEDDING_ID, "--count", "-1"], store=InMemoryRecordStore())

    def test_command_required(self):
        """Test a subcommand must be given."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
