"""Command line entry point: parse, import and rescale from a terminal."""

import argparse
import asyncio
from pathlib import Path
from typing import Optional

from wedding_ledger.importing import PledgeListParser
from wedding_ledger.orchestrator import create_app_components
from wedding_ledger.reports import format_number
from wedding_ledger.services.storage import RecordStore, StorageError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wedding-ledger",
        description="Wedding contribution ledger and pledge list import")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_parser = subparsers.add_parser(
        "parse", help="Show the pledges read from a pasted list, without saving")
    parse_parser.add_argument(
        "file",
        type=Path,
        help="Text file holding the numbered pledge list.",
    )

    import_parser = subparsers.add_parser(
        "import", help="Reconcile a pledge list into a wedding's pledges")
    import_parser.add_argument(
        "file",
        type=Path,
        help="Text file holding the numbered pledge list.",
    )
    import_parser.add_argument(
        "--wedding-id",
        required=True,
        help="Wedding the pledges belong to.",
    )
    import_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be created or updated without writing.",
    )

    guests_parser = subparsers.add_parser(
        "guests", help="Change the expected guest count and rescale the budget")
    guests_parser.add_argument(
        "--wedding-id",
        required=True,
        help="Wedding to update.",
    )
    guests_parser.add_argument(
        "--count",
        type=int,
        required=True,
        help="New expected guest count.",
    )

    return parser


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def run_parse(path: Path) -> int:
    parser = PledgeListParser()
    for candidate in parser.parse_text(_read_text(path)):
        print(
            f"line {candidate.line_number}: {candidate.name} | "
            f"pledged {format_number(candidate.amount_pledged)} | "
            f"paid {format_number(candidate.amount_paid)} | "
            f"balance {format_number(candidate.balance)} | "
            f"{candidate.status.value}"
        )
    stats = parser.stats
    print(f"{stats.candidates} pledge(s) read, {stats.skipped} line(s) skipped")
    return 0


async def run_import(path: Path, wedding_id: str, dry_run: bool, store: Optional[RecordStore]) -> int:
    import_flow, _, _, _ = create_app_components(store=store)
    text = _read_text(path)

    if dry_run:
        existing = await import_flow.load_pledges(wedding_id)
        for row in import_flow.preview(text, existing):
            target = ""
            if row.matched_pledge is not None:
                target = f" -> {row.matched_pledge.contributor_name} ({row.match_rule.value})"
            print(f"{row.action.value}: {row.candidate.name}{target}")
        return 0

    result = await import_flow.reconcile_wedding(text, wedding_id)
    print(result.summary_text())
    return 1 if result.has_errors else 0


async def run_guests(wedding_id: str, count: int, store: Optional[RecordStore]) -> int:
    _, guest_flow, _, _ = create_app_components(store=store)
    report = await guest_flow.change_guest_count(wedding_id, count)

    if report.succeeded:
        print(f"Guest count set to {count}; {report.items_updated} budget item(s) rescaled")
        return 0

    if report.rolled_back:
        print("Guest count change failed and was rolled back:")
    else:
        print("Guest count change failed:")
    for error in report.errors:
        print(f"  - {error}")
    return 1


def main(argv: Optional[list[str]] = None, store: Optional[RecordStore] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "parse":
            return run_parse(args.file)
        if args.command == "import":
            return asyncio.run(run_import(args.file, args.wedding_id, args.dry_run, store))
        if args.command == "guests":
            if args.count < 0:
                parser.error("--count cannot be negative")
            return asyncio.run(run_guests(args.wedding_id, args.count, store))
    except OSError as e:
        print(f"Could not read input: {e}")
        return 2
    except StorageError as e:
        print(f"Storage error: {e}")
        return 2

    parser.error("Unknown command")
    return 1


if __name__ == "__main__":  # pragma: no cover - exercised via CLI entry point
    raise SystemExit(main())
