"""
Main Orchestrator for Wedding Ledger

This module ties together all the components and defines the
end-to-end flows for:
1. Bulk pledge import (text -> parse -> match -> create/update -> mirror)
2. Guest count change (rescale guest-dependent budget lines as one batch)
3. Direct pledge entry (form or public submission -> validate -> save -> mirror)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Pledge payments reach the cash ledger only through the LedgerMirror
- A bulk import never aborts on one bad candidate; failures are reported
- A guest count change is applied completely or reverted

The engine holds no ambient state. Everything a flow needs (records,
wedding id, the date of "today") comes in as parameters.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence, Union
from uuid import UUID

from pydantic import ValidationError

from wedding_ledger.activity import ActivityLogger, create_correlation_id
from wedding_ledger.config import ImportSettings, get_settings
from wedding_ledger.importing import PledgeListParser, match_contributor
from wedding_ledger.ledger import LedgerMirror
from wedding_ledger.models.finance import (
    BudgetItem,
    Collection,
    MonetaryStatus,
    Pledge,
    Wedding,
)
from wedding_ledger.models.imports import (
    ImportAction,
    ImportPreviewRow,
    ImportResult,
    ParsedPledge,
)
from wedding_ledger.models.results import RescaleReport
from wedding_ledger.rules import changed_items, derive, refresh_pledge, rescale
from wedding_ledger.services.storage import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
    InMemoryRecordStore,
    RecordStore,
    StorageError,
)
from wedding_ledger.validation import PledgeInputValidator


def _contributor_name(record: Union[Pledge, ParsedPledge]) -> str:
    if isinstance(record, ParsedPledge):
        return record.name
    return record.contributor_name


class PledgeImportFlow:
    """
    Orchestrates the bulk pledge import.

    Flow, per candidate line:
    1. Match → find the existing pledge the name refers to
    2. Merge → update it (paid only ever moves up), or create a new pledge
    3. Mirror → post the paid increase to the cash ledger

    Partial success is the accepted outcome. A failing candidate is
    recorded as "<name>: <message>" and the next one is processed.
    Nothing already applied is rolled back.
    """

    def __init__(
        self,
        store: RecordStore,
        mirror: Optional[LedgerMirror] = None,
        activity_logger: Optional[ActivityLogger] = None,
        import_settings: Optional[ImportSettings] = None,
    ):
        self._store = store
        self._activity = activity_logger or ActivityLogger()
        self._mirror = mirror or LedgerMirror(store, self._activity)
        self._settings = import_settings or get_settings().imports

    async def reconcile(
        self,
        text: str,
        existing_pledges: Sequence[Pledge],
        wedding_id: str,
        today: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ImportResult:
        """
        Reconcile pasted text against a wedding's existing pledges.

        Pledges created or updated during the run join the working set,
        so a name listed twice updates the pledge created for its first
        line instead of creating a duplicate.

        Never raises.
        """
        correlation_id = correlation_id or create_correlation_id()
        fulfillment_date = self._settings.fulfillment_date(today or date.today())

        parser = PledgeListParser()
        candidates = list(parser.parse_text(text))
        result = ImportResult(
            candidates=len(candidates),
            skipped_lines=parser.stats.skipped,
        )

        self._activity.log_import_started(
            wedding_id=wedding_id,
            candidates=len(candidates),
            skipped_lines=parser.stats.skipped,
            correlation_id=correlation_id,
        )

        working: list[Pledge] = list(existing_pledges)

        for candidate in candidates:
            try:
                match = match_contributor(candidate.name, working)
                if match is not None:
                    posted = await self._merge(
                        match.record, candidate, working,
                        wedding_id, fulfillment_date, correlation_id,
                    )
                    result.updated += 1
                else:
                    posted = await self._create(
                        candidate, working,
                        wedding_id, fulfillment_date, correlation_id,
                    )
                    result.created += 1
                result.ledger_entries_posted += posted
            except Exception as e:
                # One bad candidate never aborts the batch
                message = str(e) or type(e).__name__
                result.errors.append(f"{candidate.name}: {message}")
                self._activity.log_candidate_failed(
                    name=candidate.name,
                    line_number=candidate.line_number,
                    error_message=message,
                    correlation_id=correlation_id,
                )

        self._activity.log_import_completed(
            wedding_id=wedding_id,
            created=result.created,
            updated=result.updated,
            errors=len(result.errors),
            correlation_id=correlation_id,
        )
        return result

    async def _merge(
        self,
        pledge: Pledge,
        candidate: ParsedPledge,
        working: list[Pledge],
        wedding_id: str,
        fulfillment_date: date,
        correlation_id: UUID,
    ) -> int:
        """Update a matched pledge. Returns the number of ledger entries posted."""
        existing_paid = pledge.amount_paid
        # A smaller figure in the text is stale data, not a refund
        effective_paid = max(existing_paid, candidate.amount_paid)
        derived = derive(candidate.amount_pledged, effective_paid)

        updated = pledge.model_copy(update={
            "amount_pledged": candidate.amount_pledged,
            "amount_paid": effective_paid,
            "balance": derived.balance,
            "status": derived.status,
            "pledge_fulfillment_date": fulfillment_date,
        })
        record = updated.to_record()
        await self._store.update(
            Collection.PLEDGES.value,
            pledge.id,
            {
                key: record[key]
                for key in (
                    "amount_pledged",
                    "amount_paid",
                    "balance",
                    "status",
                    "pledge_fulfillment_date",
                )
            },
        )
        position = next(i for i, p in enumerate(working) if p is pledge)
        working[position] = updated

        self._activity.log_pledge_updated(
            pledge_id=pledge.id,
            contributor_name=pledge.contributor_name,
            old_paid=str(existing_paid),
            new_paid=str(effective_paid),
            correlation_id=correlation_id,
        )

        entry = await self._mirror.post_payment(
            pledge_id=pledge.id,
            contributor_name=candidate.name,
            old_paid=existing_paid,
            new_paid=effective_paid,
            on_date=fulfillment_date,
            note=self._settings.payment_note,
            wedding_id=wedding_id,
            correlation_id=correlation_id,
        )
        return 1 if entry else 0

    async def _create(
        self,
        candidate: ParsedPledge,
        working: list[Pledge],
        wedding_id: str,
        fulfillment_date: date,
        correlation_id: UUID,
    ) -> int:
        """Create a pledge for an unmatched candidate. Returns entries posted."""
        pledge = Pledge(
            wedding_id=wedding_id,
            contributor_name=candidate.name,
            amount_pledged=candidate.amount_pledged,
            amount_paid=candidate.amount_paid,
            balance=candidate.balance,
            status=candidate.status,
            pledge_fulfillment_date=fulfillment_date,
            notes=self._settings.pledge_note,
        )
        stored = await self._store.insert(Collection.PLEDGES.value, pledge.to_record())
        created = Pledge.from_record(stored)
        working.append(created)

        self._activity.log_pledge_created(
            pledge_id=created.id,
            contributor_name=created.contributor_name,
            amount_pledged=str(created.amount_pledged),
            correlation_id=correlation_id,
        )

        entry = await self._mirror.post_payment(
            pledge_id=created.id,
            contributor_name=candidate.name,
            old_paid=Decimal("0"),
            new_paid=candidate.amount_paid,
            on_date=fulfillment_date,
            note=self._settings.initial_payment_note,
            wedding_id=wedding_id,
            correlation_id=correlation_id,
        )
        return 1 if entry else 0

    async def load_pledges(self, wedding_id: str) -> list[Pledge]:
        """Load a wedding's pledges from the store."""
        records = await self._store.find(
            Collection.PLEDGES.value,
            {"wedding_id": wedding_id},
        )
        return [Pledge.from_record(record) for record in records]

    async def reconcile_wedding(
        self,
        text: str,
        wedding_id: str,
        today: Optional[date] = None,
    ) -> ImportResult:
        """Load the wedding's pledges, then reconcile. Never raises."""
        correlation_id = create_correlation_id()
        try:
            existing = await self.load_pledges(wedding_id)
        except StorageError as e:
            self._activity.log_storage_error(
                operation="load_pledges",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return ImportResult(errors=[f"Import failed: {e}"])
        except ValidationError as e:
            self._activity.log_storage_error(
                operation="load_pledges",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return ImportResult(errors=[f"Import failed: unreadable pledge record: {e}"])

        return await self.reconcile(
            text, existing, wedding_id,
            today=today, correlation_id=correlation_id,
        )

    def preview(
        self,
        text: str,
        existing_pledges: Sequence[Pledge],
    ) -> list[ImportPreviewRow]:
        """
        What `reconcile` would do with each candidate, without writing.

        Candidates that would be created join the working set, so a
        repeated name previews as an update.
        """
        working: list[Union[Pledge, ParsedPledge]] = list(existing_pledges)
        rows = []

        for candidate in PledgeListParser().parse_text(text):
            match = match_contributor(candidate.name, working, key=_contributor_name)
            if match is None:
                working.append(candidate)
                rows.append(ImportPreviewRow(
                    candidate=candidate,
                    action=ImportAction.CREATE,
                ))
                continue

            matched = match.record if isinstance(match.record, Pledge) else None
            rows.append(ImportPreviewRow(
                candidate=candidate,
                action=ImportAction.UPDATE,
                matched_pledge=matched,
                match_rule=match.rule,
            ))

        return rows


class GuestCountFlow:
    """
    Orchestrates a change of the wedding's expected guest count.

    The new count and every rescaled budget line are written as one
    logical batch. The store has no transactions, so on the first failed
    write the writes already applied are reverted with compensating
    updates and the report says so.
    """

    def __init__(
        self,
        store: RecordStore,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._store = store
        self._activity = activity_logger or ActivityLogger()

    async def change_guest_count(
        self,
        wedding_id: str,
        new_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> RescaleReport:
        """
        Persist a new guest count and rescale the budget.

        Raises:
            ValueError: If the guest count is negative
        """
        if new_count < 0:
            raise ValueError(f"Guest count cannot be negative: {new_count}")

        correlation_id = correlation_id or create_correlation_id()

        try:
            weddings = await self._store.find(Collection.WEDDINGS.value, {"id": wedding_id})
            if not weddings:
                return RescaleReport(errors=[f"Wedding not found: {wedding_id}"])
            wedding = Wedding.from_record(weddings[0])

            records = await self._store.find(
                Collection.BUDGET_ITEMS.value,
                {"wedding_id": wedding_id},
            )
            items = [BudgetItem.from_record(record) for record in records]
        except StorageError as e:
            self._activity.log_storage_error(
                operation="load_budget",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return RescaleReport(errors=[str(e)])
        except ValidationError as e:
            self._activity.log_storage_error(
                operation="load_budget",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return RescaleReport(errors=[f"Unreadable stored record: {e}"])

        changes = changed_items(items, rescale(items, new_count))

        # (collection, record id, patch restoring the previous values)
        applied: list[tuple[str, str, dict]] = []

        try:
            await self._store.update(
                Collection.WEDDINGS.value,
                wedding_id,
                {"expected_guests": new_count},
            )
            applied.append((
                Collection.WEDDINGS.value,
                wedding_id,
                {"expected_guests": wedding.expected_guests},
            ))

            for old, new in changes:
                await self._store.update(
                    Collection.BUDGET_ITEMS.value,
                    new.id,
                    self._scaled_fields(new),
                )
                applied.append((
                    Collection.BUDGET_ITEMS.value,
                    old.id,
                    self._scaled_fields(old),
                ))
        except StorageError as e:
            errors = [str(e)]
            errors.extend(await self._revert(applied))
            self._activity.log_batch_rolled_back(
                wedding_id=wedding_id,
                reverted=len(applied),
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return RescaleReport(errors=errors, rolled_back=True)

        self._activity.log_guest_count_changed(
            wedding_id=wedding_id,
            old_count=wedding.expected_guests,
            new_count=new_count,
            items_updated=len(changes),
            correlation_id=correlation_id,
        )
        return RescaleReport(wedding_updated=True, items_updated=len(changes))

    @staticmethod
    def _scaled_fields(item: BudgetItem) -> dict:
        record = item.to_record()
        return {key: record[key] for key in ("quantity", "amount", "balance", "status")}

    async def _revert(self, applied: list[tuple[str, str, dict]]) -> list[str]:
        """Undo applied writes, newest first. Returns revert failures."""
        failures = []
        for collection, record_id, previous in reversed(applied):
            try:
                await self._store.update(collection, record_id, previous)
            except StorageError as e:
                failures.append(f"Revert failed for {collection} {record_id}: {e}")
        return failures


class PledgeEntryFlow:
    """
    Orchestrates pledges entered one at a time.

    Direct entry (create or edit) and public submission both validate
    first and refuse to save on errors. Payments are mirrored into the
    cash ledger the same way an import mirrors them.
    """

    def __init__(
        self,
        store: RecordStore,
        mirror: Optional[LedgerMirror] = None,
        validator: Optional[PledgeInputValidator] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._store = store
        self._activity = activity_logger or ActivityLogger()
        self._mirror = mirror or LedgerMirror(store, self._activity)
        self._validator = validator or PledgeInputValidator()

    async def save_pledge(
        self,
        wedding_id: str,
        contributor_name: str,
        amount_pledged: Decimal,
        amount_paid: Decimal = Decimal("0"),
        phone: Optional[str] = None,
        email: Optional[str] = None,
        payment_method: Optional[str] = None,
        pledge_fulfillment_date: Optional[date] = None,
        notes: Optional[str] = None,
        existing: Optional[Pledge] = None,
        today: Optional[date] = None,
    ) -> Pledge:
        """
        Create a pledge, or update `existing`, and mirror the paid increase.

        An edit mirrors the increase dated today. A new pledge that is
        already (partly) paid mirrors the full paid amount, dated at its
        fulfillment date.

        Raises:
            PledgeValidationError: If the input has errors
            StorageError: If a write fails
        """
        self._validator.validate_or_raise(
            contributor_name, amount_pledged, amount_paid, email=email
        )
        today = today or date.today()
        method = payment_method or "N/A"

        pledge = refresh_pledge(Pledge(
            id=existing.id if existing else None,
            wedding_id=wedding_id,
            contributor_name=contributor_name,
            phone=phone,
            email=email,
            amount_pledged=amount_pledged,
            amount_paid=amount_paid,
            payment_method=payment_method,
            pledge_fulfillment_date=pledge_fulfillment_date,
            notes=notes,
        ))

        if existing is not None:
            await self._store.update(Collection.PLEDGES.value, existing.id, pledge.to_record())
            self._activity.log_pledge_updated(
                pledge_id=existing.id,
                contributor_name=pledge.contributor_name,
                old_paid=str(existing.amount_paid),
                new_paid=str(pledge.amount_paid),
            )
            await self._mirror.post_payment(
                pledge_id=existing.id,
                contributor_name=pledge.contributor_name,
                old_paid=existing.amount_paid,
                new_paid=pledge.amount_paid,
                on_date=today,
                note=f"Pledge payment - {method}",
                wedding_id=wedding_id,
            )
            return pledge

        stored = await self._store.insert(Collection.PLEDGES.value, pledge.to_record())
        created = Pledge.from_record(stored)
        self._activity.log_pledge_created(
            pledge_id=created.id,
            contributor_name=created.contributor_name,
            amount_pledged=str(created.amount_pledged),
        )
        await self._mirror.post_payment(
            pledge_id=created.id,
            contributor_name=created.contributor_name,
            old_paid=Decimal("0"),
            new_paid=created.amount_paid,
            on_date=pledge_fulfillment_date or today,
            note=f"Initial pledge payment - {method}",
            wedding_id=wedding_id,
        )
        return created

    async def submit_public_pledge(
        self,
        wedding_id: str,
        contributor_name: str,
        amount_pledged: Decimal,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        pledge_fulfillment_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> Pledge:
        """
        Record a pledge submitted through the public form.

        Nothing is paid yet, so nothing is mirrored.

        Raises:
            PledgeValidationError: If the input has errors
            StorageError: If the insert fails
        """
        self._validator.validate_or_raise(contributor_name, amount_pledged, email=email)

        pledge = Pledge(
            wedding_id=wedding_id,
            contributor_name=contributor_name,
            phone=phone,
            email=email,
            amount_pledged=amount_pledged,
            amount_paid=Decimal("0"),
            balance=amount_pledged,
            status=MonetaryStatus.PENDING,
            pledge_fulfillment_date=pledge_fulfillment_date,
            notes=notes,
        )
        stored = await self._store.insert(Collection.PLEDGES.value, pledge.to_record())
        created = Pledge.from_record(stored)
        self._activity.log_pledge_created(
            pledge_id=created.id,
            contributor_name=created.contributor_name,
            amount_pledged=str(created.amount_pledged),
        )
        return created


def create_app_components(
    store: Optional[RecordStore] = None,
    use_storage: bool = True,
) -> tuple[PledgeImportFlow, GuestCountFlow, PledgeEntryFlow, RecordStore]:
    """
    Factory function to create all application components.

    Args:
        store: Record store to use. Built from settings when omitted.
        use_storage: Whether to use Google Sheets storage.
                    Set to False for dry runs against an in-memory store.

    Returns:
        (import_flow, guest_flow, entry_flow, store)

    Raises:
        StorageError: If Google Sheets is requested but not configured
    """
    if store is None:
        if use_storage:
            try:
                client = GoogleSheetsClient()
            except ValidationError as e:
                raise ConnectionError(f"Google Sheets is not configured: {e}") from e
            store = GoogleSheetsRecordStore(client)
        else:
            store = InMemoryRecordStore()

    activity_logger = ActivityLogger()
    mirror = LedgerMirror(store, activity_logger)

    import_flow = PledgeImportFlow(
        store=store,
        mirror=mirror,
        activity_logger=activity_logger,
    )
    guest_flow = GuestCountFlow(
        store=store,
        activity_logger=activity_logger,
    )
    entry_flow = PledgeEntryFlow(
        store=store,
        mirror=mirror,
        activity_logger=activity_logger,
    )

    return import_flow, guest_flow, entry_flow, store
