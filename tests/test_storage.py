"""Tests for the record store backends."""

import pytest
from datetime import date
from decimal import Decimal

from tenacity import wait_none

from wedding_ledger.ledger import LedgerMirror
from wedding_ledger.models import Collection, Pledge
from wedding_ledger.services.storage import (
    DuplicateError,
    GoogleSheetsRecordStore,
    InMemoryRecordStore,
    NotFoundError,
    StorageError,
)
from wedding_ledger.services.storage.google_sheets import columns_for


class FakeWorksheet:
    """Minimal stand-in for a gspread worksheet."""

    def __init__(self, header):
        self.rows = [list(header)]

    def get_all_values(self):
        return [list(row) for row in self.rows]

    def append_row(self, values, value_input_option=None):
        self.rows.append(list(values))

    def update_cell(self, row, col, value):
        self.rows[row - 1][col - 1] = value

    def delete_rows(self, index):
        del self.rows[index - 1]


class FakeSheetsClient:
    """Hands out one FakeWorksheet per collection."""

    def __init__(self):
        self.sheets = {}

    def get_worksheet(self, collection):
        if collection not in self.sheets:
            self.sheets[collection] = FakeWorksheet(columns_for(collection))
        return self.sheets[collection]


class LostResponseWorksheet(FakeWorksheet):
    """Appends the row, then fails the first call as if the response was lost."""

    def __init__(self, header):
        super().__init__(header)
        self.failures_left = 1

    def append_row(self, values, value_input_option=None):
        super().append_row(values, value_input_option)
        if self.failures_left:
            self.failures_left -= 1
            raise TimeoutError("response lost")


class LostResponseSheetsClient(FakeSheetsClient):
    def get_worksheet(self, collection):
        if collection not in self.sheets:
            self.sheets[collection] = LostResponseWorksheet(columns_for(collection))
        return self.sheets[collection]


def _pledge_record(name="Jane", wedding_id="w1") -> dict:
    return Pledge(
        wedding_id=wedding_id,
        contributor_name=name,
        amount_pledged=Decimal("1000"),
        pledge_fulfillment_date=date(2025, 12, 30),
    ).to_record()


class TestInMemoryRecordStore:
    """Tests for the dict-backed store."""

    @pytest.mark.asyncio
    async def test_insert_assigns_id(self, store):
        """Test inserts return the record with a generated id."""
        stored = await store.insert("pledges", _pledge_record())
        assert stored["id"]
        assert (await store.find("pledges"))[0]["id"] == stored["id"]

    @pytest.mark.asyncio
    async def test_find_filters(self, store):
        """Test equality filters."""
        await store.insert("pledges", _pledge_record("A", "w1"))
        await store.insert("pledges", _pledge_record("B", "w2"))
        found = await store.find("pledges", {"wedding_id": "w2"})
        assert [r["contributor_name"] for r in found] == ["B"]

    @pytest.mark.asyncio
    async def test_records_are_copies(self, store):
        """Test callers cannot mutate stored state."""
        stored = await store.insert("pledges", _pledge_record())
        stored["contributor_name"] = "Changed"
        [found] = await store.find("pledges")
        found["amount_paid"] = "999"
        [again] = await store.find("pledges")
        assert again["contributor_name"] == "Jane"
        assert again["amount_paid"] == "0"

    @pytest.mark.asyncio
    async def test_update_and_delete(self, store):
        """Test partial updates and deletes."""
        stored = await store.insert("pledges", _pledge_record())
        await store.update("pledges", stored["id"], {"amount_paid": "500"})
        [found] = await store.find("pledges")
        assert found["amount_paid"] == "500"

        await store.delete("pledges", stored["id"])
        assert store.count("pledges") == 0

    @pytest.mark.asyncio
    async def test_missing_record(self, store):
        """Test updates and deletes of unknown ids raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await store.update("pledges", "nope", {"amount_paid": "1"})
        with pytest.raises(NotFoundError):
            await store.delete("pledges", "nope")

    @pytest.mark.asyncio
    async def test_duplicate_id(self):
        """Test inserting an existing id raises DuplicateError."""
        store = InMemoryRecordStore({"pledges": [{"id": "p1", "contributor_name": "A"}]})
        with pytest.raises(DuplicateError):
            await store.insert("pledges", {"id": "p1"})

    def test_storage_errors_share_base(self):
        """Test all storage exceptions derive from StorageError."""
        assert issubclass(NotFoundError, StorageError)
        assert issubclass(DuplicateError, StorageError)


class TestGoogleSheetsRecordStore:
    """Tests for the Sheets backend against a fake worksheet."""

    def test_columns_follow_model(self):
        """Test headers are id, model fields, then timestamps."""
        columns = columns_for(Collection.PLEDGES.value)
        assert columns[0] == "id"
        assert "contributor_name" in columns
        assert columns[-2:] == ["created_at", "updated_at"]

    def test_unknown_collection(self):
        """Test unknown collections are refused."""
        with pytest.raises(StorageError):
            columns_for("guests")

    @pytest.mark.asyncio
    async def test_insert_and_find(self):
        """Test rows round-trip into records with empty cells as None."""
        client = FakeSheetsClient()
        store = GoogleSheetsRecordStore(client)

        stored = await store.insert("pledges", _pledge_record())
        [found] = await store.find("pledges", {"wedding_id": "w1"})

        assert found["id"] == stored["id"]
        assert found["contributor_name"] == "Jane"
        assert found["phone"] is None
        assert found["created_at"] is not None
        pledge = Pledge.from_record(found)
        assert pledge.amount_pledged == Decimal("1000")
        assert pledge.pledge_fulfillment_date == date(2025, 12, 30)

    @pytest.mark.asyncio
    async def test_find_filters_non_string_values(self):
        """Test filters compare against the stored text."""
        store = GoogleSheetsRecordStore(FakeSheetsClient())
        await store.insert("budget_items", {
            "wedding_id": "w1", "item_name": "Food", "is_guest_dependent": True,
        })
        await store.insert("budget_items", {
            "wedding_id": "w1", "item_name": "Venue", "is_guest_dependent": False,
        })
        found = await store.find("budget_items", {"is_guest_dependent": True})
        assert [r["item_name"] for r in found] == ["Food"]

    @pytest.mark.asyncio
    async def test_update_cells(self):
        """Test only patched cells change."""
        client = FakeSheetsClient()
        store = GoogleSheetsRecordStore(client)
        stored = await store.insert("pledges", _pledge_record())

        await store.update("pledges", stored["id"], {"amount_paid": "250", "unknown": "x"})

        [found] = await store.find("pledges")
        assert found["amount_paid"] == "250"
        assert found["contributor_name"] == "Jane"

    @pytest.mark.asyncio
    async def test_delete_row(self):
        """Test deleting removes the record's row."""
        client = FakeSheetsClient()
        store = GoogleSheetsRecordStore(client)
        first = await store.insert("pledges", _pledge_record("A"))
        await store.insert("pledges", _pledge_record("B"))

        await store.delete("pledges", first["id"])

        assert [r["contributor_name"] for r in await store.find("pledges")] == ["B"]

    @pytest.mark.asyncio
    async def test_lost_append_response_not_duplicated(self, monkeypatch, activity_logger):
        """Test a retried insert whose first append landed writes one ledger row."""
        monkeypatch.setattr(GoogleSheetsRecordStore._append.retry, "wait", wait_none())
        client = LostResponseSheetsClient()
        mirror = LedgerMirror(GoogleSheetsRecordStore(client), activity_logger)

        entry = await mirror.post_payment(
            pledge_id="p1",
            contributor_name="Jane",
            old_paid=Decimal("50000"),
            new_paid=Decimal("80000"),
            on_date=date(2025, 12, 30),
            note=None,
            wedding_id="w1",
        )

        rows = client.sheets[Collection.CASH_TRANSACTIONS.value].rows[1:]
        assert len(rows) == 1
        assert rows[0][0] == entry.id
        assert entry.amount == Decimal("30000")

    @pytest.mark.asyncio
    async def test_insert_existing_id_refused(self):
        """Test a caller-supplied id that is already stored raises DuplicateError."""
        store = GoogleSheetsRecordStore(FakeSheetsClient())
        stored = await store.insert("pledges", _pledge_record())
        with pytest.raises(DuplicateError):
            await store.insert("pledges", {**_pledge_record("B"), "id": stored["id"]})

    @pytest.mark.asyncio
    async def test_missing_record_not_retried(self):
        """Test NotFoundError surfaces immediately."""
        store = GoogleSheetsRecordStore(FakeSheetsClient())
        with pytest.raises(NotFoundError):
            await store.update("pledges", "nope", {"amount_paid": "1"})
