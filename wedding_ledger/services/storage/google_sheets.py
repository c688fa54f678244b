"""
Google Sheets Record Store

DESIGN DECISION: Google Sheets is the default backend because:
1. Couples and their committees can view the ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)
4. Easy to export/migrate later

TRADEOFFS:
- Not suitable for high-volume data (a wedding has hundreds of rows, not millions)
- No transactions (callers handle batches with careful ordering)
- Limited query capabilities (we filter in Python)

One worksheet per collection, created with a header row on first use.
Every cell is stored as text; empty cells read back as None and the
pydantic models parse the text back into decimals, dates and booleans.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from wedding_ledger.config import get_settings
from wedding_ledger.models.finance import (
    BudgetItem,
    CashLedgerEntry,
    Collection,
    Expenditure,
    Pledge,
    VendorContract,
    Wedding,
)
from wedding_ledger.services.storage.interface import (
    ConnectionError,
    DuplicateError,
    NotFoundError,
    Record,
    RecordStore,
    StorageError,
)


COLLECTION_MODELS = {
    Collection.WEDDINGS.value: Wedding,
    Collection.BUDGET_ITEMS.value: BudgetItem,
    Collection.PLEDGES.value: Pledge,
    Collection.CASH_TRANSACTIONS.value: CashLedgerEntry,
    Collection.VENDORS.value: VendorContract,
    Collection.EXPENDITURES.value: Expenditure,
}

TIMESTAMP_COLUMNS = ["created_at", "updated_at"]


def columns_for(collection: str) -> list[str]:
    """Header row for a collection's worksheet."""
    try:
        model = COLLECTION_MODELS[collection]
    except KeyError:
        raise StorageError(f"Unknown collection: {collection}")
    fields = [name for name in model.model_fields if name != "id"]
    return ["id", *fields, *TIMESTAMP_COLUMNS]


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


_retry_transient = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_not_exception_type((NotFoundError, DuplicateError)),
    reraise=True,
)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_worksheet(self, collection: str) -> gspread.Worksheet:
        """Get or create the worksheet backing a collection."""
        columns = columns_for(collection)
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(collection)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=collection,
                rows=self._settings.worksheet_rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet


class GoogleSheetsRecordStore(RecordStore):
    """
    Google Sheets implementation of the record store.

    Records are stored as rows, one record per row, columns in the order
    given by the header row.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _read(self, collection: str) -> tuple[gspread.Worksheet, list[str], list[list[str]]]:
        sheet = self._client.get_worksheet(collection)
        values = sheet.get_all_values()
        if not values:
            return sheet, columns_for(collection), []
        return sheet, values[0], values[1:]

    @staticmethod
    def _row_to_record(header: list[str], row: list[str]) -> Record:
        """Convert a spreadsheet row to a record; empty cells become None."""
        record = {}
        for idx, column in enumerate(header):
            value = row[idx] if idx < len(row) else ""
            record[column] = value if value != "" else None
        return record

    @staticmethod
    def _find_row_index(rows: list[list[str]], record_id: str) -> Optional[int]:
        # Sheet rows are 1-based and row 1 is the header
        for idx, row in enumerate(rows, start=2):
            if row and row[0] == record_id:
                return idx
        return None

    @_retry_transient
    async def find(
        self,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[Record]:
        """Find records, filtering in Python."""
        try:
            _, header, rows = self._read(collection)
            wanted = {key: _cell(value) for key, value in (filters or {}).items()}

            records = []
            for row in rows:
                if not row or not row[0]:  # Skip empty rows
                    continue
                record = self._row_to_record(header, row)
                if all(_cell(record.get(key)) == value for key, value in wanted.items()):
                    records.append(record)
            return records
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read {collection}: {e}")

    async def insert(self, collection: str, record: Record) -> Record:
        """
        Append a record as a new row.

        The id is fixed before the first attempt, so a retry after a write
        that landed finds its own row instead of appending a second one.
        """
        stored = dict(record)
        if stored.get("id"):
            if await self.find(collection, {"id": stored["id"]}):
                raise DuplicateError(f"{collection} record already exists: {stored['id']}")
        else:
            stored["id"] = str(uuid4())

        now = datetime.now(timezone.utc).isoformat()
        stored.setdefault("created_at", now)
        stored.setdefault("updated_at", now)
        return await self._append(collection, stored)

    @_retry_transient
    async def _append(self, collection: str, stored: Record) -> Record:
        try:
            sheet, header, rows = self._read(collection)
            if self._find_row_index(rows, stored["id"]) is not None:
                # Written by an earlier attempt whose response was lost
                return stored

            sheet.append_row(
                [_cell(stored.get(column)) for column in header],
                value_input_option="RAW",
            )
            return stored
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to insert into {collection}: {e}")

    @_retry_transient
    async def update(
        self,
        collection: str,
        record_id: str,
        patch: Record,
    ) -> None:
        """Update the cells named in the patch."""
        try:
            sheet, header, rows = self._read(collection)
            row_idx = self._find_row_index(rows, record_id)
            if row_idx is None:
                raise NotFoundError(f"{collection} record not found: {record_id}")

            values = {k: v for k, v in patch.items() if k != "id"}
            values["updated_at"] = datetime.now(timezone.utc).isoformat()

            for column, value in values.items():
                if column not in header:
                    continue
                sheet.update_cell(row_idx, header.index(column) + 1, _cell(value))
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update {collection} record {record_id}: {e}")

    @_retry_transient
    async def delete(self, collection: str, record_id: str) -> None:
        """Delete the row holding a record."""
        try:
            sheet, _, rows = self._read(collection)
            row_idx = self._find_row_index(rows, record_id)
            if row_idx is None:
                raise NotFoundError(f"{collection} record not found: {record_id}")
            sheet.delete_rows(row_idx)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete {collection} record {record_id}: {e}")
