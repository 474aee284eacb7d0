"""
Google Sheets Storage Implementation

DESIGN DECISION: The cloud store is a spreadsheet with one worksheet per
user-scoped collection:

    users.<user_id>.expenses
    users.<user_id>.incomes
    users.<user_id>.user_details

Each worksheet has a header row and one record per row, like documents
in a collection. Rows are not keyed by id: creating a record appends a
row, and update/delete touch every row whose id matches.

TRADEOFFS:
- Not suitable for high-volume data (we're fine for personal use)
- No transactions (the sync routines copy record by record)
- Limited query capabilities (we filter in Python)
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

import gspread
import structlog
from google.oauth2.service_account import Credentials
from gspread.utils import rowcol_to_a1
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from expense_tracker.config import GoogleSheetsSettings, get_settings
from expense_tracker.models.transaction import (
    ExpenseRecord,
    IncomeRecord,
    UserRecord,
)
from expense_tracker.services.storage.interface import (
    ConnectionError,
    ExpenseDataSource,
    IncomeDataSource,
    InvalidDataError,
    StorageError,
    UserDataSource,
)


logger = structlog.get_logger(__name__)


# Column mappings per collection (stored key names)
EXPENSE_COLUMNS = ["id", "name", "amount", "date", "type", "note"]
INCOME_COLUMNS = ["id", "amount", "date", "source", "note"]
USER_COLUMNS = ["id", "email", "firstName", "lastName"]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @property
    def collection_root(self) -> str:
        return self._settings.collection_root

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(ConnectionError),
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
            except FileNotFoundError as e:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                ) from e
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}") from e

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound as e:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                ) from e
        return self._spreadsheet

    def get_collection(self, title: str, columns: list[str]) -> gspread.Worksheet:
        """Get or create the worksheet backing a collection."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=self._settings.worksheet_rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet


def collection_title(root: str, user_id: str, name: str) -> str:
    return f"{root}.{user_id}.{name}"


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(gspread.exceptions.APIError),
    reraise=True,
)
def _append_row(sheet: gspread.Worksheet, row: list) -> None:
    sheet.append_row(row, value_input_option="RAW")


class _SheetsCollection:
    """
    Rows of one worksheet mapped to storage records.

    Subclasses set `columns`, `collection_name` and `record_model`.
    """

    columns: list[str] = []
    optional_columns: tuple[str, ...] = ()
    collection_name = ""
    record_model = None
    entity_type = "record"

    def __init__(self, user_id: str, client: Optional[GoogleSheetsClient] = None):
        if not user_id:
            raise ValueError("user_id is required for a cloud collection")
        self._client = client or GoogleSheetsClient()
        self._title = collection_title(
            self._client.collection_root, user_id, self.collection_name
        )

    @property
    def title(self) -> str:
        return self._title

    def _sheet(self) -> gspread.Worksheet:
        return self._client.get_collection(self._title, self.columns)

    def _record_to_row(self, record) -> list:
        """Convert a record to a spreadsheet row."""
        document = record.to_document()
        row = []
        for column in self.columns:
            value = document.get(column)
            row.append("" if value is None else str(value))
        return row

    def _row_to_record(self, row: list):
        """Convert a spreadsheet row to a record."""
        padded = list(row) + [""] * (len(self.columns) - len(row))
        document = dict(zip(self.columns, padded))
        for column in self.optional_columns:
            document[column] = document[column] or None
        if "amount" in document:
            try:
                document["amount"] = Decimal(document["amount"] or "")
            except InvalidOperation as e:
                raise InvalidDataError(f"Invalid amount: {document['amount']!r}") from e
        try:
            return self.record_model.model_validate(document)
        except ValidationError as e:
            raise InvalidDataError(str(e)) from e

    def _matching_rows(self, sheet: gspread.Worksheet, record_id: str) -> list[int]:
        """1-based sheet row numbers whose id column equals record_id."""
        all_rows = sheet.get_all_values()
        return [
            idx
            for idx, row in enumerate(all_rows[1:], start=2)  # Row 1 is header
            if row and row[0] == record_id
        ]

    def _read_records(self) -> list:
        sheet = self._sheet()
        records = []
        for row in sheet.get_all_values()[1:]:
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                records.append(self._row_to_record(row))
            except InvalidDataError as e:
                logger.warning(
                    "malformed_row_skipped",
                    collection=self._title,
                    record_id=row[0],
                    error=str(e),
                )
        return records

    async def create(self, item) -> None:
        """Append a record to the collection."""
        try:
            _append_row(self._sheet(), self._record_to_row(item))
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save {self.entity_type}: {e}") from e

    async def update(self, item) -> None:
        """Rewrite every row with the record's id."""
        try:
            sheet = self._sheet()
            row = self._record_to_row(item)
            updates = [
                {
                    "range": f"{rowcol_to_a1(idx, 1)}:{rowcol_to_a1(idx, len(row))}",
                    "values": [row],
                }
                for idx in self._matching_rows(sheet, item.id)
            ]
            if updates:
                sheet.batch_update(updates, value_input_option="RAW")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update {self.entity_type}: {e}") from e

    async def delete(self, item) -> None:
        """Delete every row with the record's id."""
        try:
            sheet = self._sheet()
            # Bottom-up so earlier row numbers stay valid
            for idx in reversed(self._matching_rows(sheet, item.id)):
                sheet.delete_rows(idx)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete {self.entity_type}: {e}") from e


class _SheetsTransactionCollection(_SheetsCollection):

    async def read_all(self) -> list:
        try:
            return self._read_records()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list {self.entity_type} records: {e}") from e

    async def delete_all(self) -> None:
        try:
            sheet = self._sheet()
            row_count = len(sheet.get_all_values())
            if row_count > 1:
                sheet.delete_rows(2, row_count)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete {self.entity_type} records: {e}") from e


class GoogleSheetsExpenseDataSource(_SheetsTransactionCollection, ExpenseDataSource):
    """Expenses of one user in the cloud."""

    columns = EXPENSE_COLUMNS
    collection_name = "expenses"
    record_model = ExpenseRecord
    entity_type = "expense"


class GoogleSheetsIncomeDataSource(_SheetsTransactionCollection, IncomeDataSource):
    """Incomes of one user in the cloud."""

    columns = INCOME_COLUMNS
    collection_name = "incomes"
    record_model = IncomeRecord
    entity_type = "income"


class GoogleSheetsUserDataSource(_SheetsCollection, UserDataSource):
    """
    User details of one user in the cloud.

    The first well-formed row is the user.
    """

    columns = USER_COLUMNS
    optional_columns = ("email", "firstName", "lastName")
    collection_name = "user_details"
    record_model = UserRecord
    entity_type = "user"

    async def read(self) -> Optional[UserRecord]:
        try:
            records = self._read_records()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to get user: {e}") from e
        return records[0] if records else None
