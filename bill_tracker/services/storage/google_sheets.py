"""
Google Sheets Storage Implementation

An optional backend that keeps bills in a spreadsheet so they can be
viewed (and backed up) outside the app.

TRADEOFFS:
- Save rewrites the whole sheet (fine for a personal bill list)
- No transactions; a failed save may leave the sheet partially written,
  while the in-memory collection stays intact
- Connecting retries with backoff; load and save do not retry

The implementation follows the abstract interface, so the JSON backend
and this one are interchangeable.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional
from uuid import UUID

import gspread
from google.oauth2.service_account import Credentials
from pydantic import ValidationError as PydanticValidationError
from tenacity import retry, stop_after_attempt, wait_exponential

from bill_tracker.config import GoogleSheetsSettings, get_settings
from bill_tracker.errors import PersistenceError
from bill_tracker.log import get_logger
from bill_tracker.models.bill import Bill, Recurrence
from bill_tracker.services.storage.interface import BillPersistenceInterface


logger = get_logger(__name__)


# Column mappings for Bills sheet
BILL_COLUMNS = [
    "id",
    "name",
    "amount",
    "due_date",
    "recurrence",
    "notes",
    "paid",
    "created_at",
    "updated_at",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for connecting.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

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
            except FileNotFoundError as e:
                raise PersistenceError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                ) from e
            except Exception as e:
                raise PersistenceError(f"Failed to connect to Google Sheets: {e}") from e

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
                raise PersistenceError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                ) from e
        return self._spreadsheet

    def get_bills_sheet(self) -> gspread.Worksheet:
        """Get or create the Bills worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.bills_sheet_name)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=self._settings.bills_sheet_name,
                rows=1000,
                cols=len(BILL_COLUMNS),
            )
            sheet.append_row(BILL_COLUMNS)
        return sheet


class GoogleSheetsBillPersistence(BillPersistenceInterface):
    """
    Google Sheets implementation of bill persistence.

    One bill per row, header in row 1, rows in store order.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _bill_to_row(self, bill: Bill) -> list:
        """Convert a Bill to a spreadsheet row."""
        return [
            str(bill.id),
            bill.name,
            str(bill.amount),
            bill.due_date.isoformat(),
            bill.recurrence.value,
            bill.notes or "",
            str(bill.paid),
            bill.created_at.isoformat(),
            bill.updated_at.isoformat(),
        ]

    def _row_to_bill(self, row: list) -> Bill:
        """Convert a spreadsheet row to a Bill."""
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return Bill(
            id=UUID(safe_get(0)),
            name=safe_get(1),
            amount=Decimal(safe_get(2, "0")),
            due_date=date.fromisoformat(safe_get(3)),
            recurrence=Recurrence(safe_get(4, Recurrence.NONE.value)),
            notes=safe_get(5) or None,
            paid=safe_get(6).lower() == "true",
            created_at=datetime.fromisoformat(safe_get(7)),
            updated_at=datetime.fromisoformat(safe_get(8, safe_get(7))),
        )

    async def load(self) -> list[Bill]:
        """Load all bills from the sheet."""
        try:
            sheet = self._client.get_bills_sheet()
            all_rows = sheet.get_all_values()[1:]  # Skip header
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to load bills: {e}") from e

        bills = []
        for index, row in enumerate(all_rows, start=2):
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                bills.append(self._row_to_bill(row))
            except (ValueError, InvalidOperation, PydanticValidationError) as e:
                logger.warning("malformed_bill_row_skipped", row=index, error=str(e))
        return bills

    async def save(self, bills: Iterable[Bill]) -> bool:
        """Rewrite the sheet with the given bills."""
        rows = [BILL_COLUMNS] + [self._bill_to_row(bill) for bill in bills]
        try:
            sheet = self._client.get_bills_sheet()
            sheet.clear()
            sheet.append_rows(rows, value_input_option="RAW")
            return True
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to save bills: {e}") from e
