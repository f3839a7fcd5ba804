"""
Google Sheets Ledger Backend

Optional alternative to the local JSON files: the ledger lives in a
spreadsheet the user can open, chart and share.

SHEETS:
- Transactions: header row, then one row per transaction, newest first
- Settings: header row, then key/value rows (initial_balance, theme, currency)

CAVEATS:
- Every save rewrites the whole Transactions sheet; fine at personal scale
- Cells come back as text, so rows go through the same record validation
  as the JSON backend on load
"""

from decimal import Decimal
from typing import Optional

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from smartspend.config import get_settings
from smartspend.models.transaction import Transaction
from smartspend.services.storage.interface import (
    DEFAULT_CURRENCY_SYMBOL,
    LedgerStorageInterface,
    StorageConnectionError,
    StorageError,
)
from smartspend.services.storage.records import parse_offset, records_to_transactions


# Column mappings for Transactions sheet
TRANSACTION_COLUMNS = [
    "id",
    "date",
    "type",
    "category",
    "description",
    "amount",
]

# Settings sheet is key/value rows
SETTINGS_COLUMNS = ["key", "value"]

logger = structlog.get_logger(__name__)


class GoogleSheetsClient:
    """
    Authorized gspread handle for the ledger spreadsheet.
    
    Connection is lazy and retried; worksheets are created on first use.
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
        """Authorize with the service account key (once per client)."""
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
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}")
        
        return self._client
    
    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Open the ledger spreadsheet by key (cached)."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet
    
    def _get_or_create_sheet(self, title: str, columns: list[str]) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # First run against this spreadsheet
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet
    
    def get_transactions_sheet(self) -> gspread.Worksheet:
        """Get or create the Transactions worksheet."""
        return self._get_or_create_sheet(
            self._settings.transactions_sheet_name,
            TRANSACTION_COLUMNS,
        )
    
    def get_settings_sheet(self) -> gspread.Worksheet:
        """Get or create the Settings worksheet."""
        return self._get_or_create_sheet(
            self._settings.settings_sheet_name,
            SETTINGS_COLUMNS,
        )


class GoogleSheetsStorage(LedgerStorageInterface):
    """
    Google Sheets implementation of ledger storage.
    
    Transactions are stored one per row, newest first, in the same order
    as the in-memory ledger. Settings are key/value rows.
    """
    
    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()
    
    @staticmethod
    def _transaction_to_row(tx: Transaction) -> list:
        """Convert a Transaction to a spreadsheet row."""
        return [
            tx.id,
            tx.date,
            tx.type.value,
            tx.category.value,
            tx.description,
            str(tx.amount),
        ]
    
    @staticmethod
    def _row_to_record(row: list) -> dict:
        """Convert a spreadsheet row to a raw record (validated later)."""
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default
        
        return {
            column: safe_get(index)
            for index, column in enumerate(TRANSACTION_COLUMNS)
        }
    
    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------
    
    def load_transactions(self) -> list[Transaction]:
        try:
            sheet = self._client.get_transactions_sheet()
            rows = sheet.get_all_values()[1:]  # Skip header
        except Exception as e:
            logger.warning("storage_read_failed", backend="google_sheets", error=str(e))
            return []
        
        records = [self._row_to_record(row) for row in rows if row and row[0]]
        return records_to_transactions(records, source="google_sheets")
    
    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def save_transactions(self, transactions: list[Transaction]) -> None:
        """Rewrite the Transactions sheet (header + one row per transaction)."""
        try:
            sheet = self._client.get_transactions_sheet()
            rows = [TRANSACTION_COLUMNS] + [
                self._transaction_to_row(tx) for tx in transactions
            ]
            sheet.clear()
            sheet.update(range_name="A1", values=rows, value_input_option="RAW")
        except Exception as e:
            raise StorageError(f"Failed to save transactions: {e}")
    
    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------
    
    def _read_settings(self) -> dict[str, str]:
        try:
            sheet = self._client.get_settings_sheet()
            rows = sheet.get_all_values()[1:]
        except Exception as e:
            logger.warning("storage_read_failed", backend="google_sheets", error=str(e))
            return {}
        return {row[0]: row[1] for row in rows if len(row) >= 2 and row[0]}
    
    def _write_setting(self, key: str, value: str) -> None:
        try:
            sheet = self._client.get_settings_sheet()
            all_rows = sheet.get_all_values()
            
            for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is header
                if row and row[0] == key:
                    sheet.update_cell(idx, 2, value)
                    return
            
            sheet.append_row([key, value], value_input_option="RAW")
        except Exception as e:
            raise StorageError(f"Failed to save setting {key}: {e}")
    
    def load_initial_balance(self) -> Decimal:
        return parse_offset(self._read_settings().get("initial_balance"), source="google_sheets")
    
    def save_initial_balance(self, offset: Decimal) -> None:
        self._write_setting("initial_balance", str(offset))
    
    def load_theme(self) -> bool:
        return self._read_settings().get("theme") == "dark"
    
    def save_theme(self, dark_mode: bool) -> None:
        self._write_setting("theme", "dark" if dark_mode else "light")
    
    def load_currency_symbol(self) -> str:
        return self._read_settings().get("currency") or DEFAULT_CURRENCY_SYMBOL
    
    def save_currency_symbol(self, symbol: str) -> None:
        self._write_setting("currency", symbol)
    
    def clear_all(self) -> None:
        try:
            for sheet, header in (
                (self._client.get_transactions_sheet(), TRANSACTION_COLUMNS),
                (self._client.get_settings_sheet(), SETTINGS_COLUMNS),
            ):
                sheet.clear()
                sheet.append_row(header)
        except Exception as e:
            raise StorageError(f"Failed to clear spreadsheet: {e}")
