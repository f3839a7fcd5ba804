"""
Local JSON File Storage

DESIGN DECISION: The default backend is a pair of JSON files in a data
directory, because:
1. Works offline with zero setup
2. Users can open and back up the files themselves
3. One whole-document write per mutation is cheap at personal scale

Layout:
    <data_dir>/transactions.json   list of transaction records, newest first
    <data_dir>/settings.json       {"initial_balance", "theme", "currency"}

Writes go to a temporary file first and are then renamed over the
target, so a crash mid-write leaves the previous document intact.
"""

import json
import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Union

import structlog

from smartspend.models.transaction import Transaction
from smartspend.services.storage.interface import (
    DEFAULT_CURRENCY_SYMBOL,
    LedgerStorageInterface,
    StorageError,
)
from smartspend.services.storage.records import parse_offset, records_to_transactions


TRANSACTIONS_FILE = "transactions.json"
SETTINGS_FILE = "settings.json"

logger = structlog.get_logger(__name__)


class JsonFileStorage(LedgerStorageInterface):
    """JSON-file implementation of ledger storage."""
    
    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)
    
    @property
    def data_dir(self) -> Path:
        return self._data_dir
    
    # -------------------------------------------------------------------------
    # Low-level document access
    # -------------------------------------------------------------------------
    
    def _read_document(self, filename: str, default: Any) -> Any:
        """Read a JSON document; return default when missing or unreadable."""
        path = self._data_dir / filename
        if not path.exists():
            return default
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("storage_read_failed", path=str(path), error=str(e))
            return default
    
    def _write_document(self, filename: str, document: Any) -> None:
        """Write a JSON document atomically."""
        path = self._data_dir / filename
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")
    
    def _read_settings(self) -> dict:
        settings = self._read_document(SETTINGS_FILE, {})
        return settings if isinstance(settings, dict) else {}
    
    def _update_settings(self, **values: Any) -> None:
        settings = self._read_settings()
        settings.update(values)
        self._write_document(SETTINGS_FILE, settings)
    
    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------
    
    def load_transactions(self) -> list[Transaction]:
        records = self._read_document(TRANSACTIONS_FILE, [])
        if not isinstance(records, list):
            logger.warning("storage_document_invalid", file=TRANSACTIONS_FILE)
            return []
        return records_to_transactions(records, source=TRANSACTIONS_FILE)
    
    def save_transactions(self, transactions: list[Transaction]) -> None:
        self._write_document(
            TRANSACTIONS_FILE,
            [tx.to_record() for tx in transactions],
        )
    
    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------
    
    def load_initial_balance(self) -> Decimal:
        return parse_offset(self._read_settings().get("initial_balance"), source=SETTINGS_FILE)
    
    def save_initial_balance(self, offset: Decimal) -> None:
        self._update_settings(initial_balance=str(offset))
    
    def load_theme(self) -> bool:
        return self._read_settings().get("theme") == "dark"
    
    def save_theme(self, dark_mode: bool) -> None:
        self._update_settings(theme="dark" if dark_mode else "light")
    
    def load_currency_symbol(self) -> str:
        symbol = self._read_settings().get("currency")
        if isinstance(symbol, str) and symbol.strip():
            return symbol.strip()
        return DEFAULT_CURRENCY_SYMBOL
    
    def save_currency_symbol(self, symbol: str) -> None:
        self._update_settings(currency=symbol)
    
    def clear_all(self) -> None:
        for filename in (TRANSACTIONS_FILE, SETTINGS_FILE):
            path = self._data_dir / filename
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise StorageError(f"Failed to remove {path}: {e}")
