"""
In-Memory Storage

Dict-backed backend used by tests and when no persistent backend is
configured. Values are held as raw records so that loads go through the
same validation path as the file backends.
"""

from decimal import Decimal
from typing import Optional

from smartspend.models.transaction import Transaction
from smartspend.services.storage.interface import (
    DEFAULT_CURRENCY_SYMBOL,
    LedgerStorageInterface,
    StorageError,
)
from smartspend.services.storage.records import parse_offset, records_to_transactions


class InMemoryStorage(LedgerStorageInterface):
    """Keeps everything in a dict for the lifetime of the process."""
    
    def __init__(self, records: Optional[list] = None, fail_writes: bool = False):
        self._data: dict = {}
        if records is not None:
            self._data["transactions"] = list(records)
        self.fail_writes = fail_writes
        self.write_count = 0
    
    def _write(self, key: str, value: object) -> None:
        if self.fail_writes:
            raise StorageError(f"Write to {key!r} rejected")
        self._data[key] = value
        self.write_count += 1
    
    def load_transactions(self) -> list[Transaction]:
        return records_to_transactions(self._data.get("transactions", []), source="memory")
    
    def save_transactions(self, transactions: list[Transaction]) -> None:
        self._write("transactions", [tx.to_record() for tx in transactions])
    
    def load_initial_balance(self) -> Decimal:
        return parse_offset(self._data.get("initial_balance"), source="memory")
    
    def save_initial_balance(self, offset: Decimal) -> None:
        self._write("initial_balance", str(offset))
    
    def load_theme(self) -> bool:
        return self._data.get("theme") == "dark"
    
    def save_theme(self, dark_mode: bool) -> None:
        self._write("theme", "dark" if dark_mode else "light")
    
    def load_currency_symbol(self) -> str:
        return self._data.get("currency") or DEFAULT_CURRENCY_SYMBOL
    
    def save_currency_symbol(self, symbol: str) -> None:
        self._write("currency", symbol)
    
    def clear_all(self) -> None:
        if self.fail_writes:
            raise StorageError("Clear rejected")
        self._data.clear()
