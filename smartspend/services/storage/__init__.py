"""
Storage Services Package

Provides the abstract ledger storage interface and its implementations:
local JSON files (default), Google Sheets, and in-memory (tests).
"""

from smartspend.services.storage.interface import (
    DEFAULT_CURRENCY_SYMBOL,
    LedgerStorageInterface,
    StorageConnectionError,
    StorageError,
)
from smartspend.services.storage.json_file import JsonFileStorage
from smartspend.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "DEFAULT_CURRENCY_SYMBOL",
    "LedgerStorageInterface",
    # Exceptions
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
