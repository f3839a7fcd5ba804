"""Services package."""

from smartspend.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    LedgerStorageInterface,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    "InMemoryStorage",
    "JsonFileStorage",
    "LedgerStorageInterface",
    "StorageConnectionError",
    "StorageError",
]
