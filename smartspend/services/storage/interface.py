"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep a local JSON file as the default backend
2. Swap in Google Sheets without touching the ledger
3. Use in-memory storage for testing

CONTRACT:
- load_* NEVER raises. Missing or corrupt data yields the default
  (empty list / 0 / False / "$").
- save_* MAY raise StorageError. The ledger treats persistence as
  best-effort and never rolls back an in-memory change because of it.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from smartspend.models.transaction import Transaction


DEFAULT_CURRENCY_SYMBOL = "$"


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger persistence.
    
    Any storage implementation (local file, Google Sheets, etc.)
    must implement these methods.
    """
    
    @abstractmethod
    def load_transactions(self) -> list[Transaction]:
        """
        Load the transaction sequence in stored order (newest first).
        
        Records that fail validation are skipped.
        """
        pass
    
    @abstractmethod
    def save_transactions(self, transactions: list[Transaction]) -> None:
        """
        Replace the stored sequence.
        
        Raises:
            StorageError: If the write fails
        """
        pass
    
    @abstractmethod
    def load_initial_balance(self) -> Decimal:
        """Load the signed balance offset (0 if unset)."""
        pass
    
    @abstractmethod
    def save_initial_balance(self, offset: Decimal) -> None:
        pass
    
    @abstractmethod
    def load_theme(self) -> bool:
        """True when dark mode was last selected."""
        pass
    
    @abstractmethod
    def save_theme(self, dark_mode: bool) -> None:
        pass
    
    @abstractmethod
    def load_currency_symbol(self) -> str:
        pass
    
    @abstractmethod
    def save_currency_symbol(self, symbol: str) -> None:
        pass
    
    @abstractmethod
    def clear_all(self) -> None:
        """Remove every stored transaction and setting."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
