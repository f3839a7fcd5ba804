"""
Ledger Store

Holds the ordered transaction sequence (newest first) and the signed
initial-balance offset for one session.

DESIGN DECISION: The store never rejects input. Validation happens
before a TransactionDraft exists; by the time add() is called the
record is accepted unconditionally.

PERSISTENCE: Every mutation is written through to the storage backend
immediately. A failed write is logged and reported via
`last_write_error`, but the in-memory change is NEVER rolled back -
the ledger in memory is the source of truth for the session.
"""

from decimal import Decimal
from typing import Callable, Optional
from uuid import uuid4

import structlog

from smartspend.models.amounts import ZERO
from smartspend.models.transaction import Transaction, TransactionDraft
from smartspend.services.storage import LedgerStorageInterface, StorageError


logger = structlog.get_logger(__name__)


def new_transaction_id() -> str:
    """Generate an opaque unique transaction id."""
    return uuid4().hex


class LedgerStore:
    """
    In-memory ledger with write-through persistence.
    
    Usage:
        store = LedgerStore(storage)
        store.load()
        tx = store.add(draft)
        store.remove(tx.id)
    """
    
    def __init__(
        self,
        storage: Optional[LedgerStorageInterface] = None,
        id_factory: Callable[[], str] = new_transaction_id,
    ):
        """
        Args:
            storage: Persistence backend. If None, the ledger is memory-only.
            id_factory: Source of fresh ids (overridable in tests)
        """
        self._storage = storage
        self._id_factory = id_factory
        self._transactions: list[Transaction] = []
        self._initial_balance_offset: Decimal = ZERO
        # Ids ever issued in this session, so a removed id is never reused
        self._issued_ids: set[str] = set()
        self.last_write_error: Optional[str] = None
    
    # -------------------------------------------------------------------------
    # Session boundary
    # -------------------------------------------------------------------------
    
    def load(self) -> None:
        """Load transactions and offset from storage (once per session)."""
        if self._storage is None:
            return
        self._transactions = list(self._storage.load_transactions())
        self._initial_balance_offset = self._storage.load_initial_balance()
        self._issued_ids = {tx.id for tx in self._transactions}
        logger.info(
            "ledger_loaded",
            transaction_count=len(self._transactions),
            initial_balance_offset=str(self._initial_balance_offset),
        )
    
    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------
    
    def add(self, draft: TransactionDraft) -> Transaction:
        """Assign a fresh id, prepend, persist, and return the full record."""
        transaction_id = self._fresh_id()
        tx = Transaction.from_draft(draft, transaction_id)
        self._transactions.insert(0, tx)
        
        logger.info(
            "transaction_added",
            transaction_id=tx.id,
            type=tx.type.value,
            category=tx.category.value,
            amount=str(tx.amount),
            date=tx.date,
        )
        self._persist_transactions()
        return tx
    
    def remove(self, transaction_id: str) -> bool:
        """
        Remove the matching entry if present.
        
        Removing an absent id is a no-op, not an error.
        
        Returns:
            True if an entry was removed
        """
        remaining = [tx for tx in self._transactions if tx.id != transaction_id]
        if len(remaining) == len(self._transactions):
            logger.debug("transaction_remove_noop", transaction_id=transaction_id)
            return False
        
        self._transactions = remaining
        logger.info("transaction_removed", transaction_id=transaction_id)
        self._persist_transactions()
        return True
    
    def list(self) -> list[Transaction]:
        """Full current sequence, newest first. Returns a copy."""
        return list(self._transactions)
    
    def clear(self) -> None:
        """Empty the ledger and reset the offset to 0 (full data reset only)."""
        self._transactions = []
        self._initial_balance_offset = ZERO
        logger.warning("ledger_cleared")
        if self._storage is None:
            return
        try:
            self._storage.clear_all()
            self.last_write_error = None
        except StorageError as e:
            self._record_write_failure("clear_all", e)
    
    # -------------------------------------------------------------------------
    # Offset
    # -------------------------------------------------------------------------
    
    @property
    def initial_balance_offset(self) -> Decimal:
        return self._initial_balance_offset
    
    def set_initial_balance_offset(self, offset: Decimal) -> None:
        """Replace the offset and persist it."""
        self._initial_balance_offset = offset
        if self._storage is None:
            return
        try:
            self._storage.save_initial_balance(offset)
            self.last_write_error = None
        except StorageError as e:
            self._record_write_failure("save_initial_balance", e)
    
    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------
    
    def _fresh_id(self) -> str:
        transaction_id = self._id_factory()
        while transaction_id in self._issued_ids:
            transaction_id = self._id_factory()
        self._issued_ids.add(transaction_id)
        return transaction_id
    
    def _persist_transactions(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.save_transactions(self.list())
            self.last_write_error = None
        except StorageError as e:
            self._record_write_failure("save_transactions", e)
    
    def _record_write_failure(self, operation: str, error: Exception) -> None:
        # Log failure but don't raise
        self.last_write_error = str(error)
        logger.error(
            "storage_write_failed",
            operation=operation,
            error=str(error),
        )
    
    def __len__(self) -> int:
        return len(self._transactions)
