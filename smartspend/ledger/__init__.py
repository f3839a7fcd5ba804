"""Ledger package: the transaction store and balance reconciliation."""

from smartspend.ledger.reconciler import BalanceReconciler
from smartspend.ledger.store import LedgerStore, new_transaction_id

__all__ = ["BalanceReconciler", "LedgerStore", "new_transaction_id"]
