"""
Balance Reconciler

Computes the current balance from the ledger plus the offset, and lets
the user declare their real-world balance without rewriting history:

    balance    = initial_balance_offset + net_flow
    new_offset = target_balance - net_flow

Only the offset changes on reconcile. No transaction amount is touched.
"""

from decimal import Decimal

import structlog

from smartspend.analytics.aggregator import summarize
from smartspend.ledger.store import LedgerStore
from smartspend.models.amounts import parse_amount
from smartspend.models.errors import CorruptRecordError, InvalidInputError
from smartspend.models.transaction import Totals


logger = structlog.get_logger(__name__)


class BalanceReconciler:
    """Derives totals from a LedgerStore and reconciles its offset."""
    
    def __init__(self, store: LedgerStore):
        self._store = store
    
    def compute_totals(self) -> Totals:
        """
        Income, expense, net flow and balance for the current ledger state.
        
        Recomputed on every call; nothing is cached.
        """
        income, expense = summarize(self._store.list())
        net_flow = income - expense
        return Totals(
            income=income,
            expense=expense,
            net_flow=net_flow,
            balance=self._store.initial_balance_offset + net_flow,
        )
    
    def reconcile_to_target(self, target_balance: object) -> Decimal:
        """
        Solve for the offset that makes the balance equal target_balance.
        
        Args:
            target_balance: Desired balance (number or numeric text)
        
        Returns:
            The new offset
        
        Raises:
            InvalidInputError: If target_balance is not a finite number.
                              The offset is left unchanged.
        """
        try:
            target = parse_amount(target_balance)
        except CorruptRecordError:
            raise InvalidInputError(
                "Target balance must be a number",
                issues=[f"target_balance: not a finite number ({target_balance!r})"],
            )
        
        net_flow = self.compute_totals().net_flow
        new_offset = target - net_flow
        previous = self._store.initial_balance_offset
        self._store.set_initial_balance_offset(new_offset)
        
        logger.info(
            "balance_reconciled",
            target_balance=str(target),
            net_flow=str(net_flow),
            previous_offset=str(previous),
            new_offset=str(new_offset),
        )
        return new_offset
