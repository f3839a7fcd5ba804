"""
Filter/Sort Engine

Read-only projection of the ledger for the history view and for export.
It never mutates the ledger; it returns a new list.

Filters:
- category / type: exact match against the enumerated values
- date_from / date_to: inclusive string comparison on YYYY-MM-DD
  (lexicographic order equals chronological order for ISO dates)

Sort keys compare dates as calendar dates and amounts by magnitude
only - income and expense are not signed for sorting. An unknown sort
key leaves the filtered order untouched.
"""

from datetime import date
from typing import Optional, Sequence, Union

import structlog

from smartspend.models.amounts import coerce_amount
from smartspend.models.transaction import (
    SortKey,
    Transaction,
    TransactionFilter,
)


logger = structlog.get_logger(__name__)


def matches(tx: Transaction, criteria: TransactionFilter) -> bool:
    """True when tx satisfies every set field of criteria."""
    if criteria.category is not None and tx.category != criteria.category:
        return False
    if criteria.type is not None and tx.type != criteria.type:
        return False
    if criteria.date_from is not None and tx.date < criteria.date_from:
        return False
    if criteria.date_to is not None and tx.date > criteria.date_to:
        return False
    return True


def _resolve_sort_key(sort_key: Union[SortKey, str, None]) -> Optional[SortKey]:
    if sort_key is None or isinstance(sort_key, SortKey):
        return sort_key
    try:
        return SortKey(sort_key)
    except ValueError:
        logger.debug("unknown_sort_key", sort_key=sort_key)
        return None


def sort_transactions(
    transactions: Sequence[Transaction],
    sort_key: Union[SortKey, str, None],
) -> list[Transaction]:
    """Stable sort by one of the SortKey orderings."""
    key = _resolve_sort_key(sort_key)
    
    if key in (SortKey.DATE_DESC, SortKey.DATE_ASC):
        return sorted(
            transactions,
            key=lambda tx: date.fromisoformat(tx.date),
            reverse=key == SortKey.DATE_DESC,
        )
    if key in (SortKey.AMOUNT_DESC, SortKey.AMOUNT_ASC):
        return sorted(
            transactions,
            key=lambda tx: coerce_amount(tx.amount),
            reverse=key == SortKey.AMOUNT_DESC,
        )
    return list(transactions)


def apply(
    transactions: Sequence[Transaction],
    criteria: Optional[TransactionFilter] = None,
    sort_key: Union[SortKey, str, None] = None,
) -> list[Transaction]:
    """
    Filter then sort.
    
    With no criteria and no sort key this returns the ledger in its
    original order.
    """
    criteria = criteria or TransactionFilter()
    selected = [tx for tx in transactions if matches(tx, criteria)]
    return sort_transactions(selected, sort_key)
