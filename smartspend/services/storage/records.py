"""Helpers shared by storage backends for turning raw records into models."""

from decimal import Decimal
from typing import Iterable

import structlog
from pydantic import ValidationError

from smartspend.models.amounts import ZERO, parse_amount
from smartspend.models.errors import CorruptRecordError
from smartspend.models.transaction import Transaction


logger = structlog.get_logger(__name__)


def records_to_transactions(records: Iterable[object], source: str) -> list[Transaction]:
    """
    Validate raw dict records, skipping the ones that cannot be loaded.
    
    A non-numeric amount is NOT a reason to skip: Transaction keeps the
    text and aggregation counts it as 0.
    """
    transactions = []
    seen_ids = set()
    
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("record_skipped", source=source, index=index, reason="not an object")
            continue
        try:
            tx = Transaction.model_validate(record)
        except ValidationError as e:
            logger.warning(
                "record_skipped",
                source=source,
                index=index,
                reason=str(e.errors()[0].get("msg", "invalid")),
            )
            continue
        if tx.id in seen_ids:
            logger.warning("record_skipped", source=source, index=index, reason="duplicate id")
            continue
        seen_ids.add(tx.id)
        transactions.append(tx)
    
    return transactions


def parse_offset(value: object, source: str) -> Decimal:
    """Balance offset from storage; 0 when missing or corrupt."""
    if value is None or value == "":
        return ZERO
    try:
        return parse_amount(value)
    except CorruptRecordError:
        logger.warning("initial_balance_corrupt", source=source, value=repr(value))
        return ZERO
