"""
Data Models Package

This package contains all Pydantic models used in SmartSpend.
All data flowing through the system must conform to these schemas.
"""

from smartspend.models.amounts import (
    ZERO,
    coerce_amount,
    format_amount,
    parse_amount,
    round_cents,
)
from smartspend.models.assistant import (
    ChatMessage,
    ChatRole,
    InsightSeverity,
    ReceiptData,
    SpendingInsight,
)
from smartspend.models.errors import CorruptRecordError, InvalidInputError
from smartspend.models.transaction import (
    Category,
    CategoryTotal,
    DayBucket,
    SessionSettings,
    SortKey,
    Totals,
    Transaction,
    TransactionDraft,
    TransactionFilter,
    TransactionType,
    normalize_iso_date,
)

__all__ = [
    # Amounts
    "ZERO",
    "coerce_amount",
    "format_amount",
    "parse_amount",
    "round_cents",
    # Errors
    "CorruptRecordError",
    "InvalidInputError",
    # Ledger models
    "Category",
    "CategoryTotal",
    "DayBucket",
    "SessionSettings",
    "SortKey",
    "Totals",
    "Transaction",
    "TransactionDraft",
    "TransactionFilter",
    "TransactionType",
    "normalize_iso_date",
    # Assistant models
    "ChatMessage",
    "ChatRole",
    "InsightSeverity",
    "ReceiptData",
    "SpendingInsight",
]
