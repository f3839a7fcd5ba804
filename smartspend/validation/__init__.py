"""Caller-side validation of transaction input."""

from smartspend.validation.validator import (
    TransactionForm,
    TransactionFormValidator,
    apply_receipt,
)

__all__ = ["TransactionForm", "TransactionFormValidator", "apply_receipt"]
