"""
Transaction Form Validation

DESIGN DECISION: Validation happens at the caller, before the ledger.
The Ledger Store accepts whatever it is given; this module is the only
place user input is checked.

TWO STAGES:

STAGE 1 - SCHEMA:
- amount present and numeric, not negative
- description present
- date is a real YYYY-MM-DD date
- category / type are known values

STAGE 2 - SEMANTIC (warnings only, never block):
- date far in the future
- amount suspiciously large

IMPORTANT: Validation NEVER silently fixes issues.
Errors are reported together so the user can fix them in one pass.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ValidationError

from smartspend.models.assistant import ReceiptData
from smartspend.models.errors import InvalidInputError
from smartspend.models.transaction import (
    Category,
    TransactionDraft,
    TransactionType,
)


FUTURE_DATE_TOLERANCE_DAYS = 7
LARGE_AMOUNT_WARNING = Decimal("1000000")


class TransactionForm(BaseModel):
    """
    Raw form state, as typed by the user.
    
    Everything is text except the two dropdowns; nothing here is
    guaranteed to be valid.
    """
    
    type: TransactionType = TransactionType.EXPENSE
    amount: str = ""
    category: Category = Category.FOOD
    date: str = ""
    description: str = ""


class TransactionFormValidator:
    """Turns a TransactionForm into a TransactionDraft or reports why it can't."""
    
    def __init__(self, today: Optional[date] = None):
        self._today = today
    
    @property
    def today(self) -> date:
        return self._today or date.today()
    
    def validate(self, form: TransactionForm) -> TransactionDraft:
        """
        Stage 1: build a draft.
        
        Raises:
            InvalidInputError: With one issue per failing field
        """
        issues = []
        if not form.amount.strip():
            issues.append("amount: required")
        if not form.description.strip():
            issues.append("description: required")
        if issues:
            raise InvalidInputError("Amount and description are required", issues=issues)
        
        try:
            return TransactionDraft(
                amount=form.amount,
                category=form.category,
                date=form.date or self.today,
                description=form.description,
                type=form.type,
            )
        except ValidationError as e:
            issues = [
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise InvalidInputError("Transaction is not valid", issues=issues)
    
    def warnings(self, draft: TransactionDraft) -> list[str]:
        """Stage 2: non-blocking warnings for an already valid draft."""
        found = []
        latest_expected = self.today + timedelta(days=FUTURE_DATE_TOLERANCE_DAYS)
        if date.fromisoformat(draft.date) > latest_expected:
            found.append(f"Date {draft.date} is more than a week in the future")
        if draft.amount >= LARGE_AMOUNT_WARNING:
            found.append(f"Amount {draft.amount} is unusually large")
        return found


def apply_receipt(form: TransactionForm, receipt: ReceiptData) -> TransactionForm:
    """
    Merge a receipt scan into the form.
    
    Fields the scan did not find leave the form untouched. A scanned
    receipt is always an expense.
    """
    updates = {"type": TransactionType.EXPENSE}
    if receipt.amount is not None:
        updates["amount"] = str(receipt.amount)
    if receipt.date:
        updates["date"] = receipt.date
    if receipt.merchant:
        updates["description"] = receipt.merchant
    if receipt.category is not None:
        updates["category"] = receipt.category
    return form.model_copy(update=updates)
