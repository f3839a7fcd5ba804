"""
Core Data Models for SmartSpend

These models define the schemas for everything the ledger holds and
everything derived from it.

DESIGN DECISION: A Transaction is immutable. There is no edit-in-place;
a correction is a delete followed by a new add. The sign of an amount is
carried by its type, never by the stored value.

TransactionDraft is strict (it is what a form submits). Transaction is
lenient about amount so that a record corrupted on disk still loads and
simply counts as 0 in every figure.
"""

import re
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from smartspend.models.amounts import ZERO, parse_amount
from smartspend.models.errors import CorruptRecordError


ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_iso_date(value: object) -> str:
    """
    Return a YYYY-MM-DD string for a date or ISO date string.
    
    Lexicographic order of the result equals chronological order.
    """
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        text = value.strip()
        if ISO_DATE_PATTERN.match(text):
            # Raises ValueError for impossible dates like 2024-02-30
            return date.fromisoformat(text).isoformat()
    raise ValueError(f"Date must be YYYY-MM-DD, got {value!r}")


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Category(str, Enum):
    """
    Transaction categories.
    
    Values are the display names and are stored verbatim.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    HOUSING = "Housing"
    UTILITIES = "Utilities"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    EDUCATION = "Education"
    SALARY = "Salary"
    FREELANCE = "Freelance"
    INVESTMENT = "Investment"
    OTHER = "Other"
    
    @classmethod
    def expense_categories(cls) -> list["Category"]:
        """Categories with spending semantics (offered to AI categorization)."""
        income_like = {cls.SALARY, cls.FREELANCE, cls.INVESTMENT}
        return [cat for cat in cls if cat not in income_like]
    
    @classmethod
    def from_label(cls, label: Optional[str]) -> Optional["Category"]:
        """Match a free-text label case-insensitively. None if no match."""
        if not label:
            return None
        wanted = label.strip().strip(".").lower()
        for cat in cls:
            if cat.value.lower() == wanted:
                return cat
        return None


class TransactionType(str, Enum):
    """Determines the sign applied during aggregation."""
    EXPENSE = "expense"
    INCOME = "income"


class SortKey(str, Enum):
    """Orderings offered by the history view."""
    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    AMOUNT_DESC = "amount-desc"
    AMOUNT_ASC = "amount-asc"


# =============================================================================
# LEDGER MODELS
# =============================================================================

class TransactionDraft(BaseModel):
    """
    A transaction as submitted by a form or a receipt scan, before it has an id.
    
    Constructing one is the caller-side validation: a draft always has a
    finite non-negative amount and a non-empty description.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)
    
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative magnitude"
    )
    category: Category = Field(
        default=Category.FOOD,
        description="One of the fixed categories"
    )
    date: str = Field(
        ...,
        description="Calendar date as YYYY-MM-DD"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Free-text label"
    )
    type: TransactionType = Field(
        default=TransactionType.EXPENSE,
        description="expense or income"
    )
    
    @field_validator('amount', mode='before')
    @classmethod
    def parse_amount_input(cls, v: object) -> Decimal:
        """Accept numbers or numeric text; reject anything else."""
        try:
            return parse_amount(v)
        except CorruptRecordError:
            raise ValueError("Amount must be a number")
    
    @field_validator('date', mode='before')
    @classmethod
    def parse_date_input(cls, v: object) -> str:
        return normalize_iso_date(v)


class Transaction(BaseModel):
    """
    A recorded ledger entry.
    
    `amount` is normally a Decimal. Text that cannot be parsed is kept
    verbatim so the record survives a load; aggregation treats it as 0.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)
    
    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier, never reused"
    )
    amount: Union[Decimal, str] = Field(
        ...,
        description="Magnitude; text only for corrupt stored records"
    )
    category: Category
    date: str
    description: str = ""
    type: TransactionType
    
    @field_validator('amount', mode='before')
    @classmethod
    def keep_amount_lenient(cls, v: object) -> Union[Decimal, str]:
        try:
            return parse_amount(v)
        except CorruptRecordError:
            return "" if v is None else str(v)
    
    @field_validator('date', mode='before')
    @classmethod
    def parse_date_input(cls, v: object) -> str:
        return normalize_iso_date(v)
    
    @classmethod
    def from_draft(cls, draft: TransactionDraft, transaction_id: str) -> "Transaction":
        """Attach an id to a validated draft."""
        return cls(id=transaction_id, **draft.model_dump())
    
    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE
    
    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME
    
    def to_record(self) -> dict:
        """Serializable dict for storage (amount as text to keep it exact)."""
        return {
            "id": self.id,
            "amount": str(self.amount),
            "category": self.category.value,
            "date": self.date,
            "description": self.description,
            "type": self.type.value,
        }


# =============================================================================
# DERIVED FIGURES
# =============================================================================

class Totals(BaseModel):
    """Income, expense and balance for a ledger state."""
    
    income: Decimal = ZERO
    expense: Decimal = ZERO
    net_flow: Decimal = Field(
        default=ZERO,
        description="income - expense, independent of the offset"
    )
    balance: Decimal = Field(
        default=ZERO,
        description="initial balance offset + net flow"
    )


class CategoryTotal(BaseModel):
    """One slice of the expense breakdown."""
    
    category: Category
    total: Decimal
    top_entries: list[Transaction] = Field(default_factory=list)


class DayBucket(BaseModel):
    """One calendar day of the weekly series."""
    
    day_label: str = Field(
        ...,
        description="Short weekday name, Sun..Sat"
    )
    date: str
    income: Decimal = ZERO
    expense: Decimal = ZERO
    top_expenses: list[Transaction] = Field(default_factory=list)


class TransactionFilter(BaseModel):
    """
    Predicates for the history view and export.
    
    Unset fields match everything. Date bounds are inclusive.
    """
    model_config = ConfigDict(str_strip_whitespace=True)
    
    category: Optional[Category] = None
    type: Optional[TransactionType] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    
    @field_validator('date_from', 'date_to', mode='before')
    @classmethod
    def parse_bounds(cls, v: object) -> Optional[str]:
        if v is None or v == "":
            return None
        return normalize_iso_date(v)
    
    @property
    def is_empty(self) -> bool:
        return not (self.category or self.type or self.date_from or self.date_to)


# =============================================================================
# SESSION SETTINGS
# =============================================================================

class SessionSettings(BaseModel):
    """Persisted user preferences, loaded at session start."""
    
    dark_mode: bool = False
    currency_symbol: str = Field(
        default="$",
        min_length=1,
        max_length=3,
    )
