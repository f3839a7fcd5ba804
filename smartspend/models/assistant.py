"""
Models exchanged with the AI assistant.

CRITICAL: Everything here is a SUGGESTION. A ReceiptData only pre-fills
a form; nothing reaches the ledger until the user submits it.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from smartspend.models.amounts import parse_amount
from smartspend.models.errors import CorruptRecordError
from smartspend.models.transaction import Category, normalize_iso_date


MERCHANT_MAX_LENGTH = 200


class InsightSeverity(str, Enum):
    """How an insight should be presented."""
    WARNING = "warning"
    POSITIVE = "positive"
    NEUTRAL = "neutral"


class ChatRole(str, Enum):
    USER = "user"
    MODEL = "model"


class ReceiptData(BaseModel):
    """
    Fields read off a receipt image.
    
    All fields are optional - a partial read is still useful, and a field
    that does not validate is dropped rather than failing the whole scan.
    """
    model_config = ConfigDict(str_strip_whitespace=True)
    
    amount: Optional[Decimal] = Field(default=None, ge=0)
    date: Optional[str] = None
    merchant: Optional[str] = Field(default=None, max_length=MERCHANT_MAX_LENGTH)
    category: Optional[Category] = None
    
    @field_validator('amount', mode='before')
    @classmethod
    def drop_bad_amount(cls, v: object) -> Optional[Decimal]:
        if v is None:
            return None
        try:
            amount = parse_amount(v)
        except CorruptRecordError:
            return None
        return amount if amount >= 0 else None
    
    @field_validator('merchant', mode='before')
    @classmethod
    def clip_merchant(cls, v: object) -> Optional[str]:
        if not isinstance(v, str) or not v.strip():
            return None
        return v.strip()[:MERCHANT_MAX_LENGTH].rstrip()
    
    @field_validator('date', mode='before')
    @classmethod
    def drop_bad_date(cls, v: object) -> Optional[str]:
        if not v:
            return None
        try:
            return normalize_iso_date(v)
        except ValueError:
            return None
    
    @field_validator('category', mode='before')
    @classmethod
    def drop_unknown_category(cls, v: object) -> Optional[Category]:
        if isinstance(v, Category):
            return v
        return Category.from_label(v) if isinstance(v, str) else None
    
    @property
    def is_empty(self) -> bool:
        return not (self.amount or self.date or self.merchant or self.category)


class SpendingInsight(BaseModel):
    """One short, actionable observation about spending."""
    
    title: str = Field(..., max_length=120)
    message: str = Field(..., max_length=500)
    severity: InsightSeverity = InsightSeverity.NEUTRAL
    
    @field_validator('severity', mode='before')
    @classmethod
    def default_unknown_severity(cls, v: object) -> object:
        try:
            return InsightSeverity(v)
        except ValueError:
            return InsightSeverity.NEUTRAL


class ChatMessage(BaseModel):
    """
    One turn of the conversation.
    
    The caller owns the ordered history; the assistant is stateless.
    """
    
    role: ChatRole
    text: str
