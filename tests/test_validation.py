"""Tests for caller-side form validation."""

from datetime import date
from decimal import Decimal

import pytest

from smartspend.models import Category, InvalidInputError, ReceiptData, TransactionType
from smartspend.validation import TransactionForm, TransactionFormValidator, apply_receipt


TODAY = date(2024, 1, 10)


@pytest.fixture
def validator():
    return TransactionFormValidator(today=TODAY)


class TestTransactionFormValidator:
    """Tests for stage 1 (errors) and stage 2 (warnings)."""
    
    def test_valid_form(self, validator):
        draft = validator.validate(
            TransactionForm(amount="12.5", description="Taxi", category=Category.TRANSPORT, date="2024-01-09")
        )
        assert draft.amount == Decimal("12.5")
        assert draft.category == Category.TRANSPORT
        assert draft.date == "2024-01-09"
    
    def test_missing_amount_and_description(self, validator):
        with pytest.raises(InvalidInputError) as exc_info:
            validator.validate(TransactionForm(amount=" ", description=""))
        assert exc_info.value.issues == ["amount: required", "description: required"]
    
    def test_non_numeric_amount(self, validator):
        with pytest.raises(InvalidInputError) as exc_info:
            validator.validate(TransactionForm(amount="ten", description="Taxi", date="2024-01-09"))
        assert any(issue.startswith("amount") for issue in exc_info.value.issues)
    
    def test_negative_amount(self, validator):
        with pytest.raises(InvalidInputError):
            validator.validate(TransactionForm(amount="-1", description="Taxi", date="2024-01-09"))
    
    def test_bad_date(self, validator):
        with pytest.raises(InvalidInputError) as exc_info:
            validator.validate(TransactionForm(amount="1", description="Taxi", date="09/01/2024"))
        assert any(issue.startswith("date") for issue in exc_info.value.issues)
    
    def test_empty_date_defaults_to_today(self, validator):
        draft = validator.validate(TransactionForm(amount="1", description="Taxi"))
        assert draft.date == "2024-01-10"
    
    def test_no_warnings_for_ordinary_draft(self, validator):
        draft = validator.validate(TransactionForm(amount="1", description="Taxi"))
        assert validator.warnings(draft) == []
    
    def test_far_future_date_warns(self, validator):
        draft = validator.validate(TransactionForm(amount="1", description="Taxi", date="2024-01-18"))
        assert len(validator.warnings(draft)) == 1
    
    def test_large_amount_warns(self, validator):
        draft = validator.validate(TransactionForm(amount="2000000", description="House", date="2024-01-10"))
        warnings = validator.warnings(draft)
        assert len(warnings) == 1
        assert "large" in warnings[0]


class TestApplyReceipt:
    """Tests for merging a receipt scan into the form."""
    
    def test_found_fields_override(self):
        form = TransactionForm(type=TransactionType.INCOME, amount="1", description="old")
        receipt = ReceiptData(amount=Decimal("23.40"), date="2024-01-05", merchant="Cafe", category=Category.FOOD)
        
        merged = apply_receipt(form, receipt)
        
        assert merged.type == TransactionType.EXPENSE
        assert merged.amount == "23.40"
        assert merged.date == "2024-01-05"
        assert merged.description == "Cafe"
        assert merged.category == Category.FOOD
    
    def test_missing_fields_leave_form_untouched(self):
        form = TransactionForm(amount="5", description="Lunch", category=Category.HEALTH, date="2024-01-01")
        
        merged = apply_receipt(form, ReceiptData(merchant="Pharmacy"))
        
        assert merged.amount == "5"
        assert merged.date == "2024-01-01"
        assert merged.category == Category.HEALTH
        assert merged.description == "Pharmacy"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
