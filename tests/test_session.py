"""Integration tests for FinanceSession over in-memory storage."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from smartspend.agents import CHAT_FAILURE_REPLY, UNAVAILABLE_INSIGHT, CollaboratorUnavailableError, FinanceAssistant
from smartspend.config import AppSettings
from smartspend.export import NothingToExportError
from smartspend.models import (
    Category,
    InvalidInputError,
    TransactionDraft,
    TransactionFilter,
    TransactionType,
)
from smartspend.services.storage import InMemoryStorage, JsonFileStorage
from smartspend.session import FinanceSession, create_session, create_storage
from smartspend.validation import TransactionForm, TransactionFormValidator


def new_session(storage=None, assistant=None):
    return FinanceSession(
        storage=storage or InMemoryStorage(),
        assistant=assistant,
        app_settings=AppSettings(),
        validator=TransactionFormValidator(today=date(2024, 1, 10)),
    ).load()


def add(session, amount, type="expense", category="Food", date="2024-01-02", description="Lunch"):
    return session.add_transaction(
        TransactionDraft(amount=amount, type=type, category=category, date=date, description=description)
    )


@pytest.fixture
def session():
    s = new_session()
    add(s, "1000", type="income", category="Salary", date="2024-01-01", description="Paycheck")
    add(s, "200", description="Groceries")
    return s


class TestLedgerFlow:
    """Tests for the add / reconcile / delete flow."""
    
    def test_totals(self, session):
        totals = session.totals()
        assert (totals.income, totals.expense, totals.balance) == (
            Decimal("1000"), Decimal("200"), Decimal("800")
        )
    
    def test_set_balance(self, session):
        assert session.set_balance("500") == Decimal("-300")
        assert session.totals().balance == Decimal("500")
    
    def test_set_balance_rejects_text(self, session):
        with pytest.raises(InvalidInputError):
            session.set_balance("a lot")
        assert session.totals().balance == Decimal("800")
    
    def test_submit_form(self, session):
        tx, warnings = session.submit_form(TransactionForm(amount="15", description="Cinema", category=Category.ENTERTAINMENT))
        assert tx.date == "2024-01-10"
        assert warnings == []
        assert session.recent(1) == [tx]
    
    def test_submit_invalid_form_changes_nothing(self, session):
        with pytest.raises(InvalidInputError):
            session.submit_form(TransactionForm(amount="", description=""))
        assert len(session.transactions) == 2
    
    def test_delete(self, session):
        tx = session.recent(1)[0]
        assert session.delete_transaction(tx.id) is True
        assert session.delete_transaction(tx.id) is False
        assert session.totals().expense == Decimal("0")
    
    def test_reset_all(self, session):
        session.set_balance(10)
        session.toggle_theme()
        session.reset_all()
        
        assert session.transactions == []
        assert session.totals().balance == Decimal("0")
        assert session.settings.dark_mode is False
    
    def test_state_survives_reload(self):
        storage = InMemoryStorage()
        first = new_session(storage)
        add(first, "40")
        first.set_balance("100")
        first.toggle_currency()
        
        second = new_session(storage)
        assert len(second.transactions) == 1
        assert second.totals().balance == Decimal("100")
        assert second.settings.currency_symbol == "₹"


class TestViews:

    def test_view_filters_and_sorts(self, session):
        view = session.view(TransactionFilter(type=TransactionType.EXPENSE), "amount-desc")
        assert [tx.description for tx in view] == ["Groceries"]
    
    def test_weekly_series(self, session):
        series = session.weekly_series(reference_date=date(2024, 1, 3))
        assert len(series) == 7
        assert sum(b.expense for b in series) == Decimal("200")
    
    def test_category_breakdown(self, session):
        assert [item.category for item in session.category_breakdown()] == [Category.FOOD]
    
    def test_export_falls_back_to_full_ledger(self, session):
        filename, text = session.export_csv(
            TransactionFilter(category=Category.HEALTH), today=date(2024, 5, 6)
        )
        assert filename == "smartspend_export_2024-05-06.csv"
        assert "Groceries" in text and "Paycheck" in text
    
    def test_export_uses_session_currency(self, session):
        session.set_currency("₹")
        _, text = session.export_csv()
        assert text.rstrip("\n").endswith('"₹"')
    
    def test_export_empty_ledger(self):
        with pytest.raises(NothingToExportError):
            new_session().export_csv()
    
    def test_export_very_large_amount(self):
        s = new_session()
        add(s, "1e30", description="Lottery")
        _, text = s.export_csv()
        assert ',1000000000000000000000000000000.00,"$"' in text
        assert "Total Balance: $-1000000000000000000000000000000.00" in s.chat_context()
    
    def test_chat_context_tracks_currency(self, session):
        session.toggle_currency()
        assert "Total Balance: ₹800.00" in session.chat_context()


class TestPreferences:

    def test_toggle_currency(self):
        session = new_session()
        assert session.toggle_currency() == "₹"
        assert session.toggle_currency() == "$"
    
    def test_toggle_theme_persists(self):
        storage = InMemoryStorage()
        session = new_session(storage)
        assert session.toggle_theme() is True
        assert storage.load_theme() is True
    
    def test_failed_preference_write_still_applies(self):
        session = new_session(InMemoryStorage(fail_writes=True))
        session.toggle_theme()
        assert session.settings.dark_mode is True


class TestAssistantWiring:

    def test_without_assistant(self, session):
        assert session.has_assistant is False
        assert asyncio.run(session.insights()) == [UNAVAILABLE_INSIGHT]
        assert asyncio.run(session.chat([], "Hi")) == CHAT_FAILURE_REPLY
        assert asyncio.run(session.suggest_category("Pizza")) is None
        with pytest.raises(CollaboratorUnavailableError):
            asyncio.run(session.scan_receipt(b""))
    
    def test_chat_sends_fresh_context(self, stub_model):
        model = stub_model("ok", "ok")
        s = new_session(assistant=FinanceAssistant(model=model))
        
        asyncio.run(s.chat([], "Balance?"))
        add(s, "25", description="Snacks")
        asyncio.run(s.chat([], "Balance?"))
        
        first_context = model.calls[0][0][0]["parts"][0]
        second_context = model.calls[1][0][0]["parts"][0]
        assert "(no transactions yet)" in first_context
        assert "Snacks" in second_context


class TestFactories:

    def test_create_storage_memory(self):
        assert isinstance(create_storage(AppSettings(storage_backend="memory")), InMemoryStorage)
    
    def test_create_storage_json(self, tmp_path):
        storage = create_storage(AppSettings(storage_backend="json", data_dir=str(tmp_path)))
        assert isinstance(storage, JsonFileStorage)
        assert storage.data_dir == tmp_path
    
    def test_unconfigured_sheets_falls_back_to_json(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        storage = create_storage(AppSettings(storage_backend="sheets", data_dir=str(tmp_path)))
        assert isinstance(storage, JsonFileStorage)
    
    def test_create_session(self):
        storage = InMemoryStorage()
        storage.save_currency_symbol("₹")
        s = create_session(storage=storage, use_assistant=False)
        assert s.settings.currency_symbol == "₹"
        assert s.has_assistant is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
