"""Shared fixtures. No test touches the network or a real Gemini key."""

from types import SimpleNamespace

import pytest

from smartspend.models import Transaction


@pytest.fixture
def make_tx():
    """Factory for Transaction records with sensible defaults."""
    counter = {"n": 0}
    
    def _make(
        amount="10",
        type="expense",
        category="Food",
        date="2024-01-02",
        description="Lunch",
        id=None,
    ):
        counter["n"] += 1
        return Transaction(
            id=id or f"tx-{counter['n']}",
            amount=amount,
            type=type,
            category=category,
            date=date,
            description=description,
        )
    
    return _make


@pytest.fixture
def sample_ledger(make_tx):
    """The two-entry ledger used throughout: +1000 income, -200 Food."""
    return [
        make_tx(amount="200", type="expense", category="Food", date="2024-01-02", description="Groceries"),
        make_tx(amount="1000", type="income", category="Salary", date="2024-01-01", description="Paycheck"),
    ]


class StubModel:
    """
    Stands in for genai.GenerativeModel.
    
    Each call pops the next reply; an Exception reply is raised instead.
    """
    
    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []
    
    async def generate_content_async(self, contents, **kwargs):
        self.calls.append((contents, kwargs))
        reply = self.replies.pop(0) if self.replies else RuntimeError("no reply queued")
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(text=reply)


@pytest.fixture
def stub_model():
    return StubModel
