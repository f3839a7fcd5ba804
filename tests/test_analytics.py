"""Tests for the Aggregator and the Filter/Sort Engine."""

from datetime import date
from decimal import Decimal

import pytest

from smartspend.analytics import aggregator, filters
from smartspend.models import Category, SortKey, TransactionFilter, TransactionType


class TestSummarize:

    def test_income_and_expense(self, sample_ledger):
        assert aggregator.summarize(sample_ledger) == (Decimal("1000"), Decimal("200"))
    
    def test_order_does_not_change_sums(self, sample_ledger):
        assert aggregator.summarize(reversed(sample_ledger)) == aggregator.summarize(sample_ledger)
    
    def test_empty(self):
        assert aggregator.summarize([]) == (Decimal("0"), Decimal("0"))


class TestCategoryBreakdown:
    """Tests for the expense-by-category drill-down."""
    
    def test_groups_expenses_in_first_occurrence_order(self, make_tx):
        txs = [
            make_tx(amount="5", category="Transport"),
            make_tx(amount="10", category="Food"),
            make_tx(amount="7", category="Transport"),
            make_tx(amount="999", category="Salary", type="income"),
        ]
        breakdown = aggregator.category_breakdown(txs)
        
        assert [item.category for item in breakdown] == [Category.TRANSPORT, Category.FOOD]
        assert breakdown[0].total == Decimal("12")
        assert breakdown[1].total == Decimal("10")
    
    def test_totals_add_up_to_total_expense(self, make_tx):
        txs = [
            make_tx(amount="12.35", category="Food"),
            make_tx(amount="2500", category="Salary", type="income"),
            make_tx(amount="40", category="Transport"),
            make_tx(amount="oops", category="Utilities"),
            make_tx(amount="0.65", category="Food"),
            make_tx(amount="99.99", category="Shopping"),
            make_tx(amount="15", category="Freelance", type="income"),
        ]
        _, expense = aggregator.summarize(txs)
        breakdown = aggregator.category_breakdown(txs)
        
        assert sum((item.total for item in breakdown), Decimal("0")) == expense
        assert expense == Decimal("152.99")
    
    def test_no_expenses_gives_empty_list(self, make_tx):
        assert aggregator.category_breakdown([make_tx(type="income", category="Salary")]) == []
    
    def test_top_entries_capped_and_descending(self, make_tx):
        txs = [make_tx(amount=str(n), description=f"d{n}") for n in (1, 4, 2, 3)]
        top = aggregator.category_breakdown(txs)[0].top_entries
        assert [tx.description for tx in top] == ["d4", "d3", "d2"]
    
    def test_ties_keep_original_order(self, make_tx):
        txs = [
            make_tx(amount="5", description="first"),
            make_tx(amount="5", description="second"),
            make_tx(amount="5", description="third"),
            make_tx(amount="5", description="fourth"),
        ]
        top = aggregator.category_breakdown(txs)[0].top_entries
        assert [tx.description for tx in top] == ["first", "second", "third"]
    
    def test_corrupt_amount_contributes_zero(self, make_tx):
        txs = [make_tx(amount="abc"), make_tx(amount="20")]
        breakdown = aggregator.category_breakdown(txs)
        assert breakdown[0].total == Decimal("20")
    
    def test_top_categories(self, make_tx):
        txs = [
            make_tx(amount="5", category="Transport"),
            make_tx(amount="10", category="Food"),
            make_tx(amount="1", category="Health"),
        ]
        top = aggregator.top_categories(aggregator.category_breakdown(txs), 2)
        assert [item.category for item in top] == [Category.FOOD, Category.TRANSPORT]


class TestWeeklySeries:
    """Tests for the Sunday..Saturday weekly series."""
    
    def test_start_of_week(self):
        assert aggregator.start_of_week(date(2024, 1, 3)) == date(2023, 12, 31)
        assert aggregator.start_of_week(date(2023, 12, 31)) == date(2023, 12, 31)
        assert aggregator.start_of_week(date(2024, 1, 6)) == date(2023, 12, 31)
    
    def test_always_seven_buckets_sunday_first(self):
        series = aggregator.weekly_series([], reference_date=date(2024, 1, 3))
        
        assert len(series) == 7
        assert [b.day_label for b in series] == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
        assert series[0].date == "2023-12-31"
        assert series[-1].date == "2024-01-06"
        assert all(b.income == 0 and b.expense == 0 and b.top_expenses == [] for b in series)
    
    def test_buckets_by_exact_date(self, make_tx):
        txs = [
            make_tx(amount="200", date="2024-01-02"),
            make_tx(amount="1000", type="income", category="Salary", date="2024-01-01"),
            make_tx(amount="50", date="2024-01-08"),  # next week
        ]
        series = aggregator.weekly_series(txs, reference_date=date(2024, 1, 3))
        by_date = {b.date: b for b in series}
        
        assert by_date["2024-01-01"].income == Decimal("1000")
        assert by_date["2024-01-02"].expense == Decimal("200")
        assert len(by_date["2024-01-02"].top_expenses) == 1
    
    def test_week_sums_match_direct_filter(self, make_tx):
        txs = [
            make_tx(amount=str(n), type="income" if n % 3 == 0 else "expense", date=f"2024-01-{n:02d}")
            for n in range(1, 15)
        ]
        series = aggregator.weekly_series(txs, reference_date=date(2024, 1, 10))
        week = filters.apply(txs, TransactionFilter(date_from="2024-01-07", date_to="2024-01-13"))
        
        income, expense = aggregator.summarize(week)
        assert sum(b.income for b in series) == income
        assert sum(b.expense for b in series) == expense
    
    def test_daily_top_expenses_exclude_income(self, make_tx):
        txs = [
            make_tx(amount="500", type="income", category="Salary", date="2024-01-02"),
            make_tx(amount="3", date="2024-01-02"),
        ]
        bucket = aggregator.weekly_series(txs, reference_date=date(2024, 1, 2))[2]
        assert [tx.amount for tx in bucket.top_expenses] == [Decimal("3")]


class TestFilters:
    """Tests for the Filter/Sort Engine."""
    
    def test_no_filter_no_sort_is_identity(self, sample_ledger):
        assert filters.apply(sample_ledger) == sample_ledger
    
    def test_does_not_mutate_input(self, sample_ledger):
        before = list(sample_ledger)
        filters.apply(sample_ledger, sort_key=SortKey.DATE_ASC)
        assert sample_ledger == before
    
    def test_category_and_type(self, sample_ledger):
        assert filters.apply(sample_ledger, TransactionFilter(type=TransactionType.INCOME))[0].description == "Paycheck"
        assert filters.apply(sample_ledger, TransactionFilter(category=Category.FOOD))[0].description == "Groceries"
        assert filters.apply(sample_ledger, TransactionFilter(category=Category.HEALTH)) == []
    
    def test_date_range_is_inclusive(self, make_tx):
        txs = [make_tx(date=d) for d in ("2024-01-01", "2024-01-02", "2024-01-03")]
        result = filters.apply(txs, TransactionFilter(date_from="2024-01-01", date_to="2024-01-02"))
        assert [tx.date for tx in result] == ["2024-01-01", "2024-01-02"]
    
    def test_sort_by_date(self, make_tx):
        txs = [make_tx(date=d) for d in ("2024-01-02", "2023-12-31", "2024-01-10")]
        assert [tx.date for tx in filters.apply(txs, sort_key="date-asc")] == [
            "2023-12-31", "2024-01-02", "2024-01-10"
        ]
        assert [tx.date for tx in filters.apply(txs, sort_key=SortKey.DATE_DESC)] == [
            "2024-01-10", "2024-01-02", "2023-12-31"
        ]
    
    def test_sort_by_amount_ignores_type(self, make_tx):
        txs = [
            make_tx(amount="50", type="income", category="Salary"),
            make_tx(amount="80"),
            make_tx(amount="10"),
        ]
        result = filters.apply(txs, sort_key=SortKey.AMOUNT_DESC)
        assert [tx.amount for tx in result] == [Decimal("80"), Decimal("50"), Decimal("10")]
    
    def test_unknown_sort_key_keeps_order(self, sample_ledger):
        assert filters.apply(sample_ledger, sort_key="by-mood") == sample_ledger


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
