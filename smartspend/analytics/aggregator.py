"""
Aggregator

Pure functions turning a transaction snapshot into the figures and
chart-ready series the dashboard displays.

GUARANTEES:
- No side effects; same snapshot (and reference date) in, same result out
- Every amount goes through coerce_amount(), so a corrupt record adds 0
- Input order does not change any sum; it only breaks ties in top-N lists
  (stable sort, earlier entry wins)
"""

from collections import OrderedDict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from smartspend.models.amounts import ZERO, coerce_amount
from smartspend.models.transaction import (
    Category,
    CategoryTotal,
    DayBucket,
    Transaction,
    TransactionType,
)


DEFAULT_TOP_N = 3

# Fixed labels; strftime("%a") would follow the process locale
WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def summarize(transactions: Iterable[Transaction]) -> tuple[Decimal, Decimal]:
    """Return (income, expense) sums."""
    income = ZERO
    expense = ZERO
    for tx in transactions:
        amount = coerce_amount(tx.amount)
        if tx.type == TransactionType.INCOME:
            income += amount
        elif tx.type == TransactionType.EXPENSE:
            expense += amount
    return income, expense


def top_by_amount(
    transactions: Sequence[Transaction],
    limit: int = DEFAULT_TOP_N,
) -> list[Transaction]:
    """Highest amounts first; ties keep their original order."""
    # sorted() is stable, and stays stable with reverse=True
    ranked = sorted(transactions, key=lambda tx: coerce_amount(tx.amount), reverse=True)
    return ranked[:limit]


def category_breakdown(
    transactions: Sequence[Transaction],
    top_n: int = DEFAULT_TOP_N,
) -> list[CategoryTotal]:
    """
    Group expense transactions by category.
    
    Groups appear in order of first occurrence in the input. Categories
    with no expense transactions are omitted; no expenses at all gives
    an empty list.
    """
    groups: "OrderedDict[Category, list[Transaction]]" = OrderedDict()
    for tx in transactions:
        if tx.type != TransactionType.EXPENSE:
            continue
        groups.setdefault(tx.category, []).append(tx)
    
    return [
        CategoryTotal(
            category=category,
            total=sum((coerce_amount(tx.amount) for tx in group), ZERO),
            top_entries=top_by_amount(group, top_n),
        )
        for category, group in groups.items()
    ]


def top_categories(
    breakdown: Sequence[CategoryTotal],
    limit: int,
) -> list[CategoryTotal]:
    """Largest category totals first."""
    return sorted(breakdown, key=lambda item: item.total, reverse=True)[:limit]


def start_of_week(reference_date: date) -> date:
    """Sunday on or before reference_date."""
    # date.weekday(): Monday=0 ... Sunday=6
    days_since_sunday = (reference_date.weekday() + 1) % 7
    return reference_date - timedelta(days=days_since_sunday)


def week_dates(reference_date: date) -> list[date]:
    """The seven calendar dates, Sunday to Saturday, of reference_date's week."""
    sunday = start_of_week(reference_date)
    return [sunday + timedelta(days=offset) for offset in range(7)]


def weekly_series(
    transactions: Sequence[Transaction],
    reference_date: Optional[date] = None,
    top_n: int = DEFAULT_TOP_N,
) -> list[DayBucket]:
    """
    Seven day buckets for the calendar week containing reference_date.
    
    Args:
        transactions: Ledger snapshot
        reference_date: Any day of the wanted week. Defaults to today in
                        local time (date.today(), not UTC).
        top_n: Top expenses kept per day
    
    Always returns exactly 7 buckets in Sunday..Saturday order; days with
    no transactions report zero sums and empty top lists.
    """
    reference_date = reference_date or date.today()
    
    by_date: dict[str, list[Transaction]] = {}
    for tx in transactions:
        by_date.setdefault(tx.date, []).append(tx)
    
    buckets = []
    for day in week_dates(reference_date):
        iso = day.isoformat()
        day_transactions = by_date.get(iso, [])
        income, expense = summarize(day_transactions)
        expenses = [tx for tx in day_transactions if tx.type == TransactionType.EXPENSE]
        buckets.append(
            DayBucket(
                day_label=WEEKDAY_LABELS[(day.weekday() + 1) % 7],
                date=iso,
                income=income,
                expense=expense,
                top_expenses=top_by_amount(expenses, top_n),
            )
        )
    return buckets
