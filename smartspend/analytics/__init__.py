"""Derived analytics: aggregation and the filter/sort engine."""

from smartspend.analytics import filters
from smartspend.analytics.aggregator import (
    DEFAULT_TOP_N,
    WEEKDAY_LABELS,
    category_breakdown,
    start_of_week,
    summarize,
    top_by_amount,
    top_categories,
    week_dates,
    weekly_series,
)
from smartspend.analytics.filters import apply as apply_filters
from smartspend.analytics.filters import matches, sort_transactions

__all__ = [
    "DEFAULT_TOP_N",
    "WEEKDAY_LABELS",
    "apply_filters",
    "category_breakdown",
    "filters",
    "matches",
    "sort_transactions",
    "start_of_week",
    "summarize",
    "top_by_amount",
    "top_categories",
    "week_dates",
    "weekly_series",
]
