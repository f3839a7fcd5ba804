"""Chat context snapshot built from current ledger figures."""

from typing import Sequence

from smartspend.analytics.aggregator import top_categories
from smartspend.analytics.filters import sort_transactions
from smartspend.models.amounts import format_amount
from smartspend.models.transaction import CategoryTotal, SortKey, Totals, Transaction


def build_chat_context(
    totals: Totals,
    breakdown: Sequence[CategoryTotal],
    transactions: Sequence[Transaction],
    currency_symbol: str,
    top_category_count: int = 5,
    recent_count: int = 10,
) -> str:
    """
    Render the snapshot the chat assistant answers from.
    
    Includes balance, income and expense totals, the largest expense
    categories, and the most recent transactions by date.
    """
    c = currency_symbol
    
    top = "\n".join(
        f"- {item.category.value}: {c}{format_amount(item.total)}"
        for item in top_categories(breakdown, top_category_count)
    ) or "- (no expenses yet)"
    
    recent = "\n".join(
        f"{tx.date}: {tx.description} ({tx.type.value}) - "
        f"{c}{format_amount(tx.amount)} [{tx.category.value}]"
        for tx in sort_transactions(transactions, SortKey.DATE_DESC)[:recent_count]
    ) or "(no transactions yet)"
    
    return (
        "FINANCIAL SUMMARY:\n"
        f"Total Balance: {c}{format_amount(totals.balance)}\n"
        f"Total Income: {c}{format_amount(totals.income)}\n"
        f"Total Expenses: {c}{format_amount(totals.expense)}\n"
        "\n"
        "Top Expense Categories:\n"
        f"{top}\n"
        "\n"
        f"Recent {recent_count} Transactions:\n"
        f"{recent}\n"
    )
