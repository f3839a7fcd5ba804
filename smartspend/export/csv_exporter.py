"""
CSV Exporter

Serializes a transaction subset to delimited text for spreadsheets.

FORMAT:
    <BOM>Date,Description,Category,Type,Amount,Currency
    "2024-01-02","Lunch ""to go"" box","Food","expense",200.00,"$"

- Every field is quoted except Amount
- Embedded quotes are doubled (standard CSV quoting)
- Amount always has exactly two decimal places
- A UTF-8 byte-order mark is prepended so spreadsheet tools detect the
  encoding (needed for symbols like ₹)

An empty subset is an error, never a header-only file.
"""

import csv
import io
from datetime import date
from typing import Optional, Sequence

import structlog

from smartspend.models.amounts import round_cents
from smartspend.models.transaction import Transaction


BOM = "\ufeff"
HEADER = ("Date", "Description", "Category", "Type", "Amount", "Currency")

logger = structlog.get_logger(__name__)


class NothingToExportError(Exception):
    """Export requested with no transactions to write."""
    
    def __init__(self, message: str = "Nothing to export"):
        super().__init__(message)


def select_export_rows(
    filtered: Sequence[Transaction],
    full_ledger: Sequence[Transaction],
) -> list[Transaction]:
    """
    Pick what to export.
    
    The filtered view is exported when it has rows. When the filter
    matched nothing but the ledger is not empty, the full ledger is
    exported instead. Only when both are empty is there nothing to export.
    """
    if filtered:
        return list(filtered)
    if full_ledger:
        logger.info("export_fallback_to_full_ledger", row_count=len(full_ledger))
        return list(full_ledger)
    raise NothingToExportError()


def to_delimited_text(
    transactions: Sequence[Transaction],
    currency_symbol: str,
) -> str:
    """
    Render transactions as CSV text with a leading BOM.
    
    Raises:
        NothingToExportError: If transactions is empty
    """
    if not transactions:
        raise NothingToExportError()
    
    buffer = io.StringIO()
    buffer.write(BOM)
    buffer.write(",".join(HEADER) + "\n")
    
    # QUOTE_NONNUMERIC quotes every str and leaves the Decimal amount bare
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for tx in transactions:
        writer.writerow([
            tx.date,
            tx.description,
            tx.category.value,
            tx.type.value,
            round_cents(tx.amount),
            currency_symbol,
        ])
    
    logger.info("export_rendered", row_count=len(transactions))
    return buffer.getvalue()


def export_filename(product_name: str, today: Optional[date] = None) -> str:
    """<product>_export_<isodate>.csv"""
    today = today or date.today()
    return f"{product_name}_export_{today.isoformat()}.csv"
