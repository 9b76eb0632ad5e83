"""CSV export of the ledger's transactions."""

from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ledger import Ledger

CSV_HEADER = ("Type", "Amount", "Currency", "Date", "Category", "Notes")


def export_filename(currency: str) -> str:
    return f"finance-transactions-{currency}.csv"


def transactions_to_csv(ledger: "Ledger") -> str:
    """Render every transaction as a quoted CSV row under a plain header line."""
    buffer = io.StringIO()
    buffer.write(",".join(CSV_HEADER) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for transaction in ledger.transactions:
        writer.writerow(
            [
                transaction.type.value,
                f"{transaction.amount:.2f}",
                ledger.currency,
                transaction.date.isoformat(),
                ledger.category_name(transaction.category_id),
                transaction.notes,
            ]
        )
    return buffer.getvalue()
