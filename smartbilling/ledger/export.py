"""Mini README: CSV export of the transaction history.

Rows are joined with plain commas and no quoting, matching the format users
already download from the tracker. A utility or method containing a comma
will therefore shift the columns of its row.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

from .models import Transaction

CSV_HEADERS = ("Date", "Utility", "Amount", "Method", "Status", "Reference")


def format_amount(amount: float) -> str:
    """Render integral amounts without a trailing ``.0``."""

    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def transactions_to_csv(transactions: Iterable[Transaction]) -> str:
    """Return the CSV text for ``transactions`` in the order given."""

    lines = [",".join(CSV_HEADERS)]
    for transaction in transactions:
        lines.append(
            ",".join(
                [
                    transaction.occurred_on.isoformat(),
                    transaction.utility,
                    format_amount(transaction.amount),
                    transaction.method,
                    transaction.status,
                    transaction.reference,
                ]
            )
        )
    return "\n".join(lines)


def export_filename(on: date) -> str:
    return f"transactions-{on.isoformat()}.csv"
