"""CSV rendering of expense listings."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Iterable

from .models import Expense

CSV_HEADER = ["Description", "Amount", "Category", "Date", "Notes"]


def expenses_to_csv(expenses: Iterable[Expense]) -> str:
    """Render expenses, in the order given, as a CSV document."""
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for expense in expenses:
        writer.writerow(
            [
                expense.description,
                f"{expense.amount:.2f}",
                expense.category,
                expense.date.isoformat(),
                expense.notes or "",
            ]
        )
    return output.getvalue()
