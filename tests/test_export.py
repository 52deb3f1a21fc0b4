import csv
from io import StringIO

from budget_core.export import CSV_HEADER, expenses_to_csv


def _rows(text):
    return list(csv.reader(StringIO(text)))


def test_csv_has_fixed_header_and_listing_order(expense_service):
    expense_service.add({"description": "Old", "amount": 5, "category": "food", "date": "2024-01-01"})
    expense_service.add(
        {
            "description": 'Quote "this", please',
            "amount": "12.5",
            "category": "fun",
            "date": "2024-03-01",
            "notes": "line one",
        }
    )

    rows = _rows(expenses_to_csv(expense_service.list()))
    assert rows[0] == CSV_HEADER == ["Description", "Amount", "Category", "Date", "Notes"]
    assert rows[1] == ['Quote "this", please', "12.50", "fun", "2024-03-01", "line one"]
    assert rows[2] == ["Old", "5.00", "food", "2024-01-01", ""]


def test_csv_of_no_expenses_is_header_only():
    assert _rows(expenses_to_csv([])) == [CSV_HEADER]


def test_csv_row_count_matches_filtered_listing(expense_service):
    for day, category in [("2024-01-01", "food"), ("2024-01-02", "rent"), ("2024-02-01", "food")]:
        expense_service.add({"description": "x", "amount": 1, "category": category, "date": day})

    filters = {"category": "food", "start": "2024-01-01", "end": "2024-01-31"}
    rows = _rows(expenses_to_csv(expense_service.list(**filters)))
    assert len(rows) - 1 == expense_service.count(**filters) == 1
