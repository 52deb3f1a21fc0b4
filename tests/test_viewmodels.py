from datetime import date
from decimal import Decimal

import pytest

from desktop.app.viewmodels import (
    bar_fill,
    dashboard_totals,
    display_name,
    filter_expenses,
    format_amount_display,
    range_start,
    sanitize_amount_input,
    validate_category_form,
    validate_expense_form,
)

TODAY = date(2024, 6, 19)


@pytest.mark.parametrize(
    "time_range,expected",
    [
        ("week", date(2024, 6, 12)),
        ("month", date(2024, 6, 1)),
        ("year", date(2024, 1, 1)),
        ("all", None),
    ],
)
def test_range_start(time_range, expected):
    assert range_start(time_range, today=TODAY) == expected


def test_amount_input_helpers():
    assert sanitize_amount_input(" $1,234.50 ") == "1234.50"
    assert format_amount_display("1234.5") == "1,234.50"
    assert format_amount_display(Decimal("3")) == "3.00"
    assert format_amount_display("abc") == "abc"
    assert format_amount_display("") == ""


def test_display_name():
    assert display_name("food") == "Food"
    assert display_name("") == ""


def test_filter_expenses():
    expenses = [
        {"category": "Food", "date": "2024-01-01"},
        {"category": "rent", "date": "2024-01-15"},
        {"category": "food", "date": "2024-02-01"},
    ]
    assert len(filter_expenses(expenses, category="FOOD")) == 2
    assert filter_expenses(expenses, start="2024-01-10", end="2024-01-31") == [expenses[1]]
    assert filter_expenses(expenses) == expenses


def test_dashboard_totals():
    totals = dashboard_totals(
        [{"amount": 30}, {"amount": 12.5}],
        [{"budget": 100}, {"budget": 0}, {"name": "x"}],
    )
    assert totals.total_spent == Decimal("42.5")
    assert totals.transactions == 2
    assert totals.total_budget == Decimal("100")
    assert totals.category_count == 3
    assert totals.remaining == Decimal("57.5")
    assert totals.percent_used == Decimal("42.5")

    assert dashboard_totals([], []).percent_used is None


@pytest.mark.parametrize("value,expected", [(-5, 0.0), (45.5, 45.5), (130, 100.0)])
def test_bar_fill_is_clamped(value, expected):
    assert bar_fill(value) == expected


def test_expense_form_validation():
    assert validate_expense_form(
        {"description": "Tea", "amount": "$4.50", "category": "food", "date": "2024-01-01"}
    ) == []
    errors = validate_expense_form({"description": " ", "amount": "0", "date": "01/02/2024"})
    assert errors == [
        "Description is required.",
        "Amount must be a positive number.",
        "Category is required.",
        "Date must be in YYYY-MM-DD format.",
    ]
    assert validate_expense_form({"description": "x", "amount": "ten", "category": "c"}) == [
        "Amount must be a number."
    ]


def test_category_form_validation():
    assert validate_category_form({"name": "food", "budget": "100", "color": "#aabbcc"}) == []
    assert validate_category_form({"name": "", "budget": "-1", "color": "blue"}) == [
        "Category name is required.",
        "Budget must be a non-negative number.",
        "Color must be a valid hex color.",
    ]
