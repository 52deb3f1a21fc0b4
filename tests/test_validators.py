from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from budget_core.exceptions import ValidationError
from budget_core.models import Category, Expense
from budget_core.validators import (
    parse_amount,
    parse_budget,
    validate_category_payload,
    validate_color,
    validate_date,
    validate_expense_payload,
    validate_period,
    validate_positive_int,
)


def _fields(exc_info) -> set:
    return {error["field"] for error in exc_info.value.errors}


def test_parse_amount_keeps_given_precision():
    assert parse_amount("12.345") == Decimal("12.345")
    assert str(parse_amount("12.345")) == "12.345"
    assert parse_amount(7) == Decimal("7")
    assert parse_amount(1e30) == Decimal("1E+30")


@pytest.mark.parametrize(
    "raw", [0, "0", -5, "0.001", "abc", None, True, "NaN", "Infinity", "1e400"]
)
def test_parse_amount_rejects_non_positive_and_junk(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


def test_parse_budget_allows_zero_but_not_negative():
    assert parse_budget("0") == Decimal("0.00")
    with pytest.raises(ValidationError):
        parse_budget(-1)


def test_validate_color_is_case_insensitive():
    assert validate_color("#ff00AA") == "#ff00AA"
    for bad in ("ff00aa", "#ff00a", "#gg0000", 123):
        with pytest.raises(ValidationError):
            validate_color(bad)


def test_validate_date_accepts_dates_and_datetimes():
    assert validate_date("2024-02-29", "date") == date(2024, 2, 29)
    assert validate_date("2024-03-01T23:15:00Z", "date") == date(2024, 3, 1)
    assert validate_date(datetime(2024, 1, 2, tzinfo=timezone.utc), "date") == date(2024, 1, 2)
    with pytest.raises(ValidationError):
        validate_date("2023-02-29", "date")
    with pytest.raises(ValidationError):
        validate_date("yesterday", "date")


def test_validate_positive_int_defaults_and_rejects():
    assert validate_positive_int(None, "page", 1) == 1
    assert validate_positive_int("3", "page", 1) == 3
    for bad in ("0", "-2", "two", "1.5"):
        with pytest.raises(ValidationError):
            validate_positive_int(bad, "limit", 100)


def test_expense_payload_is_normalised():
    data = validate_expense_payload(
        {"description": "  Lunch ", "amount": "10.5", "category": " Food ", "date": "2024-05-01"}
    )
    assert data == {
        "description": "Lunch",
        "amount": Decimal("10.50"),
        "category": "Food",
        "date": date(2024, 5, 1),
        "notes": None,
    }


def test_expense_payload_defaults_date_to_today():
    data = validate_expense_payload({"description": "Taxi", "amount": 12, "category": "transport"})
    assert data["date"] == datetime.now(timezone.utc).date()


def test_expense_payload_reports_every_field_error():
    with pytest.raises(ValidationError) as exc_info:
        validate_expense_payload(
            {"description": "", "amount": 0, "category": "", "date": "nope", "notes": "x" * 501}
        )
    assert _fields(exc_info) == {"description", "amount", "category", "date", "notes"}


def test_expense_payload_length_limits():
    with pytest.raises(ValidationError) as exc_info:
        validate_expense_payload({"description": "d" * 201, "amount": 1, "category": "food"})
    assert _fields(exc_info) == {"description"}
    data = validate_expense_payload(
        {"description": "d" * 200, "amount": 1, "category": "food", "notes": "n" * 500}
    )
    assert len(data["notes"]) == 500


def test_expense_update_keeps_date_and_notes_when_absent():
    now = datetime.now(timezone.utc)
    current = Expense(
        id="abc",
        description="Old",
        amount=Decimal("5.00"),
        category="food",
        date=date(2023, 12, 24),
        created_at=now,
        updated_at=now,
        notes="keep me",
    )
    data = validate_expense_payload(
        {"description": "New", "amount": 6, "category": "food"}, current=current
    )
    assert data["date"] == date(2023, 12, 24)
    assert data["notes"] == "keep me"

    cleared = validate_expense_payload(
        {"description": "New", "amount": 6, "category": "food", "notes": None}, current=current
    )
    assert cleared["notes"] is None


def test_expense_payload_must_be_an_object():
    with pytest.raises(ValidationError):
        validate_expense_payload(["not", "a", "dict"])


def test_category_payload_lowercases_name_and_applies_defaults():
    data = validate_category_payload({"name": "  Food "})
    assert data == {"name": "food", "budget": Decimal("0.00")}


def test_category_payload_reports_every_field_error():
    with pytest.raises(ValidationError) as exc_info:
        validate_category_payload({"name": "n" * 51, "budget": -1, "color": "blue"})
    assert _fields(exc_info) == {"name", "budget", "color"}


def test_category_update_cannot_rename():
    current = Category(name="food", budget=Decimal("50.00"))
    assert validate_category_payload({"name": "FOOD", "budget": 80}, current=current)["name"] == "food"
    with pytest.raises(ValidationError) as exc_info:
        validate_category_payload({"name": "groceries"}, current=current)
    assert _fields(exc_info) == {"name"}


def test_category_update_keeps_unspecified_fields():
    current = Category(name="food", budget=Decimal("50.00"), color="#000000")
    data = validate_category_payload({"color": "#FFFFFF"}, current=current)
    assert data == {"name": "food", "budget": Decimal("50.00"), "color": "#FFFFFF"}


def test_validate_period():
    assert validate_period(None, "") == {"start": None, "end": None}
    assert validate_period("2024-01-01", "2024-01-31") == {
        "start": date(2024, 1, 1),
        "end": date(2024, 1, 31),
    }
    with pytest.raises(ValidationError) as exc_info:
        validate_period("bad", "worse")
    assert _fields(exc_info) == {"startDate", "endDate"}


def test_expense_category_reference_has_no_length_cap():
    data = validate_expense_payload({"description": "x", "amount": 1, "category": "c" * 60})
    assert data["category"] == "c" * 60
