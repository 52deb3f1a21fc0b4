"""Validation helpers shared across budget tracker services."""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

from .exceptions import ValidationError
from .models import Category, Expense, parse_datetime, utc_now

T = TypeVar("T")

COLOR_PATTERN = re.compile(r"^#[0-9A-F]{6}$", re.IGNORECASE)

DESCRIPTION_MAX_LENGTH = 200
NOTES_MAX_LENGTH = 500
CATEGORY_NAME_MAX_LENGTH = 50
MIN_EXPENSE_AMOUNT = Decimal("0.01")
DEFAULT_PAGE_LIMIT = 100


def _to_decimal(raw: object, field: str) -> Decimal:
    if isinstance(raw, bool) or raw is None:
        raise ValidationError(f"{field} must be a numeric value", field=field)
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a numeric value", field=field) from exc
    # Amounts travel as JSON numbers, so they must fit a float.
    if not value.is_finite() or math.isinf(float(value)):
        raise ValidationError(f"{field} must be a numeric value", field=field)
    return value


def parse_amount(raw: object, field: str = "amount") -> Decimal:
    """Convert raw input to a positive Decimal, kept at the precision given."""
    amount = _to_decimal(raw, field)
    if amount < MIN_EXPENSE_AMOUNT:
        raise ValidationError(f"{field} must be a positive number", field=field)
    return amount


def parse_budget(raw: object, field: str = "budget") -> Decimal:
    budget = _to_decimal(raw, field)
    if budget < 0:
        raise ValidationError(f"{field} must be a non-negative number", field=field)
    return budget


def validate_required_str(value: object, field: str, max_length: Optional[int] = None) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} is required", field=field)
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} is required", field=field)
    if max_length is not None and len(trimmed) > max_length:
        raise ValidationError(f"{field} cannot exceed {max_length} characters", field=field)
    return trimmed


def validate_optional_str(value: object, field: str, max_length: int) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", field=field)
    if len(value) > max_length:
        raise ValidationError(f"{field} cannot exceed {max_length} characters", field=field)
    return value


def validate_category_name(value: object, field: str = "name") -> str:
    return validate_required_str(value, field, CATEGORY_NAME_MAX_LENGTH).lower()


def validate_color(value: object, field: str = "color") -> str:
    if not isinstance(value, str) or not COLOR_PATTERN.fullmatch(value.strip()):
        raise ValidationError(f"{field} must be a valid hex color", field=field)
    return value.strip()


def validate_date(value: object, field: str) -> date:
    """Accept a date, a datetime or an ISO 8601 string and keep the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be a valid ISO 8601 date", field=field)
    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return parse_datetime(text).date()
    except ValueError as exc:
        raise ValidationError(f"{field} must be a valid ISO 8601 date", field=field) from exc


def validate_optional_date(value: object, field: str) -> Optional[date]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return validate_date(value, field)


def validate_positive_int(value: object, field: str, default: int) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a positive integer", field=field)
    try:
        number = int(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"{field} must be a positive integer", field=field) from exc
    if number < 1:
        raise ValidationError(f"{field} must be a positive integer", field=field)
    return number


class _ErrorCollector:
    """Runs field checks and gathers every failure before raising once."""

    def __init__(self) -> None:
        self.errors: List[Dict[str, str]] = []

    def check(self, func: Callable[..., T], *args: Any) -> Optional[T]:
        try:
            return func(*args)
        except ValidationError as exc:
            self.errors.extend(exc.errors or [{"field": "", "message": str(exc)}])
            return None

    def raise_if_any(self) -> None:
        if self.errors:
            raise ValidationError("Validation error", errors=list(self.errors))


def _ensure_mapping(payload: object) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object", field="body")
    return payload


def validate_expense_payload(
    payload: object, *, current: Optional[Expense] = None
) -> Dict[str, Any]:
    """Normalise an expense payload or raise with every field error found.

    ``date`` and ``notes`` fall back to the current record when absent so an
    update does not wipe them; on create ``date`` defaults to today (UTC).
    """
    data = _ensure_mapping(payload)
    collector = _ErrorCollector()

    description = collector.check(
        validate_required_str, data.get("description"), "description", DESCRIPTION_MAX_LENGTH
    )
    amount = collector.check(parse_amount, data.get("amount"), "amount")
    # Loose reference: no length cap, unlike category names themselves.
    category = collector.check(validate_required_str, data.get("category"), "category")

    if data.get("date") not in (None, ""):
        expense_date = collector.check(validate_date, data.get("date"), "date")
    elif current is not None:
        expense_date = current.date
    else:
        expense_date = utc_now().date()

    if "notes" in data:
        notes = collector.check(validate_optional_str, data.get("notes"), "notes", NOTES_MAX_LENGTH)
    else:
        notes = current.notes if current is not None else None

    collector.raise_if_any()
    return {
        "description": description,
        "amount": amount,
        "category": category,
        "date": expense_date,
        "notes": notes,
    }


def validate_category_payload(
    payload: object, *, current: Optional[Category] = None
) -> Dict[str, Any]:
    """Normalise a category payload or raise with every field error found.

    On update the name is optional but, when given, must match the stored
    name: the name is the category's identity.
    """
    data = _ensure_mapping(payload)
    collector = _ErrorCollector()

    if current is None or data.get("name") is not None:
        name = collector.check(validate_category_name, data.get("name"), "name")
        if current is not None and name is not None and name != current.name:
            collector.errors.append(
                {"field": "name", "message": "Category name cannot be changed"}
            )
    else:
        name = current.name

    if data.get("budget") is not None:
        budget = collector.check(parse_budget, data.get("budget"), "budget")
    else:
        budget = current.budget if current is not None else Decimal("0.00")

    if data.get("color") is not None:
        color = collector.check(validate_color, data.get("color"), "color")
    else:
        color = current.color if current is not None else None

    collector.raise_if_any()
    normalized: Dict[str, Any] = {"name": name, "budget": budget}
    if color is not None:
        normalized["color"] = color
    return normalized


def validate_period(start: object, end: object) -> Dict[str, Optional[date]]:
    """Validate the ``startDate``/``endDate`` query pair."""
    collector = _ErrorCollector()
    start_date = collector.check(validate_optional_date, start, "startDate")
    end_date = collector.check(validate_optional_date, end, "endDate")
    collector.raise_if_any()
    return {"start": start_date, "end": end_date}
