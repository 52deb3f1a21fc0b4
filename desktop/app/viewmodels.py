"""Presentation helpers for the desktop client.

Nothing here touches Tk, so the views stay thin and these rules can be
checked without a display.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Union

TIME_RANGES = {
    "week": "This Week",
    "month": "This Month",
    "year": "This Year",
    "all": "All Time",
}

HEX_COLOR = re.compile(r"^#[0-9A-F]{6}$", re.IGNORECASE)


def range_start(time_range: str, today: Optional[date] = None) -> Optional[date]:
    """First day covered by a dashboard time range, or None for all time."""
    today = today or date.today()
    if time_range == "week":
        return today - timedelta(days=7)
    if time_range == "month":
        return today.replace(day=1)
    if time_range == "year":
        return today.replace(month=1, day=1)
    return None


def sanitize_amount_input(raw: Optional[str]) -> str:
    if raw is None:
        return ""
    return raw.replace(",", "").replace("$", "").strip()


def format_amount_display(value: Union[Decimal, float, str]) -> str:
    if isinstance(value, (Decimal, float, int)):
        return f"{Decimal(str(value)):,.2f}"
    sanitized = sanitize_amount_input(value)
    if not sanitized:
        return ""
    try:
        amount = Decimal(sanitized)
    except InvalidOperation:
        return value.strip()
    return f"{amount:,.2f}"


def display_name(name: str) -> str:
    return name[:1].upper() + name[1:]


def _parse_day(value: Optional[str]) -> Optional[date]:
    if not value or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def filter_expenses(
    expenses: Iterable[Dict[str, Any]],
    category: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Client-side filter over already loaded expenses."""
    wanted = (category or "").strip().lower()
    start_day = _parse_day(start)
    end_day = _parse_day(end)
    result = []
    for expense in expenses:
        if wanted and expense["category"].strip().lower() != wanted:
            continue
        day = _parse_day(expense["date"])
        if start_day and day and day < start_day:
            continue
        if end_day and day and day > end_day:
            continue
        result.append(expense)
    return result


@dataclass(frozen=True)
class DashboardTotals:
    total_spent: Decimal
    transactions: int
    total_budget: Decimal
    category_count: int

    @property
    def remaining(self) -> Decimal:
        return self.total_budget - self.total_spent

    @property
    def percent_used(self) -> Optional[Decimal]:
        if self.total_budget <= 0:
            return None
        return (self.total_spent / self.total_budget * 100).quantize(Decimal("0.1"))


def dashboard_totals(
    expenses: Iterable[Dict[str, Any]], categories: Iterable[Dict[str, Any]]
) -> DashboardTotals:
    expenses = list(expenses)
    categories = list(categories)
    spent = sum((Decimal(str(item["amount"])) for item in expenses), start=Decimal("0"))
    budget = sum((Decimal(str(item.get("budget") or 0)) for item in categories), start=Decimal("0"))
    return DashboardTotals(
        total_spent=spent,
        transactions=len(expenses),
        total_budget=budget,
        category_count=len(categories),
    )


def fallback_budget_status(category: Dict[str, Any]) -> Dict[str, Any]:
    """Status shown for a category whose budget lookup failed."""
    budget = category.get("budget") or 0
    return {
        "category": category["name"],
        "budget": budget,
        "spent": 0,
        "remaining": budget,
        "percentage": 0,
        "overBudget": False,
    }


def bar_fill(percentage: Union[float, int]) -> float:
    """Progress bar value, capped at a full bar."""
    return max(0.0, min(float(percentage), 100.0))


def validate_expense_form(payload: Dict[str, Any]) -> List[str]:
    errors: List[str] = []

    description = (payload.get("description") or "").strip()
    if not description:
        errors.append("Description is required.")
    elif len(description) > 200:
        errors.append("Description cannot exceed 200 characters.")

    amount_text = sanitize_amount_input(payload.get("amount"))
    if not amount_text:
        errors.append("Amount is required.")
    else:
        try:
            amount_value = Decimal(amount_text)
        except InvalidOperation:
            errors.append("Amount must be a number.")
        else:
            if not amount_value.is_finite() or amount_value < Decimal("0.01"):
                errors.append("Amount must be a positive number.")

    if not (payload.get("category") or "").strip():
        errors.append("Category is required.")

    date_text = (payload.get("date") or "").strip()
    if date_text and _parse_day(date_text) is None:
        errors.append("Date must be in YYYY-MM-DD format.")

    if len(payload.get("notes") or "") > 500:
        errors.append("Notes cannot exceed 500 characters.")

    return errors


def validate_category_form(payload: Dict[str, Any]) -> List[str]:
    errors: List[str] = []

    name = (payload.get("name") or "").strip()
    if not name:
        errors.append("Category name is required.")
    elif len(name) > 50:
        errors.append("Category name must be between 1 and 50 characters.")

    budget_text = sanitize_amount_input(payload.get("budget"))
    if budget_text:
        try:
            budget_value = Decimal(budget_text)
        except InvalidOperation:
            errors.append("Budget must be a number.")
        else:
            if not budget_value.is_finite() or budget_value < 0:
                errors.append("Budget must be a non-negative number.")

    color = (payload.get("color") or "").strip()
    if color and not HEX_COLOR.fullmatch(color):
        errors.append("Color must be a valid hex color.")

    return errors
