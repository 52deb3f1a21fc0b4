"""Data models for the budget tracker domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

__all__ = [
    "DEFAULT_CATEGORY_COLOR",
    "BudgetStatus",
    "Category",
    "CategoryTotals",
    "Expense",
    "ExpensePage",
    "SpendingSummary",
    "as_number",
    "isoformat_utc",
    "parse_datetime",
    "quantize_half_up",
    "utc_now",
]

DEFAULT_CATEGORY_COLOR = "#3B82F6"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(dt: datetime) -> str:
    """Return an ISO 8601 string with trailing Z for UTC-aware datetimes."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    # Keep microseconds: created_at breaks ties when ordering expenses.
    iso = dt.isoformat()
    # datetime.isoformat renders +00:00 for UTC; replace with the shorter Z form.
    return iso.replace("+00:00", "Z")


def parse_datetime(value: str) -> datetime:
    """Parse ISO 8601 datetime strings with optional trailing Z into UTC-aware datetime."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        # Naive values are UTC.
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def as_number(amount: Decimal) -> float:
    """Render a money value as a JSON number."""
    return float(amount)


def quantize_half_up(value: Decimal, exponent: str = "0.01") -> Decimal:
    """Round HALF_UP; values too large for the decimal context stay as they are."""
    try:
        return value.quantize(Decimal(exponent), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return value


@dataclass(frozen=True)
class Category:
    name: str
    budget: Decimal = Decimal("0.00")
    color: str = DEFAULT_CATEGORY_COLOR
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "budget": as_number(self.budget),
            "color": self.color,
            "createdAt": isoformat_utc(self.created_at),
            "updatedAt": isoformat_utc(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            name=data["name"],
            budget=Decimal(str(data.get("budget", 0))),
            color=data.get("color") or DEFAULT_CATEGORY_COLOR,
            created_at=parse_datetime(data["createdAt"]),
            updated_at=parse_datetime(data["updatedAt"]),
        )


@dataclass(frozen=True)
class Expense:
    id: str
    description: str
    amount: Decimal
    category: str
    date: date
    created_at: datetime
    updated_at: datetime
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "id": self.id,
            "description": self.description,
            "amount": as_number(self.amount),
            "category": self.category,
            "date": self.date.isoformat(),
            "notes": self.notes,
            "createdAt": isoformat_utc(self.created_at),
            "updatedAt": isoformat_utc(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        """Hydrate an Expense from JSON-native data."""
        return cls(
            id=data["id"],
            description=data["description"],
            amount=Decimal(str(data["amount"])),
            category=data["category"],
            date=date.fromisoformat(data["date"]),
            created_at=parse_datetime(data["createdAt"]),
            updated_at=parse_datetime(data["updatedAt"]),
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class ExpensePage:
    """One page of a filtered expense listing."""

    expenses: List[Expense]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return -(-self.total // self.limit)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "expenses": [expense.to_dict() for expense in self.expenses],
            "pagination": {
                "page": self.page,
                "limit": self.limit,
                "total": self.total,
                "pages": self.pages,
            },
        }


@dataclass(frozen=True)
class CategoryTotals:
    category: str
    total: Decimal
    count: int

    @property
    def average(self) -> Decimal:
        if not self.count:
            return Decimal("0.00")
        return quantize_half_up(self.total / self.count)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "total": as_number(self.total),
            "count": self.count,
            "average": as_number(self.average),
        }


@dataclass(frozen=True)
class SpendingSummary:
    by_category: List[CategoryTotals]
    total: Decimal
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "byCategory": [group.to_dict() for group in self.by_category],
            "total": as_number(self.total),
            "count": self.count,
        }


@dataclass(frozen=True)
class BudgetStatus:
    category: str
    budget: Decimal
    spent: Decimal
    percentage: Decimal

    @property
    def remaining(self) -> Decimal:
        return self.budget - self.spent

    @property
    def over_budget(self) -> bool:
        return self.remaining < 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "budget": as_number(self.budget),
            "spent": as_number(self.spent),
            "remaining": as_number(self.remaining),
            "percentage": float(self.percentage),
            "overBudget": self.over_budget,
        }
