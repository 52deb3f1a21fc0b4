"""Framework-agnostic business services for the budget tracker."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from uuid import uuid4

from .exceptions import ConflictError, PersistenceError, RecordNotFoundError
from .models import (
    BudgetStatus,
    Category,
    CategoryTotals,
    Expense,
    ExpensePage,
    SpendingSummary,
    quantize_half_up,
    utc_now,
)
from .storage import JSONStorage
from .validators import (
    DEFAULT_PAGE_LIMIT,
    validate_category_payload,
    validate_expense_payload,
    validate_optional_date,
)

logger = logging.getLogger(__name__)


def canonical_category(name: object) -> str:
    """Category references compare case-insensitively everywhere."""
    return str(name).strip().lower()


class CategoryService:
    """Manages budget categories keyed by their lowercase name."""

    def __init__(self, storage: JSONStorage, resource: str = "categories.json") -> None:
        self._storage = storage
        self._resource = resource
        self._categories: Dict[str, Category] = {}
        self.load()

    def add(self, payload: Dict[str, object]) -> Category:
        data = validate_category_payload(payload)
        now = utc_now()
        category = Category(**data, created_at=now, updated_at=now)
        with self._storage.lock:
            if category.name in self._categories:
                raise ConflictError("Category already exists")
            self._categories[category.name] = category
            self._persist()
        logger.info("Created category %s", category.name)
        return category

    def update(self, name: str, changes: Dict[str, object]) -> Category:
        with self._storage.lock:
            existing = self._get_or_raise(name)
            data = validate_category_payload(changes, current=existing)
            updated = replace(existing, **data, updated_at=utc_now())
            self._categories[existing.name] = updated
            self._persist()
        return updated

    def delete(self, name: str) -> None:
        with self._storage.lock:
            existing = self._get_or_raise(name)
            del self._categories[existing.name]
            self._persist()
        logger.info("Deleted category %s", existing.name)

    def get(self, name: str) -> Category:
        with self._storage.lock:
            return self._get_or_raise(name)

    def list(self) -> List[Category]:
        with self._storage.lock:
            categories = list(self._categories.values())
        return sorted(categories, key=lambda cat: cat.name)

    def load(self) -> None:
        raw_records = self._storage.load(self._resource)
        self._categories = {
            payload["name"]: Category.from_dict(payload) for payload in raw_records
        }

    def _persist(self) -> None:
        try:
            self._storage.save(
                self._resource, [category.to_dict() for category in self._categories.values()]
            )
        except PersistenceError:
            raise
        except Exception as exc:  # pragma: no cover - serialisation guard
            raise PersistenceError("Unexpected error while saving categories") from exc

    def _get_or_raise(self, name: str) -> Category:
        try:
            return self._categories[canonical_category(name)]
        except KeyError as exc:
            raise RecordNotFoundError("Category not found") from exc


class ExpenseService:
    """Manages expense records and mediates persistence."""

    def __init__(self, storage: JSONStorage, resource: str = "expenses.json") -> None:
        self._storage = storage
        self._resource = resource
        self._expenses: Dict[str, Expense] = {}
        self.load()  # Hydrate in-memory cache from persistence on construction.

    # Public API -----------------------------------------------------------
    def add(self, payload: Dict[str, object]) -> Expense:
        data = validate_expense_payload(payload)
        now = utc_now()
        expense = Expense(id=str(uuid4()), created_at=now, updated_at=now, **data)
        with self._storage.lock:
            self._expenses[expense.id] = expense
            self._persist()
        logger.info("Created expense %s (%s %s)", expense.id, expense.category, expense.amount)
        return expense

    def update(self, expense_id: str, changes: Dict[str, object]) -> Expense:
        with self._storage.lock:
            existing = self._get_or_raise(expense_id)
            data = validate_expense_payload(changes, current=existing)
            updated = replace(existing, **data, updated_at=utc_now())
            self._expenses[expense_id] = updated
            self._persist()
        return updated

    def delete(self, expense_id: str) -> None:
        with self._storage.lock:
            self._get_or_raise(expense_id)
            del self._expenses[expense_id]
            self._persist()
        logger.info("Deleted expense %s", expense_id)

    def get(self, expense_id: str) -> Expense:
        """Return an expense or raise if it does not exist."""
        with self._storage.lock:
            return self._get_or_raise(expense_id)

    def list(self, **filters: object) -> List[Expense]:
        """Matching expenses, newest date first."""
        # Snapshot under the lock; writers mutate the cache while holding it.
        with self._storage.lock:
            snapshot = list(self._expenses.values())
        records = list(self._apply_filters(snapshot, filters))
        return sorted(records, key=lambda exp: (exp.date, exp.created_at), reverse=True)

    def page(
        self, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT, **filters: object
    ) -> ExpensePage:
        expenses = self.list(**filters)
        offset = (page - 1) * limit
        return ExpensePage(
            expenses=expenses[offset:offset + limit],
            page=page,
            limit=limit,
            total=len(expenses),
        )

    def count(self, **filters: object) -> int:
        return len(self.list(**filters))

    def total(self, **filters: object) -> Decimal:
        expenses = self.list(**filters)
        return sum((expense.amount for expense in expenses), start=Decimal("0.00"))

    def load(self) -> None:
        """Load existing expenses from persistence."""
        raw_records = self._storage.load(self._resource)
        self._expenses = {
            payload["id"]: Expense.from_dict(payload) for payload in raw_records
        }

    # Internal helpers -----------------------------------------------------
    def _persist(self) -> None:
        try:
            self._storage.save(
                self._resource, [expense.to_dict() for expense in self._expenses.values()]
            )
        except PersistenceError:
            raise
        except Exception as exc:  # pragma: no cover - serialisation guard
            raise PersistenceError("Unexpected error while saving expenses") from exc

    def _get_or_raise(self, expense_id: str) -> Expense:
        try:
            return self._expenses[expense_id]
        except KeyError as exc:
            raise RecordNotFoundError("Expense not found") from exc

    def _apply_filters(self, records: Iterable[Expense], filters: Dict[str, object]) -> Iterable[Expense]:
        # Normalise filter values once rather than per record.
        category = (
            canonical_category(filters["category"])
            if filters.get("category") not in (None, "")
            else None
        )
        start: Optional[date] = validate_optional_date(filters.get("start"), "startDate")
        end: Optional[date] = validate_optional_date(filters.get("end"), "endDate")

        def matches(expense: Expense) -> bool:
            if category and canonical_category(expense.category) != category:
                return False
            if start and expense.date < start:
                return False
            if end and expense.date > end:
                return False
            return True

        return filter(matches, records)


class StatsService:
    """Read-side aggregation over expenses and categories, recomputed per call."""

    def __init__(self, expense_service: ExpenseService, category_service: CategoryService) -> None:
        self._expenses = expense_service
        self._categories = category_service

    def summary(self, start: object = None, end: object = None) -> SpendingSummary:
        """Group matching expenses by category with total, count and average."""
        groups: Dict[str, List[Decimal]] = {}
        expenses = self._expenses.list(start=start, end=end)
        for expense in expenses:
            groups.setdefault(canonical_category(expense.category), []).append(expense.amount)

        by_category = [
            CategoryTotals(category=name, total=sum(amounts, start=Decimal("0.00")), count=len(amounts))
            for name, amounts in groups.items()
        ]
        by_category.sort(key=lambda group: (-group.total, group.category))
        return SpendingSummary(
            by_category=by_category,
            total=sum((group.total for group in by_category), start=Decimal("0.00")),
            count=len(expenses),
        )

    def budget_status(self, name: str, start: object = None, end: object = None) -> BudgetStatus:
        """Compare what a category spent in the period against its budget."""
        category = self._categories.get(name)
        spent = self._expenses.total(category=category.name, start=start, end=end)
        if category.budget > 0:
            percentage = quantize_half_up(spent / category.budget * 100)
        else:
            percentage = Decimal("0")
        return BudgetStatus(
            category=category.name,
            budget=category.budget,
            spent=spent,
            percentage=percentage,
        )
