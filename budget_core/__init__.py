"""Core business logic package for the budget tracker."""

from .exceptions import ConflictError, PersistenceError, RecordNotFoundError, ValidationError
from .export import expenses_to_csv
from .models import BudgetStatus, Category, CategoryTotals, Expense, ExpensePage, SpendingSummary
from .services import CategoryService, ExpenseService, StatsService
from .storage import JSONStorage

__all__ = [
    "BudgetStatus",
    "Category",
    "CategoryTotals",
    "Expense",
    "ExpensePage",
    "SpendingSummary",
    "CategoryService",
    "ExpenseService",
    "StatsService",
    "JSONStorage",
    "expenses_to_csv",
    "ConflictError",
    "PersistenceError",
    "ValidationError",
    "RecordNotFoundError",
]
