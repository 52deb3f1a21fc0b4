"""Domain-specific exceptions for the budget tracker core services."""

from __future__ import annotations

from typing import Dict, List, Optional


class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements.

    Carries every field-level problem found so callers can report them all
    at once instead of one per round trip.
    """

    def __init__(
        self,
        message: str = "Validation error",
        *,
        field: Optional[str] = None,
        errors: Optional[List[Dict[str, str]]] = None,
    ) -> None:
        super().__init__(message)
        if errors is None:
            errors = [{"field": field, "message": message}] if field else []
        self.errors: List[Dict[str, str]] = errors

    @property
    def messages(self) -> List[str]:
        return [error["message"] for error in self.errors] or [str(self)]


class RecordNotFoundError(LookupError):
    """Raised when an expense or category record cannot be located."""


class ConflictError(ValueError):
    """Raised when a record would violate a uniqueness constraint."""


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""
