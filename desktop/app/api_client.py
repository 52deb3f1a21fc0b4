"""HTTP client used by the desktop app to talk to the budget tracker API."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

import requests

from budget_core.config import DEFAULT_API_URL

from .viewmodels import fallback_budget_status

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the API is unreachable or answers with an error status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[List[Dict[str, str]]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []


@dataclass
class DashboardData:
    expenses: List[Dict[str, Any]]
    categories: List[Dict[str, Any]]
    stats: Dict[str, Any]


def _clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {k: v for k, v in (params or {}).items() if v not in (None, "")}


class ExpenseTrackerClient:
    """Thin wrapper over the REST endpoints; every call is independent."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    # Expenses -------------------------------------------------------------
    def get_expenses(self, **params: Any) -> Dict[str, Any]:
        return self._request("GET", "/expenses", params=params).json()

    def get_expense(self, expense_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/expenses/{quote(expense_id, safe='')}").json()

    def create_expense(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/expenses", json=payload).json()

    def update_expense(self, expense_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/expenses/{quote(expense_id, safe='')}", json=payload).json()

    def delete_expense(self, expense_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/expenses/{quote(expense_id, safe='')}").json()

    def get_stats(self, **params: Any) -> Dict[str, Any]:
        return self._request("GET", "/expenses/stats/summary", params=params).json()

    def export_csv(self, **params: Any) -> bytes:
        return self._request("GET", "/expenses/export/csv", params=params).content

    # Categories -----------------------------------------------------------
    def get_categories(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/categories").json()

    def create_category(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/categories", json=payload).json()

    def update_category(self, name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/categories/{quote(name, safe='')}", json=payload).json()

    def delete_category(self, name: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/categories/{quote(name, safe='')}").json()

    def get_budget_status(self, name: str, **params: Any) -> Dict[str, Any]:
        path = f"/categories/{quote(name, safe='')}/budget-status"
        return self._request("GET", path, params=params).json()

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health").json()

    # Fan-out loaders ------------------------------------------------------
    def load_all(self) -> DashboardData:
        """Fetch expenses, categories and stats concurrently; all must succeed."""
        with ThreadPoolExecutor(max_workers=3) as pool:
            expenses = pool.submit(self.get_expenses)
            categories = pool.submit(self.get_categories)
            stats = pool.submit(self.get_stats)
            return DashboardData(
                expenses=expenses.result().get("expenses", []),
                categories=categories.result(),
                stats=stats.result(),
            )

    def budget_statuses(
        self, categories: Iterable[Dict[str, Any]], start_date: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Budget status for each category; a failed lookup yields a zero-spend status."""
        categories = list(categories)
        if not categories:
            return []

        def fetch(category: Dict[str, Any]) -> Dict[str, Any]:
            try:
                return self.get_budget_status(category["name"], startDate=start_date)
            except ApiError as exc:
                logger.warning("Budget status for %s unavailable: %s", category["name"], exc)
                return fallback_budget_status(category)

        with ThreadPoolExecutor(max_workers=min(8, len(categories))) as pool:
            return list(pool.map(fetch, categories))

    # Internals ------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(
                method, url, params=_clean_params(params), json=json, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise ApiError(f"Unable to reach {url}: {exc}") from exc
        if not response.ok:
            raise self._error_from(response)
        return response

    @staticmethod
    def _error_from(response: requests.Response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        errors = body.get("errors") or []
        if errors:
            message = "\n".join(error.get("message", "") for error in errors)
        else:
            message = body.get("error") or f"Request failed with status {response.status_code}"
        return ApiError(message, status_code=response.status_code, errors=errors)
