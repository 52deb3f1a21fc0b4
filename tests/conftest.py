"""Pytest configuration and fixtures for the test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Generator, Optional
from urllib.parse import urlsplit

import pytest
from flask import Flask
from flask.testing import FlaskClient

from api.app import create_app
from budget_core.config import Settings
from budget_core.services import CategoryService, ExpenseService, StatsService
from budget_core.storage import JSONStorage


@pytest.fixture
def storage(tmp_path: Path) -> JSONStorage:
    return JSONStorage(tmp_path / "data")


@pytest.fixture
def expense_service(storage: JSONStorage) -> ExpenseService:
    return ExpenseService(storage)


@pytest.fixture
def category_service(storage: JSONStorage) -> CategoryService:
    return CategoryService(storage)


@pytest.fixture
def stats_service(expense_service: ExpenseService, category_service: CategoryService) -> StatsService:
    return StatsService(expense_service, category_service)


@pytest.fixture
def app(storage: JSONStorage) -> Generator[Flask, None, None]:
    """Flask app backed by a fresh data directory for every test."""
    app = create_app(Settings(environment="testing"), storage=storage)
    app.config.update(TESTING=True)
    yield app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def make_expense(client: FlaskClient):
    """POST an expense and return the created JSON body."""

    def _make(**overrides: Any) -> Dict[str, Any]:
        payload = {
            "description": "Groceries",
            "amount": 25.5,
            "category": "food",
            "date": "2024-03-10",
        }
        payload.update(overrides)
        response = client.post("/api/expenses", json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _make


class FlaskResponseAdapter:
    """Exposes the parts of ``requests.Response`` the desktop client reads."""

    def __init__(self, response) -> None:
        self._response = response
        self.status_code = response.status_code
        self.ok = response.status_code < 400
        self.content = response.data
        self.headers = response.headers

    def json(self) -> Any:
        body = self._response.get_json(silent=True)
        if body is None:
            raise ValueError("Response body is not JSON")
        return body


class FlaskSession:
    """Routes ``requests``-style calls into the Flask app.

    A fresh test client per call keeps concurrent fan-out requests independent.
    """

    def __init__(self, app: Flask) -> None:
        self._app = app
        self.calls = []

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> FlaskResponseAdapter:
        path = urlsplit(url).path
        self.calls.append((method, path, dict(params or {})))
        response = self._app.test_client().open(path, method=method, query_string=params or None, json=json)
        return FlaskResponseAdapter(response)


@pytest.fixture
def api_session(app: Flask) -> FlaskSession:
    return FlaskSession(app)
