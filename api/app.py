"""Flask REST API exposing the budget tracker services."""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from budget_core.config import Settings
from budget_core.exceptions import (
    ConflictError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from budget_core.export import expenses_to_csv
from budget_core.services import CategoryService, ExpenseService, StatsService
from budget_core.storage import JSONStorage
from budget_core.validators import DEFAULT_PAGE_LIMIT, validate_period, validate_positive_int

API_PREFIX = "/api"
GENERIC_ERROR = "Internal server error"


def open_storage(settings: Settings) -> JSONStorage:
    """Open the configured store and fail fast when it is unreachable."""
    storage = JSONStorage.from_uri(settings.database_uri)
    storage.ping()
    return storage


def create_app(settings: Optional[Settings] = None, storage: Optional[JSONStorage] = None) -> Flask:
    app = Flask(__name__)
    settings = settings or Settings.from_env()

    if settings.is_development:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    elif settings.allowed_origins:
        CORS(app, resources={r"/*": {"origins": settings.allowed_origins}}, supports_credentials=True)
    else:
        CORS(app)

    if storage is None:
        storage = open_storage(settings)
    category_service = CategoryService(storage)
    expense_service = ExpenseService(storage)
    stats_service = StatsService(expense_service, category_service)
    started_at = time.monotonic()

    def _success(payload: Any, status: int = 200):
        return jsonify(payload), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        app.logger.warning("Validation error on %s %s: %s", request.method, request.path, exc.messages)
        return jsonify({"error": "Validation error", "errors": exc.errors}), 400

    @app.errorhandler(ConflictError)
    def handle_conflict(exc: ConflictError):
        app.logger.warning("Conflict on %s %s: %s", request.method, request.path, exc)
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return jsonify({"error": str(exc)}), 404

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        if isinstance(exc, PersistenceError):
            app.logger.error("Persistence error on %s %s: %s", request.method, request.path, exc)
        else:
            app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": GENERIC_ERROR}), 500

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json", field="body")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body", field="body")
        return data

    def _period() -> Dict[str, Any]:
        return validate_period(request.args.get("startDate"), request.args.get("endDate"))

    @app.get(f"{API_PREFIX}/health")
    def health():
        return _success({"status": "ok", "uptime": round(time.monotonic() - started_at, 3)})

    @app.get(f"{API_PREFIX}/expenses")
    def list_expenses():
        period = _period()
        page = validate_positive_int(request.args.get("page"), "page", 1)
        limit = validate_positive_int(request.args.get("limit"), "limit", DEFAULT_PAGE_LIMIT)
        result = expense_service.page(
            page=page, limit=limit, category=request.args.get("category"), **period
        )
        return _success(result.to_dict())

    @app.post(f"{API_PREFIX}/expenses")
    def create_expense():
        payload = _json_body()
        expense = expense_service.add(payload)
        return _success(expense.to_dict(), 201)

    @app.get(f"{API_PREFIX}/expenses/stats/summary")
    def expense_summary():
        summary = stats_service.summary(**_period())
        return _success(summary.to_dict())

    @app.get(f"{API_PREFIX}/expenses/export/csv")
    def export_expenses():
        expenses = expense_service.list(category=request.args.get("category"), **_period())
        return Response(
            expenses_to_csv(expenses),
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=expenses.csv"},
        )

    @app.get(f"{API_PREFIX}/expenses/<expense_id>")
    def get_expense(expense_id: str):
        expense = expense_service.get(expense_id)
        return _success(expense.to_dict())

    @app.put(f"{API_PREFIX}/expenses/<expense_id>")
    def update_expense(expense_id: str):
        payload = _json_body()
        expense = expense_service.update(expense_id, payload)
        return _success(expense.to_dict())

    @app.delete(f"{API_PREFIX}/expenses/<expense_id>")
    def delete_expense(expense_id: str):
        expense_service.delete(expense_id)
        return _success({"message": "Expense deleted successfully"})

    @app.get(f"{API_PREFIX}/categories")
    def list_categories():
        return _success([category.to_dict() for category in category_service.list()])

    @app.post(f"{API_PREFIX}/categories")
    def create_category():
        payload = _json_body()
        category = category_service.add(payload)
        return _success(category.to_dict(), 201)

    @app.get(f"{API_PREFIX}/categories/<name>")
    def get_category(name: str):
        return _success(category_service.get(name).to_dict())

    @app.put(f"{API_PREFIX}/categories/<name>")
    def update_category(name: str):
        payload = _json_body()
        category = category_service.update(name, payload)
        return _success(category.to_dict())

    @app.delete(f"{API_PREFIX}/categories/<name>")
    def delete_category(name: str):
        category_service.delete(name)
        return _success({"message": "Category deleted successfully"})

    @app.get(f"{API_PREFIX}/categories/<name>/budget-status")
    def budget_status(name: str):
        status = stats_service.budget_status(name, **_period())
        return _success(status.to_dict())

    return app
