"""Console interface for the budget tracker."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from api.app import create_app, open_storage
from budget_core.config import Settings, configure_logging
from budget_core.exceptions import (
    ConflictError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from budget_core.export import expenses_to_csv
from budget_core.services import CategoryService, ExpenseService, StatsService
from budget_core.storage import JSONStorage

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        ) from exc
    return value


def _parse_amount(value: str) -> str:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError("Amount must be a numeric value") from exc
    if not amount.is_finite():
        raise argparse.ArgumentTypeError("Amount must be a numeric value")
    if amount <= 0:
        raise argparse.ArgumentTypeError("Amount must be greater than zero")
    return value


def _load_services(storage: JSONStorage) -> Tuple[ExpenseService, CategoryService, StatsService]:
    expenses = ExpenseService(storage)
    categories = CategoryService(storage)
    return expenses, categories, StatsService(expenses, categories)


def _format_expense(expense: Dict[str, Any]) -> str:
    return (
        f"[{expense['id']}] {expense['date']} {expense['amount']:.2f}\n"
        f"  Category: {expense['category']}\n"
        f"  Description: {expense['description']}\n"
        f"  Notes: {expense.get('notes') or '-'}\n"
    )


def _format_category(category: Dict[str, Any]) -> str:
    return f"{category['name']:<20} budget {category['budget']:>10.2f}  {category['color']}"


def _period(args: argparse.Namespace) -> Dict[str, Optional[str]]:
    return {"start": args.start, "end": args.end}


def handle_expense(args: argparse.Namespace, service: ExpenseService) -> None:
    if args.command == "add":
        payload = {
            "description": args.description,
            "amount": args.amount,
            "category": args.category,
            "date": args.date,
            "notes": args.notes,
        }
        expense = service.add(payload)
        print("Expense added:\n" + _format_expense(expense.to_dict()))
    elif args.command == "list":
        result = service.page(
            page=args.page, limit=args.limit, category=args.category, **_period(args)
        )
        if not result.expenses:
            print("No expenses found.")
            return
        total = service.total(category=args.category, **_period(args))
        print(
            f"Found {result.total} expenses (total {total:.2f}), "
            f"page {result.page} of {result.pages}:"
        )
        for expense in result.expenses:
            print(_format_expense(expense.to_dict()))
    elif args.command == "edit":
        current = service.get(args.id).to_dict()
        changes = {
            "description": args.description,
            "amount": args.amount,
            "category": args.category,
            "date": args.date,
            "notes": args.notes,
        }
        merged = {**current, **{k: v for k, v in changes.items() if v is not None}}
        expense = service.update(args.id, merged)
        print("Expense updated:\n" + _format_expense(expense.to_dict()))
    elif args.command == "delete":
        service.delete(args.id)
        print(f"Expense {args.id} deleted.")
    elif args.command == "export":
        content = expenses_to_csv(service.list(category=args.category, **_period(args)))
        if args.output is None:
            sys.stdout.write(content)
        else:
            args.output.write_text(content, encoding="utf-8")
            print(f"Exported expenses to {args.output}")


def handle_category(args: argparse.Namespace, service: CategoryService, stats: StatsService) -> None:
    if args.command == "add":
        payload = {"name": args.name, "budget": args.budget, "color": args.color}
        category = service.add(payload)
        print("Category added: " + _format_category(category.to_dict()))
    elif args.command == "list":
        categories = service.list()
        if not categories:
            print("No categories found.")
            return
        for category in categories:
            print(_format_category(category.to_dict()))
    elif args.command == "edit":
        category = service.update(args.name, {"budget": args.budget, "color": args.color})
        print("Category updated: " + _format_category(category.to_dict()))
    elif args.command == "delete":
        service.delete(args.name)
        print(f"Category {args.name.lower()} deleted.")
    elif args.command == "status":
        status = stats.budget_status(args.name, **_period(args)).to_dict()
        flag = "OVER BUDGET" if status["overBudget"] else "within budget"
        print(
            f"{status['category']}: spent {status['spent']:.2f} of {status['budget']:.2f} "
            f"({status['percentage']:.2f}%), remaining {status['remaining']:.2f} - {flag}"
        )


def handle_summary(args: argparse.Namespace, stats: StatsService) -> None:
    summary = stats.summary(**_period(args)).to_dict()
    if not summary["byCategory"]:
        print("No expenses found.")
        return
    for group in summary["byCategory"]:
        print(
            f"{group['category']:<20} {group['total']:>10.2f}  "
            f"{group['count']:>4} expenses  avg {group['average']:.2f}"
        )
    print(f"Total: {summary['total']:.2f} across {summary['count']} expenses")


def run_server(settings: Settings) -> int:
    """Open the store, then serve; exit non-zero when the store is unavailable."""
    try:
        storage = open_storage(settings)
    except PersistenceError as exc:
        logger.error("Unable to open database %s: %s", settings.database_uri, exc)
        return 1
    app = create_app(settings, storage=storage)
    logger.info("Serving budget tracker API on %s:%s", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port)
    return 0


def _add_period_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--start", type=_parse_date, help="Earliest date (YYYY-MM-DD)")
    parser.add_argument("--end", type=_parse_date, help="Latest date (YYYY-MM-DD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Budget Tracker CLI")
    parser.add_argument(
        "--database-uri",
        help="Document store location, e.g. file://data (default: EXPENSE_TRACKER_DATABASE_URI)",
    )

    subparsers = parser.add_subparsers(dest="entity", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host")
    serve_parser.add_argument("--port", type=int)

    expense_parser = subparsers.add_parser("expense", help="Manage expenses")
    expense_sub = expense_parser.add_subparsers(dest="command", required=True)

    expense_add = expense_sub.add_parser("add", help="Add a new expense")
    expense_add.add_argument("description")
    expense_add.add_argument("amount", type=_parse_amount)
    expense_add.add_argument("category")
    expense_add.add_argument("--date", type=_parse_date)
    expense_add.add_argument("--notes")

    expense_list = expense_sub.add_parser("list", help="List expenses")
    expense_list.add_argument("--category")
    _add_period_arguments(expense_list)
    expense_list.add_argument("--limit", type=int, default=100)
    expense_list.add_argument("--page", type=int, default=1)

    expense_edit = expense_sub.add_parser("edit", help="Edit an existing expense")
    expense_edit.add_argument("id")
    expense_edit.add_argument("--description")
    expense_edit.add_argument("--amount", type=_parse_amount)
    expense_edit.add_argument("--category")
    expense_edit.add_argument("--date", type=_parse_date)
    expense_edit.add_argument("--notes")

    expense_delete = expense_sub.add_parser("delete", help="Delete an expense")
    expense_delete.add_argument("id")

    expense_export = expense_sub.add_parser("export", help="Export expenses as CSV")
    expense_export.add_argument("--category")
    _add_period_arguments(expense_export)
    expense_export.add_argument("--output", type=Path, help="File to write (default: stdout)")

    category_parser = subparsers.add_parser("category", help="Manage categories")
    category_sub = category_parser.add_subparsers(dest="command", required=True)

    category_add = category_sub.add_parser("add", help="Add a new category")
    category_add.add_argument("name")
    category_add.add_argument("--budget")
    category_add.add_argument("--color")

    category_sub.add_parser("list", help="List categories")

    category_edit = category_sub.add_parser("edit", help="Change a category's budget or color")
    category_edit.add_argument("name")
    category_edit.add_argument("--budget")
    category_edit.add_argument("--color")

    category_delete = category_sub.add_parser("delete", help="Delete a category")
    category_delete.add_argument("name")

    category_status = category_sub.add_parser("status", help="Show budget status")
    category_status.add_argument("name")
    _add_period_arguments(category_status)

    summary_parser = subparsers.add_parser("summary", help="Spending grouped by category")
    _add_period_arguments(summary_parser)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    if args.database_uri:
        settings = replace(settings, database_uri=args.database_uri)
    configure_logging(settings.log_level)

    if args.entity == "serve":
        settings = replace(
            settings,
            host=args.host or settings.host,
            port=args.port or settings.port,
        )
        return run_server(settings)

    try:
        storage = JSONStorage.from_uri(settings.database_uri)
        expense_service, category_service, stats_service = _load_services(storage)
        if args.entity == "expense":
            handle_expense(args, expense_service)
        elif args.entity == "category":
            handle_category(args, category_service, stats_service)
        elif args.entity == "summary":
            handle_summary(args, stats_service)
        else:  # pragma: no cover - argparse should prevent this
            parser.error(f"Unknown entity: {args.entity}")
            return 2
    except ValidationError as exc:
        print(f"Validation error: {'; '.join(exc.messages)}", file=sys.stderr)
        return 1
    except (RecordNotFoundError, ConflictError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
