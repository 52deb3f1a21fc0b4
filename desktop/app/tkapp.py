"""Tkinter desktop client for the budget tracker API."""

from __future__ import annotations

import argparse
import tkinter as tk
from datetime import date
from decimal import Decimal
from pathlib import Path
from tkinter import filedialog, messagebox, ttk
from typing import Any, Callable, Dict, Iterable, List, Optional

from budget_core.config import Settings, configure_logging

from .api_client import ApiError, DashboardData, ExpenseTrackerClient
from .viewmodels import (
    TIME_RANGES,
    bar_fill,
    dashboard_totals,
    display_name,
    filter_expenses,
    format_amount_display,
    range_start,
    sanitize_amount_input,
    validate_category_form,
    validate_expense_form,
)

PRIMARY_BG = "#0f172a"
SECONDARY_BG = "#1e293b"
ACCENT_BG = "#1d4ed8"
ACCENT_ACTIVE_BG = "#2563eb"
TEXT_PRIMARY = "#e2e8f0"
TEXT_MUTED = "#94a3b8"
DEFAULT_COLOR = "#3B82F6"


def _show_api_error(parent: tk.Misc, title: str, exc: ApiError) -> None:
    messagebox.showerror(title, str(exc), parent=parent)


class ExpenseFields:
    """Description / amount / category / date / notes inputs shared by the add and edit forms."""

    def __init__(self, form: ttk.Frame, categories: Iterable[str]) -> None:
        self.description_var = tk.StringVar()
        self.amount_var = tk.StringVar()
        self.category_var = tk.StringVar()
        self.date_var = tk.StringVar(value=date.today().isoformat())
        self.notes_var = tk.StringVar()

        form.columnconfigure(0, weight=1)
        form.columnconfigure(1, weight=1)

        self._add_field(form, "Description", self.description_var, 0, 0, columnspan=2)
        amount_entry = self._add_field(form, "Amount", self.amount_var, 0, 2)
        amount_entry.bind("<FocusOut>", self._handle_amount_focus_out)

        ttk.Label(form, text="Category", style="FormLabel.TLabel").grid(
            column=1, row=2, sticky="w", padx=4, pady=4
        )
        self.category_combo = ttk.Combobox(
            form,
            textvariable=self.category_var,
            values=list(categories),
            state="readonly",
            style="App.TCombobox",
        )
        self.category_combo.grid(column=1, row=3, sticky="ew", padx=4, pady=(0, 8))

        self._add_field(form, "Date (YYYY-MM-DD)", self.date_var, 0, 4)
        self._add_field(form, "Notes", self.notes_var, 1, 4)

    @staticmethod
    def _add_field(
        form: ttk.Frame,
        label: str,
        var: tk.StringVar,
        column: int,
        row: int,
        *,
        columnspan: int = 1,
    ) -> ttk.Entry:
        ttk.Label(form, text=label, style="FormLabel.TLabel").grid(
            column=column, row=row, columnspan=columnspan, sticky="w", padx=4, pady=4
        )
        entry = ttk.Entry(form, textvariable=var, style="App.TEntry")
        entry.grid(column=column, row=row + 1, columnspan=columnspan, sticky="ew", padx=4, pady=(0, 8))
        return entry

    def set_categories(self, names: List[str]) -> None:
        previous = self.category_var.get()
        self.category_combo["values"] = names
        if previous not in names:
            self.category_var.set(names[0] if names else "")

    def load(self, expense: Dict[str, Any]) -> None:
        self.description_var.set(expense["description"])
        self.amount_var.set(format_amount_display(expense["amount"]))
        self.category_var.set(expense["category"])
        self.date_var.set(expense["date"])
        self.notes_var.set(expense.get("notes") or "")

    def payload(self) -> Dict[str, Any]:
        return {
            "description": self.description_var.get().strip(),
            "amount": sanitize_amount_input(self.amount_var.get()),
            "category": self.category_var.get(),
            "date": self.date_var.get().strip() or None,
            "notes": self.notes_var.get() or None,
        }

    def reset(self) -> None:
        self.description_var.set("")
        self.amount_var.set("")
        self.notes_var.set("")
        self.date_var.set(date.today().isoformat())

    def _handle_amount_focus_out(self, _event: object) -> None:
        self.amount_var.set(format_amount_display(self.amount_var.get()))


class DashboardTab(ttk.Frame):
    """Spending metrics, per-category totals and budget bars."""

    def __init__(self, master: tk.Misc, client: ExpenseTrackerClient) -> None:
        super().__init__(master, padding=16, style="Panel.TFrame")
        self.client = client
        self.categories: List[Dict[str, Any]] = []

        self.range_var = tk.StringVar(value=TIME_RANGES["month"])
        self.total_var = tk.StringVar(value="$0.00")
        self.transactions_var = tk.StringVar(value="0 transactions")
        self.budget_var = tk.StringVar(value="$0.00")
        self.budget_caption_var = tk.StringVar(value="Across 0 categories")
        self.remaining_var = tk.StringVar(value="$0.00")
        self.remaining_caption_var = tk.StringVar(value="No budget set")

        self.columnconfigure(0, weight=1)
        self.rowconfigure(2, weight=1)
        self._build_header()
        self._build_metrics()
        self._build_tables()

    def _build_header(self) -> None:
        header = ttk.Frame(self, style="Panel.TFrame")
        header.grid(row=0, column=0, sticky="ew", pady=(0, 8))
        header.columnconfigure(0, weight=1)
        ttk.Label(header, text="Dashboard", style="SectionHeader.TLabel").grid(row=0, column=0, sticky="w")
        range_combo = ttk.Combobox(
            header,
            textvariable=self.range_var,
            values=list(TIME_RANGES.values()),
            state="readonly",
            style="App.TCombobox",
            width=14,
        )
        range_combo.grid(row=0, column=1, sticky="e")
        range_combo.bind("<<ComboboxSelected>>", lambda _event: self.refresh_budget_statuses())

    def _build_metrics(self) -> None:
        summary = ttk.Frame(self, style="Panel.TFrame", padding=(0, 4))
        summary.grid(row=1, column=0, sticky="ew", pady=(0, 12))
        summary.columnconfigure((0, 1, 2), weight=1)

        def build_metric(column: int, label: str, value: tk.StringVar, caption: tk.StringVar) -> ttk.Label:
            container = ttk.Frame(summary, style="Panel.TFrame", padding=(16, 12))
            container.grid(row=0, column=column, sticky="ew", padx=6)
            ttk.Label(container, text=label, style="MetricLabel.TLabel").grid(row=0, column=0, sticky="w")
            value_label = ttk.Label(container, textvariable=value, style="MetricValue.TLabel")
            value_label.grid(row=1, column=0, sticky="w")
            ttk.Label(container, textvariable=caption, style="MetricLabel.TLabel").grid(row=2, column=0, sticky="w")
            return value_label

        build_metric(0, "Total Expenses", self.total_var, self.transactions_var)
        build_metric(1, "Total Budget", self.budget_var, self.budget_caption_var)
        self.remaining_label = build_metric(2, "Remaining", self.remaining_var, self.remaining_caption_var)

    def _build_tables(self) -> None:
        body = ttk.Frame(self, style="Panel.TFrame")
        body.grid(row=2, column=0, sticky="nsew")
        body.columnconfigure((0, 1), weight=1)
        body.rowconfigure(0, weight=1)

        by_category = ttk.LabelFrame(body, text="Expenses by Category", style="Card.TLabelframe")
        by_category.grid(row=0, column=0, sticky="nsew", padx=(0, 6))
        by_category.columnconfigure(0, weight=1)
        by_category.rowconfigure(0, weight=1)
        columns = ("category", "total", "count", "average")
        self.category_tree = ttk.Treeview(
            by_category, columns=columns, show="headings", height=8, style="App.Treeview"
        )
        for key, label in zip(columns, ("Category", "Total", "Count", "Average")):
            self.category_tree.heading(key, text=label, anchor="w")
            self.category_tree.column(key, width=110, anchor="w")
        self.category_tree.grid(row=0, column=0, sticky="nsew")

        self.budget_frame = ttk.LabelFrame(body, text="Budget Status by Category", style="Card.TLabelframe")
        self.budget_frame.grid(row=0, column=1, sticky="nsew", padx=(6, 0))
        self.budget_frame.columnconfigure(1, weight=1)

    def update_data(self, data: DashboardData) -> None:
        self.categories = data.categories
        totals = dashboard_totals(data.expenses, data.categories)
        self.total_var.set(f"${format_amount_display(totals.total_spent)}")
        self.transactions_var.set(f"{totals.transactions} transactions")
        self.budget_var.set(f"${format_amount_display(totals.total_budget)}")
        self.budget_caption_var.set(f"Across {totals.category_count} categories")
        self.remaining_var.set(f"${format_amount_display(totals.remaining)}")
        percent = totals.percent_used
        self.remaining_caption_var.set(f"{percent}% used" if percent is not None else "No budget set")
        style = "MetricValueNegative.TLabel" if totals.remaining < 0 else "MetricValue.TLabel"
        self.remaining_label.configure(style=style)

        self.category_tree.delete(*self.category_tree.get_children())
        for group in data.stats.get("byCategory", []):
            self.category_tree.insert(
                "",
                "end",
                values=(
                    display_name(group["category"]),
                    format_amount_display(group["total"]),
                    group["count"],
                    format_amount_display(group["average"]),
                ),
            )
        self.refresh_budget_statuses()

    def refresh_budget_statuses(self) -> None:
        label_to_key = {label: key for key, label in TIME_RANGES.items()}
        start = range_start(label_to_key.get(self.range_var.get(), "month"))
        statuses = self.client.budget_statuses(
            self.categories, start.isoformat() if start else None
        )
        for child in self.budget_frame.winfo_children():
            child.destroy()
        if not statuses:
            ttk.Label(self.budget_frame, text="No categories yet", style="FormLabel.TLabel").grid(
                row=0, column=0, sticky="w", padx=8, pady=8
            )
            return
        for row, status in enumerate(statuses):
            badge = "Over Budget" if status["overBudget"] else "Under Budget"
            ttk.Label(
                self.budget_frame,
                text=f"{display_name(status['category'])} ({badge})",
                style="FormLabel.TLabel",
            ).grid(row=row * 2, column=0, sticky="w", padx=8, pady=(6, 0))
            bar = ttk.Progressbar(
                self.budget_frame,
                maximum=100,
                value=bar_fill(status["percentage"]),
                style="Over.Horizontal.TProgressbar" if status["overBudget"] else "Horizontal.TProgressbar",
            )
            bar.grid(row=row * 2, column=1, sticky="ew", padx=8, pady=(6, 0))
            details = (
                f"Spent: ${format_amount_display(status['spent'])}   "
                f"Budget: ${format_amount_display(status['budget'])}   "
                f"Remaining: ${format_amount_display(status['remaining'])}"
            )
            ttk.Label(self.budget_frame, text=details, style="FormLabel.TLabel").grid(
                row=row * 2 + 1, column=0, columnspan=2, sticky="w", padx=8
            )


class ExpenseListTab(ttk.Frame):
    """Filterable expense list with edit, delete and CSV export."""

    def __init__(self, master: tk.Misc, client: ExpenseTrackerClient, on_change: Callable[[], None]) -> None:
        super().__init__(master, padding=16, style="Panel.TFrame")
        self.client = client
        self.on_change = on_change
        self.expenses: List[Dict[str, Any]] = []
        self.category_names: List[str] = []

        self.category_filter_var = tk.StringVar()
        self.start_var = tk.StringVar()
        self.end_var = tk.StringVar()

        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)
        self._build_filters()
        self._build_table()

    def _build_filters(self) -> None:
        filters = ttk.LabelFrame(self, text="Filters", style="Card.TLabelframe")
        filters.grid(row=0, column=0, sticky="ew", padx=4, pady=(0, 12))

        ttk.Label(filters, text="Category", style="FormLabel.TLabel").grid(row=0, column=0, sticky="w", padx=4)
        self.category_filter = ttk.Combobox(
            filters, textvariable=self.category_filter_var, state="readonly", style="App.TCombobox"
        )
        self.category_filter.grid(row=1, column=0, padx=4, pady=(0, 8))

        ttk.Label(filters, text="Start (YYYY-MM-DD)", style="FormLabel.TLabel").grid(row=0, column=1, sticky="w", padx=4)
        ttk.Entry(filters, textvariable=self.start_var, style="App.TEntry").grid(row=1, column=1, padx=4, pady=(0, 8))
        ttk.Label(filters, text="End (YYYY-MM-DD)", style="FormLabel.TLabel").grid(row=0, column=2, sticky="w", padx=4)
        ttk.Entry(filters, textvariable=self.end_var, style="App.TEntry").grid(row=1, column=2, padx=4, pady=(0, 8))

        ttk.Button(filters, text="Apply", command=self.populate, style="Primary.TButton").grid(row=1, column=3, padx=4)
        ttk.Button(filters, text="Clear", command=self.clear_filters, style="Secondary.TButton").grid(row=1, column=4, padx=4)
        ttk.Button(filters, text="Export CSV", command=self.export, style="Secondary.TButton").grid(row=1, column=5, padx=4)

    def _build_table(self) -> None:
        table_frame = ttk.Frame(self, style="Panel.TFrame")
        table_frame.grid(row=1, column=0, sticky="nsew")
        table_frame.columnconfigure(0, weight=1)
        table_frame.rowconfigure(0, weight=1)

        columns = ("date", "description", "category", "amount", "notes")
        self.tree = ttk.Treeview(
            table_frame,
            columns=columns,
            show="headings",
            height=12,
            style="App.Treeview",
        )
        headings = {
            "date": "Date",
            "description": "Description",
            "category": "Category",
            "amount": "Amount",
            "notes": "Notes",
        }
        for key, label in headings.items():
            width = 200 if key in {"description", "notes"} else 110
            self.tree.heading(key, text=label, anchor="w")
            self.tree.column(key, width=width, anchor="w")

        vsb = ttk.Scrollbar(table_frame, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscroll=vsb.set)
        self.tree.grid(row=0, column=0, sticky="nsew")
        vsb.grid(row=0, column=1, sticky="ns")

        button_bar = ttk.Frame(table_frame, style="Panel.TFrame")
        button_bar.grid(row=1, column=0, columnspan=2, sticky="e", pady=8)
        ttk.Button(button_bar, text="Edit Selected", command=self.edit_selected, style="Secondary.TButton").grid(
            row=0, column=0, padx=4
        )
        ttk.Button(button_bar, text="Delete Selected", command=self.delete_selected, style="Secondary.TButton").grid(
            row=0, column=1, padx=4
        )

    def update_data(self, expenses: List[Dict[str, Any]], categories: List[Dict[str, Any]]) -> None:
        self.expenses = expenses
        self.category_names = [category["name"] for category in categories]
        self.category_filter["values"] = ["", *self.category_names]
        self.populate()

    def populate(self) -> None:
        self.tree.delete(*self.tree.get_children())
        visible = filter_expenses(
            self.expenses,
            self.category_filter_var.get(),
            self.start_var.get(),
            self.end_var.get(),
        )
        for expense in visible:
            values = (
                expense["date"],
                expense["description"],
                display_name(expense["category"]),
                f"${format_amount_display(expense['amount'])}",
                expense.get("notes") or "",
            )
            self.tree.insert("", "end", iid=expense["id"], values=values)

    def clear_filters(self) -> None:
        self.category_filter_var.set("")
        self.start_var.set("")
        self.end_var.set("")
        self.populate()

    def export(self) -> None:
        path = filedialog.asksaveasfilename(
            parent=self, defaultextension=".csv", initialfile="expenses.csv", filetypes=[("CSV", "*.csv")]
        )
        if not path:
            return
        try:
            content = self.client.export_csv(
                category=self.category_filter_var.get(),
                startDate=self.start_var.get().strip(),
                endDate=self.end_var.get().strip(),
            )
            Path(path).write_bytes(content)
        except ApiError as exc:
            _show_api_error(self, "Export Failed", exc)
        except OSError as exc:
            messagebox.showerror("Export Failed", f"Unable to write {path}: {exc}", parent=self)

    def edit_selected(self) -> None:
        selection = self.tree.selection()
        if not selection:
            messagebox.showinfo("No selection", "Please select an expense to edit.", parent=self)
            return
        expense = next((item for item in self.expenses if item["id"] == selection[0]), None)
        if expense is None:
            return
        ExpenseEditDialog(self, self.client, expense, self.category_names, self.on_change)

    def delete_selected(self) -> None:
        selection = self.tree.selection()
        if not selection:
            messagebox.showinfo("No selection", "Please select an expense to delete.", parent=self)
            return
        if not messagebox.askyesno("Delete Expense", "Are you sure you want to delete this expense?", parent=self):
            return
        for item_id in selection:
            try:
                self.client.delete_expense(item_id)
            except ApiError as exc:
                _show_api_error(self, "Delete Failed", exc)
                break
        self.on_change()


class ExpenseEditDialog(tk.Toplevel):
    """Modal editor for one expense."""

    def __init__(
        self,
        master: tk.Misc,
        client: ExpenseTrackerClient,
        expense: Dict[str, Any],
        category_names: List[str],
        on_saved: Callable[[], None],
    ) -> None:
        super().__init__(master)
        self.title("Edit Expense")
        self.configure(bg=PRIMARY_BG)
        self.client = client
        self.expense_id = expense["id"]
        self.on_saved = on_saved

        form = ttk.Frame(self, padding=16, style="Panel.TFrame")
        form.grid(row=0, column=0, sticky="nsew")
        names = list(category_names)
        if expense["category"] not in names:
            names.insert(0, expense["category"])
        self.fields = ExpenseFields(form, names)
        self.fields.load(expense)

        buttons = ttk.Frame(form, style="Panel.TFrame")
        buttons.grid(row=6, column=0, columnspan=2, sticky="e", pady=(8, 0))
        ttk.Button(buttons, text="Cancel", command=self.destroy, style="Secondary.TButton").grid(row=0, column=0, padx=4)
        ttk.Button(buttons, text="Save", command=self.save, style="Primary.TButton").grid(row=0, column=1, padx=4)

        self.transient(master)
        self.grab_set()

    def save(self) -> None:
        payload = self.fields.payload()
        errors = validate_expense_form(payload)
        if errors:
            messagebox.showerror("Invalid Expense", "\n".join(errors), parent=self)
            return
        try:
            self.client.update_expense(self.expense_id, payload)
        except ApiError as exc:
            _show_api_error(self, "Update Failed", exc)
            return
        self.destroy()
        self.on_saved()


class ExpenseFormTab(ttk.Frame):
    """Add-expense form."""

    def __init__(self, master: tk.Misc, client: ExpenseTrackerClient, on_change: Callable[[], None]) -> None:
        super().__init__(master, padding=16, style="Panel.TFrame")
        self.client = client
        self.on_change = on_change
        self.columnconfigure(0, weight=1)

        form = ttk.LabelFrame(self, text="Add Expense", style="Card.TLabelframe")
        form.grid(row=0, column=0, sticky="ew", padx=4)
        self.fields = ExpenseFields(form, [])

        button_row = ttk.Frame(form, style="Panel.TFrame")
        button_row.grid(column=0, row=6, columnspan=2, sticky="e", padx=4, pady=4)
        ttk.Button(button_row, text="Reset", command=self.fields.reset, style="Secondary.TButton").grid(
            column=0, row=0, padx=4
        )
        ttk.Button(button_row, text="Add Expense", command=self.submit, style="Primary.TButton").grid(
            column=1, row=0, padx=4
        )

    def update_data(self, categories: List[Dict[str, Any]]) -> None:
        self.fields.set_categories([category["name"] for category in categories])

    def submit(self) -> None:
        payload = self.fields.payload()
        errors = validate_expense_form(payload)
        if errors:
            messagebox.showerror("Invalid Expense", "\n".join(errors), parent=self)
            return
        try:
            self.client.create_expense(payload)
        except ApiError as exc:
            _show_api_error(self, "Invalid Expense", exc)
            return
        messagebox.showinfo("Expense Added", "Expense added successfully!", parent=self)
        self.fields.reset()
        self.on_change()


class CategoryTab(ttk.Frame):
    """Create, edit and delete budget categories."""

    def __init__(self, master: tk.Misc, client: ExpenseTrackerClient, on_change: Callable[[], None]) -> None:
        super().__init__(master, padding=16, style="Panel.TFrame")
        self.client = client
        self.on_change = on_change
        self.categories: List[Dict[str, Any]] = []
        self.editing: Optional[str] = None

        self.name_var = tk.StringVar()
        self.budget_var = tk.StringVar(value="0")
        self.color_var = tk.StringVar(value=DEFAULT_COLOR)

        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)
        self._build_form()
        self._build_table()

    def _build_form(self) -> None:
        form = ttk.LabelFrame(self, text="Category", style="Card.TLabelframe")
        form.grid(row=0, column=0, sticky="ew", padx=4, pady=(0, 12))
        form.columnconfigure((0, 1, 2), weight=1)

        for column, (label, var) in enumerate(
            (("Name", self.name_var), ("Budget", self.budget_var), ("Color (#RRGGBB)", self.color_var))
        ):
            ttk.Label(form, text=label, style="FormLabel.TLabel").grid(column=column, row=0, sticky="w", padx=4, pady=4)
            entry = ttk.Entry(form, textvariable=var, style="App.TEntry")
            entry.grid(column=column, row=1, sticky="ew", padx=4, pady=(0, 8))
            if var is self.name_var:
                self.name_entry = entry

        button_row = ttk.Frame(form, style="Panel.TFrame")
        button_row.grid(column=0, row=2, columnspan=3, sticky="e", padx=4, pady=4)
        ttk.Button(button_row, text="Cancel", command=self.reset_form, style="Secondary.TButton").grid(
            column=0, row=0, padx=4
        )
        self.save_button = ttk.Button(button_row, text="Add Category", command=self.submit, style="Primary.TButton")
        self.save_button.grid(column=1, row=0, padx=4)

    def _build_table(self) -> None:
        table_frame = ttk.Frame(self, style="Panel.TFrame")
        table_frame.grid(row=1, column=0, sticky="nsew")
        table_frame.columnconfigure(0, weight=1)
        table_frame.rowconfigure(0, weight=1)

        columns = ("name", "budget", "color")
        self.tree = ttk.Treeview(table_frame, columns=columns, show="headings", height=10, style="App.Treeview")
        for key, label in zip(columns, ("Name", "Budget", "Color")):
            self.tree.heading(key, text=label, anchor="w")
            self.tree.column(key, width=160, anchor="w")
        self.tree.grid(row=0, column=0, sticky="nsew")

        button_bar = ttk.Frame(table_frame, style="Panel.TFrame")
        button_bar.grid(row=1, column=0, sticky="e", pady=8)
        ttk.Button(button_bar, text="Edit Selected", command=self.edit_selected, style="Secondary.TButton").grid(
            row=0, column=0, padx=4
        )
        ttk.Button(button_bar, text="Delete Selected", command=self.delete_selected, style="Secondary.TButton").grid(
            row=0, column=1, padx=4
        )

    def update_data(self, categories: List[Dict[str, Any]]) -> None:
        self.categories = categories
        self.tree.delete(*self.tree.get_children())
        for category in categories:
            self.tree.insert(
                "",
                "end",
                iid=category["name"],
                values=(display_name(category["name"]), f"${format_amount_display(category['budget'])}", category["color"]),
            )

    def submit(self) -> None:
        payload = {
            "name": self.name_var.get().strip(),
            "budget": sanitize_amount_input(self.budget_var.get()),
            "color": self.color_var.get().strip() or None,
        }
        errors = validate_category_form(payload)
        if errors:
            messagebox.showerror("Invalid Category", "\n".join(errors), parent=self)
            return
        payload["budget"] = str(Decimal(payload["budget"])) if payload["budget"] else None
        try:
            if self.editing is None:
                self.client.create_category(payload)
            else:
                self.client.update_category(self.editing, payload)
        except ApiError as exc:
            _show_api_error(self, "Failed to save category", exc)
            return
        self.reset_form()
        self.on_change()

    def edit_selected(self) -> None:
        selection = self.tree.selection()
        if not selection:
            messagebox.showinfo("No selection", "Please select a category to edit.", parent=self)
            return
        category = next((item for item in self.categories if item["name"] == selection[0]), None)
        if category is None:
            return
        self.editing = category["name"]
        self.name_var.set(category["name"])
        self.budget_var.set(str(category["budget"]))
        self.color_var.set(category["color"])
        self.name_entry.configure(state="disabled")
        self.save_button.configure(text="Update Category")

    def delete_selected(self) -> None:
        selection = self.tree.selection()
        if not selection:
            messagebox.showinfo("No selection", "Please select a category to delete.", parent=self)
            return
        name = selection[0]
        confirm = messagebox.askyesno(
            "Delete Category",
            f"Delete category '{name}'? Expenses keep their category text.",
            parent=self,
        )
        if not confirm:
            return
        try:
            self.client.delete_category(name)
        except ApiError as exc:
            _show_api_error(self, "Failed to delete category", exc)
            return
        self.reset_form()
        self.on_change()

    def reset_form(self) -> None:
        self.editing = None
        self.name_var.set("")
        self.budget_var.set("0")
        self.color_var.set(DEFAULT_COLOR)
        self.name_entry.configure(state="normal")
        self.save_button.configure(text="Add Category")


class ExpenseTrackerApp(tk.Tk):
    """Main application window."""

    def __init__(self, client: ExpenseTrackerClient) -> None:
        super().__init__()
        self.title("Expense Tracker")
        self.geometry("1040x720")
        self.minsize(880, 600)
        self.configure(bg=PRIMARY_BG)
        self.client = client

        self._configure_styles()
        self._build_layout()
        self.refresh_all()

    def _configure_styles(self) -> None:
        style = ttk.Style(self)
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass

        style.configure("TFrame", background=PRIMARY_BG)
        style.configure("TLabel", background=PRIMARY_BG, foreground=TEXT_PRIMARY)
        style.configure("Panel.TFrame", background=SECONDARY_BG)
        style.configure("Card.TLabelframe", background=SECONDARY_BG)
        style.configure("Card.TLabelframe.Label", background=SECONDARY_BG, foreground=TEXT_PRIMARY)

        labels = {
            "FormLabel.TLabel": (SECONDARY_BG, TEXT_MUTED, ("Segoe UI", 9)),
            "Header.TLabel": (PRIMARY_BG, TEXT_PRIMARY, ("Segoe UI", 20, "bold")),
            "Subheader.TLabel": (PRIMARY_BG, TEXT_MUTED, ("Segoe UI", 10)),
            "SectionHeader.TLabel": (SECONDARY_BG, TEXT_PRIMARY, ("Segoe UI", 14, "bold")),
            "MetricLabel.TLabel": (SECONDARY_BG, TEXT_MUTED, ("Segoe UI", 9, "bold")),
            "MetricValue.TLabel": (SECONDARY_BG, TEXT_PRIMARY, ("Segoe UI", 16, "bold")),
            "MetricValueNegative.TLabel": (SECONDARY_BG, "#fca5a5", ("Segoe UI", 16, "bold")),
        }
        for name, (background, foreground, font) in labels.items():
            style.configure(name, background=background, foreground=foreground, font=font)

        for name in ("App.TEntry", "App.TCombobox"):
            style.configure(
                name,
                fieldbackground=SECONDARY_BG,
                foreground=TEXT_PRIMARY,
                insertcolor=TEXT_PRIMARY,
                arrowcolor=TEXT_PRIMARY,
            )
        style.map("App.TCombobox", fieldbackground=[("readonly", SECONDARY_BG)])

        buttons = {
            "Primary.TButton": (ACCENT_BG, ACCENT_ACTIVE_BG),
            "Secondary.TButton": (SECONDARY_BG, ACCENT_BG),
        }
        for name, (background, active) in buttons.items():
            style.configure(
                name, background=background, foreground=TEXT_PRIMARY, bordercolor=background, padding=(14, 6)
            )
            style.map(name, background=[("active", active)], foreground=[("disabled", TEXT_MUTED)])

        style.configure("Horizontal.TProgressbar", background=ACCENT_BG, troughcolor=PRIMARY_BG)
        style.configure("Over.Horizontal.TProgressbar", background="#e74c3c", troughcolor=PRIMARY_BG)

        style.configure(
            "App.Treeview", background=SECONDARY_BG, fieldbackground=SECONDARY_BG, foreground=TEXT_PRIMARY, rowheight=28
        )
        style.configure("App.Treeview.Heading", background=SECONDARY_BG, foreground=TEXT_MUTED, relief="flat")
        style.map("App.Treeview", background=[("selected", ACCENT_BG)])

        style.configure("App.TNotebook", background=PRIMARY_BG, borderwidth=0)
        style.configure("App.TNotebook.Tab", background=SECONDARY_BG, foreground=TEXT_MUTED, padding=(16, 10))
        style.map(
            "App.TNotebook.Tab",
            background=[("selected", ACCENT_BG)],
            foreground=[("selected", TEXT_PRIMARY)],
        )

    def _build_layout(self) -> None:
        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)

        header = ttk.Frame(self, padding=20)
        header.grid(row=0, column=0, sticky="ew")
        ttk.Label(header, text="Expense Tracker", style="Header.TLabel").grid(row=0, column=0, sticky="w")
        ttk.Label(header, text="Track your expenses and manage your budget", style="Subheader.TLabel").grid(
            row=1, column=0, sticky="w"
        )

        notebook = ttk.Notebook(self, style="App.TNotebook")
        notebook.grid(row=1, column=0, sticky="nsew")

        self.dashboard_tab = DashboardTab(notebook, self.client)
        self.expense_list_tab = ExpenseListTab(notebook, self.client, self.refresh_all)
        self.expense_form_tab = ExpenseFormTab(notebook, self.client, self.refresh_all)
        self.category_tab = CategoryTab(notebook, self.client, self.refresh_all)

        notebook.add(self.dashboard_tab, text="Dashboard", padding=4)
        notebook.add(self.expense_list_tab, text="Expenses", padding=4)
        notebook.add(self.expense_form_tab, text="Add Expense", padding=4)
        notebook.add(self.category_tab, text="Categories", padding=4)

    def refresh_all(self) -> None:
        """Re-fetch everything after any change; local state is never patched."""
        try:
            data = self.client.load_all()
        except ApiError as exc:
            _show_api_error(self, "Connection Error", exc)
            return
        self.dashboard_tab.update_data(data)
        self.expense_list_tab.update_data(data.expenses, data.categories)
        self.expense_form_tab.update_data(data.categories)
        self.category_tab.update_data(data.categories)


def main(argv: Optional[Iterable[str]] = None) -> None:
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description="Tkinter desktop client for the budget tracker API")
    parser.add_argument(
        "--api-url",
        default=settings.api_url,
        help=f"Base URL of the API (default: {settings.api_url})",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(settings.log_level)

    app = ExpenseTrackerApp(ExpenseTrackerClient(args.api_url))
    app.mainloop()


if __name__ == "__main__":  # pragma: no cover - manual execution
    main()
