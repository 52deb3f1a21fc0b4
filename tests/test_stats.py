from decimal import Decimal

import pytest

from budget_core.exceptions import RecordNotFoundError


def _add(expense_service, amount, category, day="2024-06-01"):
    expense_service.add({"description": "x", "amount": amount, "category": category, "date": day})


def test_budget_status_over_budget(category_service, expense_service, stats_service):
    category_service.add({"name": "food", "budget": 100})
    _add(expense_service, 30, "food")
    _add(expense_service, 80, "food")

    status = stats_service.budget_status("food").to_dict()
    assert status == {
        "category": "food",
        "budget": 100.0,
        "spent": 110.0,
        "remaining": -10.0,
        "percentage": 110.0,
        "overBudget": True,
    }


def test_budget_status_rounds_percentage(category_service, expense_service, stats_service):
    category_service.add({"name": "rent", "budget": 3})
    _add(expense_service, 1, "rent")
    status = stats_service.budget_status("rent")
    assert status.percentage == Decimal("33.33")
    assert status.remaining == Decimal("2.00")
    assert not status.over_budget


def test_budget_status_exactly_on_budget_is_not_over(category_service, expense_service, stats_service):
    category_service.add({"name": "fun", "budget": 50})
    _add(expense_service, 50, "fun")
    status = stats_service.budget_status("fun")
    assert status.percentage == Decimal("100.00")
    assert status.over_budget is False


def test_budget_status_zero_budget_has_zero_percentage(category_service, expense_service, stats_service):
    category_service.add({"name": "misc"})
    _add(expense_service, 20, "misc")
    status = stats_service.budget_status("misc").to_dict()
    assert status["percentage"] == 0
    assert status["remaining"] == -20.0
    assert status["overBudget"] is True


def test_budget_status_respects_period_and_case(category_service, expense_service, stats_service):
    category_service.add({"name": "food", "budget": 200})
    _add(expense_service, 10, "Food", day="2024-05-31")
    _add(expense_service, 20, "FOOD", day="2024-06-01")
    _add(expense_service, 40, "food", day="2024-06-30")
    _add(expense_service, 99, "travel", day="2024-06-15")

    june = stats_service.budget_status("food", start="2024-06-01", end="2024-06-30")
    assert june.spent == Decimal("60.00")
    assert stats_service.budget_status("FOOD").spent == Decimal("70.00")


def test_budget_status_unknown_category(stats_service):
    with pytest.raises(RecordNotFoundError):
        stats_service.budget_status("ghost")


def test_summary_groups_and_sorts_by_total(expense_service, stats_service):
    _add(expense_service, 10, "food")
    _add(expense_service, 30, "Food")
    _add(expense_service, 100, "rent")
    _add(expense_service, "0.10", "misc")
    _add(expense_service, "0.25", "misc")

    summary = stats_service.summary().to_dict()
    assert [group["category"] for group in summary["byCategory"]] == ["rent", "food", "misc"]
    food = summary["byCategory"][1]
    assert food == {"category": "food", "total": 40.0, "count": 2, "average": 20.0}
    assert summary["byCategory"][2]["average"] == 0.18
    assert summary["count"] == 5
    assert summary["total"] == 140.35


@pytest.mark.parametrize(
    "start,end",
    [(None, None), ("2024-01-01", "2024-01-31"), ("2024-02-01", None), (None, "2024-01-10")],
)
def test_summary_group_totals_add_up(expense_service, stats_service, start, end):
    for day, amount, category in [
        ("2024-01-01", "0.10", "a"),
        ("2024-01-10", "0.20", "b"),
        ("2024-01-20", "3.33", "a"),
        ("2024-02-05", "7.77", "c"),
        ("2024-02-06", "1.01", "b"),
    ]:
        _add(expense_service, amount, category, day=day)

    summary = stats_service.summary(start=start, end=end)
    assert sum((group.total for group in summary.by_category), Decimal("0")) == summary.total
    assert sum(group.count for group in summary.by_category) == summary.count
    assert summary.count == expense_service.count(start=start, end=end)


def test_summary_of_nothing(stats_service):
    assert stats_service.summary().to_dict() == {"byCategory": [], "total": 0.0, "count": 0}
