import pytest
import requests

from desktop.app.api_client import ApiError, ExpenseTrackerClient


@pytest.fixture
def api(api_session):
    return ExpenseTrackerClient("http://testserver/api/", session=api_session)


def test_health(api):
    assert api.health()["status"] == "ok"


def test_expense_round_trip(api):
    created = api.create_expense(
        {"description": "Tea", "amount": 4, "category": "food", "date": "2024-02-01"}
    )
    assert api.get_expense(created["id"])["description"] == "Tea"

    updated = api.update_expense(
        created["id"], {"description": "Green tea", "amount": 5, "category": "food"}
    )
    assert updated["amount"] == 5

    listing = api.get_expenses(category="food", startDate=None)
    assert listing["pagination"]["total"] == 1

    assert api.delete_expense(created["id"])["message"] == "Expense deleted successfully"
    with pytest.raises(ApiError) as info:
        api.get_expense(created["id"])
    assert info.value.status_code == 404
    assert str(info.value) == "Expense not found"


def test_empty_params_are_not_sent(api, api_session):
    api.get_expenses(category="", startDate=None, limit=5)
    assert api_session.calls[-1] == ("GET", "/api/expenses", {"limit": 5})


def test_validation_errors_are_joined(api):
    with pytest.raises(ApiError) as info:
        api.create_expense({"description": "", "amount": 1, "category": "food"})
    assert info.value.status_code == 400
    assert [error["field"] for error in info.value.errors] == ["description"]
    assert str(info.value)


def test_conflict_message(api):
    api.create_category({"name": "food"})
    with pytest.raises(ApiError, match="Category already exists"):
        api.create_category({"name": "Food"})


def test_load_all_fetches_everything(api):
    api.create_category({"name": "food", "budget": 50})
    api.create_expense({"description": "a", "amount": 10, "category": "food", "date": "2024-01-01"})
    api.create_expense({"description": "b", "amount": 15, "category": "fun", "date": "2024-01-02"})

    data = api.load_all()
    assert [e["description"] for e in data.expenses] == ["b", "a"]
    assert [c["name"] for c in data.categories] == ["food"]
    assert data.stats["total"] == 25
    assert data.stats["count"] == 2


def test_budget_statuses_fall_back_per_category(api):
    api.create_category({"name": "food", "budget": 50})
    api.create_expense({"description": "a", "amount": 60, "category": "food", "date": "2024-01-01"})

    categories = [{"name": "food", "budget": 50}, {"name": "ghost", "budget": 20}]
    statuses = api.budget_statuses(categories, start_date="2024-01-01")
    assert statuses[0]["spent"] == 60
    assert statuses[0]["overBudget"] is True
    assert statuses[1] == {
        "category": "ghost",
        "budget": 20,
        "spent": 0,
        "remaining": 20,
        "percentage": 0,
        "overBudget": False,
    }
    assert api.budget_statuses([]) == []


def test_export_csv_returns_bytes(api):
    api.create_expense({"description": "a", "amount": 1, "category": "food", "date": "2024-01-01"})
    content = api.export_csv(category="food")
    assert isinstance(content, bytes)
    assert content.decode("utf-8").splitlines()[0] == "Description,Amount,Category,Date,Notes"


def test_unreachable_server_raises_api_error():
    class DeadSession:
        def request(self, *args, **kwargs):
            raise requests.ConnectionError("connection refused")

    client = ExpenseTrackerClient("http://localhost:1/api", session=DeadSession())
    with pytest.raises(ApiError, match="Unable to reach"):
        client.get_categories()
