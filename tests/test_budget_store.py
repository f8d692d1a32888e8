from datetime import datetime

import pytest

from api.budget_api import BudgetAPI
from api.client import ApiError
from services.budget_store import BudgetStore, classify, spent_percentage
from conftest import make_budget, make_tx


def _march_scenario(tx_store, budget_store):
    tx_store.transactions = [
        make_tx(1, 200.0, "2024-03-05T12:00:00"),
        make_tx(2, 150.0, "2024-03-20T09:30:00"),
        make_tx(3, 100.0, "2024-02-28T18:00:00"),
    ]
    budget_store.budgets = [make_budget()]


def test_scenario_within_budget(tx_store, budget_store):
    _march_scenario(tx_store, budget_store)

    [status] = budget_store.budgets_with_status()

    assert status.spent == 350.0
    assert status.remaining == 150.0
    assert status.percentage == pytest.approx(70.0)
    assert status.status == "on_track"


def test_scenario_over_budget(tx_store, budget_store):
    _march_scenario(tx_store, budget_store)
    tx_store.transactions.append(make_tx(4, 200.0, "2024-03-28T10:00:00"))

    [status] = budget_store.budgets_with_status()

    assert status.spent == 550.0
    assert status.remaining == -50.0
    assert status.percentage == 100.0
    assert status.status == "exceeded"


def test_with_status_keeps_budget_fields(tx_store, budget_store):
    _march_scenario(tx_store, budget_store)
    [status] = budget_store.budgets_with_status()
    assert (status.id, status.name, status.category_id, status.amount) == ("b-1", "Food", "food", 500.0)
    assert (status.year, status.month, status.is_active) == (2024, 3, True)


def test_month_boundaries(tx_store, budget_store):
    tx_store.transactions = [
        make_tx(1, 10.0, "2024-03-01T00:00:00"),
        make_tx(2, 20.0, "2024-03-31T23:59:59"),
        make_tx(3, 40.0, datetime(2024, 3, 31, 23, 59, 59, 999000)),
        make_tx(4, 80.0, "2024-04-01T00:00:00"),
        make_tx(5, 160.0, "2024-02-29T23:59:59"),
    ]
    assert budget_store.category_spent("food", 2024, 3) == 70.0


def test_february_leap_year_window(tx_store, budget_store):
    tx_store.transactions = [make_tx(1, 30.0, "2024-02-29T23:00:00")]
    assert budget_store.category_spent("food", 2024, 2) == 30.0


def test_december_window_does_not_leak_into_january(tx_store, budget_store):
    tx_store.transactions = [
        make_tx(1, 30.0, "2024-12-31T23:59:59"),
        make_tx(2, 50.0, "2025-01-01T00:00:00"),
    ]
    assert budget_store.category_spent("food", 2024, 12) == 30.0
    assert budget_store.category_spent("food", 2025, 1) == 50.0


def test_category_spent_only_counts_expenses_of_that_category(tx_store, budget_store):
    tx_store.transactions = [
        make_tx(1, 100.0, "2024-03-10T10:00:00"),
        make_tx(2, 70.0, "2024-03-10T10:00:00", category_id="transport"),
        make_tx(3, 999.0, "2024-03-10T10:00:00", category_id="salary", type_="income"),
    ]
    assert budget_store.category_spent("food", 2024, 3) == 100.0
    assert budget_store.category_spent("salary", 2024, 3) == 0.0


def test_category_spent_ignores_transaction_status(tx_store, budget_store):
    tx_store.transactions = [
        make_tx(1, 100.0, "2024-03-10T10:00:00", status="completed"),
        make_tx(2, 40.0, "2024-03-11T10:00:00", status="pending"),
        make_tx(3, 10.0, "2024-03-12T10:00:00", status="cancelled"),
    ]
    assert budget_store.category_spent("food", 2024, 3) == 150.0


def test_category_spent_is_idempotent(tx_store, budget_store):
    _march_scenario(tx_store, budget_store)
    first = budget_store.category_spent("food", 2024, 3)
    second = budget_store.category_spent("food", 2024, 3)
    assert first == second == 350.0


def test_derived_values_follow_transaction_store(tx_store, budget_store):
    _march_scenario(tx_store, budget_store)
    assert budget_store.budget_status(budget_store.budgets[0]) == "on_track"
    tx_store.transactions.append(make_tx(9, 60.0, "2024-03-30T10:00:00"))
    assert budget_store.budget_status(budget_store.budgets[0]) == "warning"


@pytest.mark.parametrize(
    "spent, expected",
    [
        (0.0, "on_track"),
        (399.99, "on_track"),
        (400.0, "warning"),
        (499.99, "warning"),
        (500.0, "exceeded"),
        (800.0, "exceeded"),
    ],
)
def test_status_thresholds(tx_store, budget_store, spent, expected):
    if spent:
        tx_store.transactions = [make_tx(1, spent, "2024-03-15T10:00:00")]
    assert budget_store.budget_status(make_budget(amount=500.0)) == expected


@pytest.mark.parametrize("amount", [3.0, 7.0, 10.0, 33.33, 123.45, 1000.0])
@pytest.mark.parametrize("ratio", [0.0, 0.5, 0.79, 0.8, 0.81, 0.99, 1.0, 1.2])
def test_classification_matches_spend_ratio(amount, ratio):
    spent = amount * ratio
    status = classify(spent, amount)
    assert (status == "exceeded") == (spent >= amount)
    assert (status == "warning") == (0.8 * amount <= spent < amount)


def test_displayed_percentage_never_exceeds_100(tx_store, budget_store):
    tx_store.transactions = [make_tx(1, 5000.0, "2024-03-15T10:00:00")]
    budget_store.budgets = [make_budget(amount=100.0), make_budget("b-2", amount=4999.0)]
    statuses = budget_store.budgets_with_status()
    assert all(s.percentage <= 100.0 for s in statuses)
    assert [s.remaining for s in statuses] == [-4900.0, -1.0]


def test_spent_percentage_with_zero_ceiling():
    assert spent_percentage(0.0, 0.0) == 0.0
    assert spent_percentage(10.0, 0.0) == 100.0
    assert classify(0.0, 0.0) == "on_track"
    assert classify(10.0, 0.0) == "exceeded"


def test_totals_use_active_budgets_of_the_period(tx_store, budget_store):
    tx_store.transactions = [
        make_tx(1, 120.0, "2024-03-02T10:00:00"),
        make_tx(2, 30.0, "2024-03-03T10:00:00", category_id="transport"),
        make_tx(3, 45.0, "2024-03-04T10:00:00", category_id="health"),
    ]
    budget_store.budgets = [
        make_budget("b-1", 500.0, "food"),
        make_budget("b-2", 200.0, "transport"),
        make_budget("b-3", 100.0, "health", is_active=False),
        make_budget("b-4", 900.0, "food", month=4),
    ]
    assert budget_store.total_budgeted(2024, 3) == 700.0
    assert budget_store.total_spent(2024, 3) == 150.0
    assert budget_store.total_budgeted(2024, 5) == 0.0


def test_total_spent_counts_shared_category_per_budget(tx_store, budget_store):
    tx_store.transactions = [make_tx(1, 100.0, "2024-03-02T10:00:00")]
    budget_store.budgets = [
        make_budget("b-1", 500.0, "food", name="Groceries"),
        make_budget("b-2", 300.0, "food", name="Restaurants"),
    ]
    assert budget_store.total_spent(2024, 3) == 200.0


def test_create_appends_confirmed_budget(budget_store, budget_api):
    budget = budget_store.create("Food", "food", 500.0, 2024, 3, description=" groceries ")

    assert budget_store.budgets == [budget]
    _, payload = budget_api.calls[-1]
    assert payload["categoryId"] == "food"
    assert payload["category"]["name"] == "Alimentação"
    assert payload["description"] == "groceries"
    assert payload["isActive"] is True
    assert budget_store.error is None
    assert budget_store.is_loading is False


def test_update_replaces_budget_in_place(budget_store):
    budget_store.budgets = [make_budget("b-1"), make_budget("b-2", category_id="rent")]

    updated = budget_store.update("b-2", "Rent", "rent", 1500.0, 2024, 3)

    assert [b.id for b in budget_store.budgets] == ["b-1", "b-2"]
    assert budget_store.budgets[1] is updated
    assert updated.amount == 1500.0


def test_delete_removes_budget(budget_store):
    budget_store.budgets = [make_budget("b-1"), make_budget("b-2")]
    budget_store.delete("b-1")
    assert [b.id for b in budget_store.budgets] == ["b-2"]


def test_failed_mutation_keeps_collection_and_records_error(budget_store, budget_api):
    original = [make_budget("b-1")]
    budget_store.budgets = list(original)
    budget_api.fail_with = "Orçamento já existe"

    with pytest.raises(ApiError, match="Orçamento já existe"):
        budget_store.create("Food", "food", 500.0, 2024, 3)

    assert budget_store.budgets == original
    assert budget_store.error == "Orçamento já existe"
    assert budget_store.is_loading is False


def test_error_persists_until_success_or_clear(budget_store, budget_api):
    budget_api.fail_with = "boom"
    with pytest.raises(ApiError):
        budget_store.delete("b-1")
    assert budget_store.error == "boom"

    budget_store.clear_error()
    assert budget_store.error is None

    with pytest.raises(ApiError):
        budget_store.delete("b-1")
    budget_api.fail_with = None
    budget_store.create("Food", "food", 500.0, 2024, 3)
    assert budget_store.error is None


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"name": "F"}, "at least"),
        ({"name": "x" * 51}, "at most"),
        ({"category_id": "salary"}, "expense category"),
        ({"category_id": ""}, "expense category"),
        ({"amount": 0}, "greater than zero"),
        ({"amount": 1_000_000}, "too high"),
        ({"month": 13}, "Invalid month"),
        ({"description": "d" * 201}, "at most"),
    ],
)
def test_validation_runs_before_any_request(budget_store, budget_api, kwargs, message):
    args = {"name": "Food", "category_id": "food", "amount": 500.0, "year": 2024, "month": 3}
    args.update(kwargs)
    with pytest.raises(ValueError, match=message):
        budget_store.create(**args)
    assert budget_api.calls == []


def test_load_failure_is_recorded_not_raised(budget_store, budget_api):
    budget_api.fail_with = "Sessão expirada"
    assert budget_store.load() is False
    assert budget_store.error == "Sessão expirada"


def test_session_change_reloads_or_clears(budget_store, budget_api):
    budget_api.records = [make_budget("b-1")]
    budget_store.on_session_changed(object())
    assert [b.id for b in budget_store.budgets] == ["b-1"]

    budget_store.on_session_changed(None)
    assert budget_store.budgets == []


def test_load_records_budget_missing_period(tx_store, catalog):
    class CannedClient:
        def get(self, path):
            return [{"id": "b1", "name": "Food", "categoryId": "food", "amount": 500}]

    store = BudgetStore(BudgetAPI(CannedClient()), tx_store, catalog)
    assert store.load() is False
    assert store.error == "The server returned an invalid record."
    assert store.budgets == []
