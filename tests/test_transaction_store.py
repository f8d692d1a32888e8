from datetime import date, datetime

import pytest

from api.client import ApiError
from api.transaction_api import TransactionAPI
from models.account import Account
from conftest import make_tx
from services.transaction_store import TransactionStore


@pytest.fixture
def loaded(tx_store):
    tx_store.transactions = [
        make_tx(1, 3000.0, "2024-03-01T08:00:00", category_id="salary", type_="income"),
        make_tx(2, 500.0, "2024-03-10T08:00:00", category_id="freelance", type_="income", status="pending"),
        make_tx(3, 120.0, "2024-03-15T19:00:00"),
        make_tx(4, 80.0, "2024-03-31T23:59:59", category_id="transport", account_id="acc-2"),
        make_tx(5, 60.0, "2024-04-01T00:00:00", status="cancelled"),
        make_tx(6, 45.0, "2024-02-10T12:00:00", category_id="health"),
    ]
    return tx_store


def _ids(transactions):
    return [t.id for t in transactions]


def test_transactions_in_period_is_inclusive(loaded):
    start = datetime(2024, 3, 1, 8, 0, 0)
    end = datetime(2024, 3, 31, 23, 59, 59)
    assert _ids(loaded.transactions_in_period(start, end)) == ["1", "2", "3", "4"]


def test_transactions_in_period_with_dates_covers_whole_days(loaded):
    assert _ids(loaded.transactions_in_period(date(2024, 3, 15), date(2024, 3, 31))) == ["3", "4"]


def test_transactions_by_category_and_account(loaded):
    assert _ids(loaded.transactions_by_category("food")) == ["3", "5"]
    assert _ids(loaded.transactions_by_category("unknown")) == []
    assert _ids(loaded.transactions_by_account("acc-2")) == ["4"]


def test_totals_only_count_completed(loaded):
    assert loaded.total_income() == 3000.0
    assert loaded.total_expenses() == 120.0 + 80.0 + 45.0


def test_totals_restricted_to_period_when_both_bounds_given(loaded):
    assert loaded.total_expenses(date(2024, 3, 1), date(2024, 3, 31)) == 200.0
    assert loaded.total_income(date(2024, 4, 1), date(2024, 4, 30)) == 0.0


def test_totals_ignore_a_single_bound(loaded):
    assert loaded.total_expenses(date(2024, 3, 1), None) == loaded.total_expenses()


def test_create_prepends_and_refreshes_accounts(tx_store, tx_api, account_api):
    tx_store.transactions = [make_tx(1, 10.0, "2024-03-01T10:00:00")]
    account_api.records = [Account(id="acc-1", name="Conta", balance=990.0)]

    tx = tx_store.create("acc-1", "expense", 10.0, "2024-03-02", "food", description=" lunch ")

    assert _ids(tx_store.transactions) == [tx.id, "1"]
    _, payload = tx_api.calls[-1]
    assert payload["date"] == "2024-03-02"
    assert payload["categoryId"] == "food"
    assert payload["description"] == "lunch"
    assert ("get_all",) in account_api.calls
    assert tx_store.error is None


def test_create_keeps_time_of_day(tx_store, tx_api):
    tx_store.create("acc-1", "income", 10.0, datetime(2024, 3, 2, 14, 30), "salary")
    _, payload = tx_api.calls[-1]
    assert payload["date"] == "2024-03-02T14:30:00"


def test_update_replaces_in_place_and_refreshes_accounts(tx_store, account_api):
    tx_store.transactions = [make_tx(1, 10.0, "2024-03-01T10:00:00"), make_tx(2, 20.0, "2024-03-02T10:00:00")]

    updated = tx_store.update("2", "acc-1", "expense", 25.0, "2024-03-02", "food", status="pending")

    assert _ids(tx_store.transactions) == ["1", "2"]
    assert tx_store.transactions[1] is updated
    assert updated.status == "pending"
    assert ("get_all",) in account_api.calls


def test_delete_removes_and_refreshes_accounts(tx_store, account_api):
    tx_store.transactions = [make_tx(1, 10.0, "2024-03-01T10:00:00")]
    tx_store.delete("1")
    assert tx_store.transactions == []
    assert ("get_all",) in account_api.calls


def test_failed_mutation_leaves_collection_and_accounts_untouched(tx_store, tx_api, account_api):
    original = [make_tx(1, 10.0, "2024-03-01T10:00:00")]
    tx_store.transactions = list(original)
    tx_api.fail_with = "Saldo insuficiente"

    with pytest.raises(ApiError, match="Saldo insuficiente"):
        tx_store.create("acc-1", "expense", 10.0, "2024-03-02", "food")
    with pytest.raises(ApiError):
        tx_store.delete("1")

    assert tx_store.transactions == original
    assert tx_store.error == "Saldo insuficiente"
    assert account_api.calls == []


def test_account_reload_failure_does_not_undo_transaction(tx_store, account_api):
    account_api.fail_with = "Erro ao carregar contas"
    tx = tx_store.create("acc-1", "expense", 10.0, "2024-03-02", "food")
    assert tx_store.transactions == [tx]
    assert tx_store.error is None


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"type_": "transfer"}, "Invalid type"),
        ({"amount": 0}, "positive"),
        ({"amount": -5}, "positive"),
        ({"date": "not a date"}, "Invalid date"),
        ({"category_id": "salary"}, "Invalid expense category"),
        ({"account_id": ""}, "account"),
        ({"status": "done"}, "Invalid status"),
    ],
)
def test_validation_runs_before_any_request(tx_store, tx_api, kwargs, message):
    args = {
        "account_id": "acc-1", "type_": "expense", "amount": 10.0,
        "date": "2024-03-02", "category_id": "food",
    }
    args.update(kwargs)
    with pytest.raises(ValueError, match=message):
        tx_store.create(**args)
    assert tx_api.calls == []


def test_load_replaces_collection(tx_store, tx_api):
    tx_api.records = [make_tx(7, 10.0, "2024-03-01T10:00:00")]
    assert tx_store.load() is True
    assert _ids(tx_store.transactions) == ["7"]


def test_reset_clears_state(loaded):
    loaded.error = "old"
    loaded.reset()
    assert loaded.transactions == []
    assert loaded.error is None


class CannedClient:
    """Answers every request with the same decoded payload."""

    def __init__(self, payload):
        self.payload = payload

    def get(self, path):
        return self.payload

    def post(self, path, json=None):
        return self.payload


def _store_over(payload, account_store, catalog):
    api = TransactionAPI(CannedClient(payload), category_lookup=catalog.get_by_id)
    return TransactionStore(api, account_store, catalog)


def test_load_records_malformed_server_record(account_store, catalog):
    store = _store_over(
        [{"id": 1, "date": "garbage", "amount": 10, "type": "expense", "categoryId": "food"}],
        account_store, catalog,
    )
    assert store.load() is False
    assert store.error == "The server returned an invalid record."
    assert store.transactions == []
    assert not store.is_loading


def test_load_records_non_list_payload(account_store, catalog):
    store = _store_over({"unexpected": True}, account_store, catalog)
    assert store.load() is False
    assert store.error == "The server returned an invalid record."


def test_create_records_malformed_confirmation(account_store, catalog):
    store = _store_over({"date": "2024-03-02", "amount": 10}, account_store, catalog)
    with pytest.raises(ApiError):
        store.create("acc-1", "expense", 10.0, "2024-03-02", "food")
    assert store.error == "The server returned an invalid record."
    assert store.transactions == []
