import os
import sys
from datetime import datetime

import pytest

# Ensure project root is on sys.path so `api`, `models` and `services` resolve
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from api.client import ApiError  # noqa: E402
from models.account import Account  # noqa: E402
from models.budget import Budget  # noqa: E402
from models.transaction import Transaction  # noqa: E402
from services.account_store import AccountStore  # noqa: E402
from services.budget_store import BudgetStore  # noqa: E402
from services.category_catalog import CategoryCatalog  # noqa: E402
from services.transaction_store import TransactionStore  # noqa: E402


# --- Test utilities: fake in-memory resource APIs ---

class FakeResourceAPI:
    """Stands in for AccountAPI / TransactionAPI / BudgetAPI.

    ``to_model`` turns the posted payload plus an id into the model the
    real wrapper would return. Set ``fail_with`` to make the next calls
    raise ApiError with that message.
    """

    def __init__(self, to_model, records=None):
        self._to_model = to_model
        self.records = list(records or [])
        self.calls: list[tuple] = []
        self.fail_with: str | None = None
        self._next_id = 100

    def _maybe_fail(self):
        if self.fail_with:
            raise ApiError(self.fail_with, 400)

    def get_all(self):
        self.calls.append(("get_all",))
        self._maybe_fail()
        return list(self.records)

    def create(self, data):
        self.calls.append(("create", data))
        self._maybe_fail()
        self._next_id += 1
        record = self._to_model({**data, "id": str(self._next_id)})
        self.records.append(record)
        return record

    def update(self, record_id, updates):
        self.calls.append(("update", record_id, updates))
        self._maybe_fail()
        record = self._to_model({**updates, "id": record_id})
        self.records = [record if r.id == record_id else r for r in self.records]
        return record

    def delete(self, record_id):
        self.calls.append(("delete", record_id))
        self._maybe_fail()
        self.records = [r for r in self.records if r.id != record_id]


@pytest.fixture
def catalog():
    return CategoryCatalog()


def make_tx(
    tx_id,
    amount,
    when,
    category_id="food",
    type_="expense",
    status="completed",
    account_id="acc-1",
    catalog=None,
):
    catalog = catalog or CategoryCatalog()
    if isinstance(when, str):
        when = datetime.fromisoformat(when)
    return Transaction(
        id=str(tx_id),
        date=when,
        amount=amount,
        type=type_,
        category=catalog.get_by_id(category_id),
        account_id=account_id,
        status=status,
    )


def make_budget(budget_id="b-1", amount=500.0, category_id="food", year=2024, month=3,
                is_active=True, name="Food"):
    return Budget(
        id=budget_id, name=name, category_id=category_id, amount=amount,
        year=year, month=month, is_active=is_active,
    )


@pytest.fixture
def account_api():
    return FakeResourceAPI(Account.from_dict)


@pytest.fixture
def tx_api(catalog):
    return FakeResourceAPI(lambda d: Transaction.from_dict(d, category_lookup=catalog.get_by_id))


@pytest.fixture
def budget_api():
    return FakeResourceAPI(Budget.from_dict)


@pytest.fixture
def account_store(account_api):
    return AccountStore(account_api)


@pytest.fixture
def tx_store(tx_api, account_store, catalog):
    return TransactionStore(tx_api, account_store, catalog)


@pytest.fixture
def budget_store(budget_api, tx_store, catalog):
    return BudgetStore(budget_api, tx_store, catalog)
