import logging
from datetime import date, datetime, time

from api.client import ApiError
from api.transaction_api import TransactionAPI
from models.transaction import Transaction, TRANSACTION_TYPES, TRANSACTION_STATUSES
from models.user import User
from services.account_store import AccountStore
from services.category_catalog import CategoryCatalog
from services.store_state import StoreState
from utils.date_helpers import parse_datetime, period_bounds, to_iso

logger = logging.getLogger(__name__)


class TransactionStore(StoreState):
    """The signed-in user's transactions.

    Balances belong to the server: after every confirmed mutation the
    account store is reloaded instead of adjusting balances locally.
    """

    def __init__(
        self,
        tx_api: TransactionAPI,
        account_store: AccountStore,
        catalog: CategoryCatalog,
    ):
        super().__init__()
        self._api = tx_api
        self._accounts = account_store
        self._catalog = catalog
        self.transactions: list[Transaction] = []

    # ── Loading ──────────────────────────────────────────────────────────────

    def load(self) -> bool:
        try:
            self.transactions = self._remote("Loading transactions", self._api.get_all)
        except ApiError:
            return False
        logger.debug("Loaded %d transactions", len(self.transactions))
        return True

    def reset(self):
        self.transactions = []
        self.is_loading = False
        self.error = None

    def on_session_changed(self, user: User | None):
        if user is None:
            self.reset()
        else:
            self.load()

    # ── Mutations ────────────────────────────────────────────────────────────

    def create(
        self,
        account_id: str,
        type_: str,
        amount: float,
        date: date | datetime | str,
        category_id: str,
        description: str = "",
        status: str = "completed",
    ) -> Transaction:
        payload = self._build_payload(account_id, type_, amount, date, category_id, description, status)
        tx = self._remote("Creating transaction", self._api.create, payload)
        self.transactions = [tx] + self.transactions
        self._accounts.load()
        return tx

    def update(
        self,
        tx_id: str,
        account_id: str,
        type_: str,
        amount: float,
        date: date | datetime | str,
        category_id: str,
        description: str = "",
        status: str = "completed",
    ) -> Transaction:
        payload = self._build_payload(account_id, type_, amount, date, category_id, description, status)
        tx = self._remote("Updating transaction", self._api.update, tx_id, payload)
        self.transactions = [tx if t.id == tx.id else t for t in self.transactions]
        self._accounts.load()
        return tx

    def delete(self, tx_id: str):
        self._remote("Deleting transaction", self._api.delete, tx_id)
        self.transactions = [t for t in self.transactions if t.id != tx_id]
        self._accounts.load()

    # ── Queries ──────────────────────────────────────────────────────────────

    def get_by_id(self, tx_id: str) -> Transaction | None:
        return next((t for t in self.transactions if t.id == tx_id), None)

    def transactions_in_period(
        self, start: date | datetime, end: date | datetime
    ) -> list[Transaction]:
        """Transactions dated within [start, end], both ends inclusive."""
        start, end = period_bounds(start, end)
        return [t for t in self.transactions if start <= t.date <= end]

    def transactions_by_category(self, category_id: str) -> list[Transaction]:
        return [t for t in self.transactions if t.category.id == category_id]

    def transactions_by_account(self, account_id: str) -> list[Transaction]:
        return [t for t in self.transactions if t.account_id == account_id]

    def total_income(self, start=None, end=None) -> float:
        return self._completed_total("income", start, end)

    def total_expenses(self, start=None, end=None) -> float:
        return self._completed_total("expense", start, end)

    def _completed_total(self, type_: str, start, end) -> float:
        if start is not None and end is not None:
            pool = self.transactions_in_period(start, end)
        else:
            pool = self.transactions
        return sum(t.amount for t in pool if t.type == type_ and t.is_completed)

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _build_payload(
        self, account_id, type_, amount, date, category_id, description, status
    ) -> dict:
        if type_ not in TRANSACTION_TYPES:
            raise ValueError(f"Invalid type: {type_}")
        if status not in TRANSACTION_STATUSES:
            raise ValueError(f"Invalid status: {status}")
        if amount is None or amount <= 0:
            raise ValueError("Amount must be positive.")
        if not account_id:
            raise ValueError("Please select an account.")
        when = parse_datetime(date)
        if when is None:
            raise ValueError("Invalid date.")
        category = self._catalog.get_by_id(category_id)
        if category is None or category.type != type_:
            raise ValueError(f"Invalid {type_} category: {category_id!r}")
        return {
            "accountId": account_id,
            "type": type_,
            "amount": float(amount),
            "date": to_iso(when if when.time() != time.min else when.date()),
            "categoryId": category.id,
            "category": category.to_payload(),
            "description": description.strip(),
            "status": status,
        }
