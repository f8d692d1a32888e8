import logging

from api.budget_api import BudgetAPI
from api.client import ApiError
from models.budget import BUDGET_STATUSES, Budget, BudgetWithStatus
from models.user import User
from services.category_catalog import CategoryCatalog
from services.store_state import StoreState
from services.transaction_store import TransactionStore
from utils.constants import (
    BUDGET_AMOUNT_MAX, BUDGET_DESCRIPTION_MAX, BUDGET_EXCEEDED_RATIO,
    BUDGET_NAME_MAX, BUDGET_NAME_MIN, BUDGET_WARNING_RATIO,
)
from utils.date_helpers import month_window, validate_month

logger = logging.getLogger(__name__)

ON_TRACK, WARNING, EXCEEDED = BUDGET_STATUSES


def classify(spent: float, amount: float) -> str:
    """Health of a budget given its spend and ceiling.

    exceeded: spent >= amount; warning: 0.8 * amount <= spent < amount.
    """
    if amount <= 0:
        return EXCEEDED if spent > 0 else ON_TRACK
    if spent >= BUDGET_EXCEEDED_RATIO * amount:
        return EXCEEDED
    if spent >= BUDGET_WARNING_RATIO * amount:
        return WARNING
    return ON_TRACK


def spent_percentage(spent: float, amount: float) -> float:
    """Raw (uncapped) share of the ceiling consumed, in percent."""
    if amount <= 0:
        return 100.0 if spent > 0 else 0.0
    return spent / amount * 100


class BudgetStore(StoreState):
    """Monthly category budgets and their derived spend and status.

    Nothing derived here is cached: every query re-reads the transaction
    store, so results always reflect its current collection.
    """

    def __init__(
        self,
        budget_api: BudgetAPI,
        tx_store: TransactionStore,
        catalog: CategoryCatalog,
    ):
        super().__init__()
        self._api = budget_api
        self._tx_store = tx_store
        self._catalog = catalog
        self.budgets: list[Budget] = []

    # ── Loading ──────────────────────────────────────────────────────────────

    def load(self) -> bool:
        try:
            self.budgets = self._remote("Loading budgets", self._api.get_all)
        except ApiError:
            return False
        logger.debug("Loaded %d budgets", len(self.budgets))
        return True

    def reset(self):
        self.budgets = []
        self.is_loading = False
        self.error = None

    def on_session_changed(self, user: User | None):
        if user is None:
            self.reset()
        else:
            self.load()

    # ── Derivation ───────────────────────────────────────────────────────────

    def category_spent(self, category_id: str, year: int, month: int) -> float:
        """Sum of expenses in the category during the calendar month.

        Transaction status is not consulted: pending and cancelled expenses
        count toward the budget just like completed ones.
        """
        start, end = month_window(year, month)
        return sum(
            t.amount for t in self._tx_store.transactions_by_category(category_id)
            if start <= t.date <= end and t.type == "expense"
        )

    def budget_status(self, budget: Budget) -> str:
        spent = self.category_spent(budget.category_id, budget.year, budget.month)
        return classify(spent, budget.amount)

    def with_status(self, budget: Budget) -> BudgetWithStatus:
        spent = self.category_spent(budget.category_id, budget.year, budget.month)
        return BudgetWithStatus.from_budget(
            budget,
            spent=spent,
            percentage=spent_percentage(spent, budget.amount),
            status=classify(spent, budget.amount),
        )

    def budgets_with_status(self) -> list[BudgetWithStatus]:
        return [self.with_status(b) for b in self.budgets]

    def budgets_for_month(self, year: int, month: int, active_only: bool = True) -> list[Budget]:
        return [
            b for b in self.budgets
            if b.year == year and b.month == month and (b.is_active or not active_only)
        ]

    def total_budgeted(self, year: int, month: int) -> float:
        return sum(b.amount for b in self.budgets_for_month(year, month))

    def total_spent(self, year: int, month: int) -> float:
        """Spend across the month's active budgets.

        Each budget is computed on its own, so two budgets on the same
        category both count that category's spend.
        """
        return sum(
            self.category_spent(b.category_id, b.year, b.month)
            for b in self.budgets_for_month(year, month)
        )

    # ── Mutations ────────────────────────────────────────────────────────────

    def create(
        self,
        name: str,
        category_id: str,
        amount: float,
        year: int,
        month: int,
        description: str = "",
        is_active: bool = True,
    ) -> Budget:
        payload = self._build_payload(name, category_id, amount, year, month, description, is_active)
        budget = self._remote("Creating budget", self._api.create, payload)
        self.budgets = self.budgets + [budget]
        return budget

    def update(
        self,
        budget_id: str,
        name: str,
        category_id: str,
        amount: float,
        year: int,
        month: int,
        description: str = "",
        is_active: bool = True,
    ) -> Budget:
        payload = self._build_payload(name, category_id, amount, year, month, description, is_active)
        budget = self._remote("Updating budget", self._api.update, budget_id, payload)
        self.budgets = [budget if b.id == budget.id else b for b in self.budgets]
        return budget

    def delete(self, budget_id: str):
        self._remote("Deleting budget", self._api.delete, budget_id)
        self.budgets = [b for b in self.budgets if b.id != budget_id]

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _build_payload(
        self, name, category_id, amount, year, month, description, is_active
    ) -> dict:
        name = name.strip()
        if len(name) < BUDGET_NAME_MIN:
            raise ValueError(f"Budget name must have at least {BUDGET_NAME_MIN} characters.")
        if len(name) > BUDGET_NAME_MAX:
            raise ValueError(f"Budget name must have at most {BUDGET_NAME_MAX} characters.")
        if not self._catalog.is_expense(category_id):
            raise ValueError("Please select an expense category.")
        category = self._catalog.get_by_id(category_id)
        if amount is None or amount <= 0:
            raise ValueError("Budget amount must be greater than zero.")
        if amount > BUDGET_AMOUNT_MAX:
            raise ValueError("Budget amount is too high.")
        validate_month(month)
        description = description.strip()
        if len(description) > BUDGET_DESCRIPTION_MAX:
            raise ValueError(
                f"Description must have at most {BUDGET_DESCRIPTION_MAX} characters."
            )
        return {
            "name": name,
            "categoryId": category.id,
            "category": category.to_payload(),
            "amount": float(amount),
            "year": int(year),
            "month": int(month),
            "description": description,
            "isActive": is_active,
        }
