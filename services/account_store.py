import logging

from api.account_api import AccountAPI
from api.client import ApiError
from models.account import Account, ACCOUNT_TYPES
from models.user import User
from services.store_state import StoreState

logger = logging.getLogger(__name__)


class AccountStore(StoreState):
    def __init__(self, account_api: AccountAPI):
        super().__init__()
        self._api = account_api
        self.accounts: list[Account] = []

    # ── Loading ──────────────────────────────────────────────────────────────

    def load(self) -> bool:
        """Reload from the server. Failures are recorded in ``error``, not raised."""
        try:
            self.accounts = self._remote("Loading accounts", self._api.get_all)
        except ApiError:
            return False
        logger.debug("Loaded %d accounts", len(self.accounts))
        return True

    def reset(self):
        self.accounts = []
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
        name: str,
        type_: str = "checking",
        balance: float = 0.0,
        bank: str = "",
        color: str = "#3498db",
    ) -> Account:
        payload = self._build_payload(name, type_, balance, bank, color, True)
        account = self._remote("Creating account", self._api.create, payload)
        self.accounts = self.accounts + [account]
        return account

    def update(
        self,
        account_id: str,
        name: str,
        type_: str = "checking",
        balance: float = 0.0,
        bank: str = "",
        color: str = "#3498db",
        is_active: bool = True,
    ) -> Account:
        payload = self._build_payload(name, type_, balance, bank, color, is_active)
        account = self._remote("Updating account", self._api.update, account_id, payload)
        self.accounts = [account if a.id == account.id else a for a in self.accounts]
        return account

    def delete(self, account_id: str):
        self._remote("Deleting account", self._api.delete, account_id)
        self.accounts = [a for a in self.accounts if a.id != account_id]

    # ── Queries ──────────────────────────────────────────────────────────────

    def get_by_id(self, account_id: str) -> Account | None:
        return next((a for a in self.accounts if a.id == account_id), None)

    def get_by_type(self, type_: str) -> list[Account]:
        return [a for a in self.accounts if a.type == type_ and a.is_active]

    def get_active(self) -> list[Account]:
        return [a for a in self.accounts if a.is_active]

    def total_balance(self) -> float:
        """Sum of balances over active accounts, credit cards excluded."""
        return sum(
            a.balance for a in self.accounts
            if a.is_active and not a.is_debt_account
        )

    def total_debt(self) -> float:
        """What is owed on active credit cards. Positive card balances count as zero."""
        return abs(sum(
            a.balance for a in self.accounts
            if a.is_active and a.is_debt_account and a.balance < 0
        ))

    # ── Helpers ──────────────────────────────────────────────────────────────

    @staticmethod
    def _build_payload(name, type_, balance, bank, color, is_active) -> dict:
        name = name.strip()
        if not name:
            raise ValueError("Account name cannot be empty.")
        if type_ not in ACCOUNT_TYPES:
            raise ValueError(
                f"Invalid account type '{type_}'. "
                f"Must be one of: {', '.join(ACCOUNT_TYPES)}."
            )
        return {
            "name": name,
            "type": type_,
            "balance": float(balance),
            "bank": bank.strip(),
            "color": color,
            "isActive": is_active,
        }
