import logging

import customtkinter as ctk

from api.client import ApiError
from services.account_store import AccountStore
from services.auth_store import AuthStore
from services.budget_store import BudgetStore
from services.category_catalog import CategoryCatalog
from services.transaction_store import TransactionStore
from ui.components.alert_banner import AlertBanner
from ui.components.background import run_in_background
from ui.components.login_dialog import LoginDialog
from ui.tabs.accounts_tab import AccountsTab
from ui.tabs.budgets_tab import BudgetsTab
from ui.tabs.dashboard_tab import DashboardTab
from ui.tabs.transactions_tab import TransactionsTab
from utils.app_config import set_appearance_mode
from utils.constants import APP_HEIGHT, APP_NAME, APP_WIDTH

logger = logging.getLogger(__name__)

_REFRESH_SCOPES: dict[str, set[str]] = {
    "transaction": {"dashboard", "transactions", "budgets", "accounts"},
    "budget":      {"dashboard", "budgets"},
    "account":     {"dashboard", "transactions", "accounts"},
    "full":        {"dashboard", "transactions", "budgets", "accounts"},
}

_APPEARANCE_MODES = ["System", "Light", "Dark"]


class AppWindow(ctk.CTk):
    def __init__(
        self,
        auth_store: AuthStore,
        account_store: AccountStore,
        tx_store: TransactionStore,
        budget_store: BudgetStore,
        catalog: CategoryCatalog,
        appearance_mode: str = "system",
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._auth = auth_store
        self._accounts = account_store
        self._txs = tx_store
        self._budgets = budget_store
        self._catalog = catalog
        self._date_format = date_format
        self._load_gen = 0

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_header(appearance_mode)
        self._build_banner_area()
        self._build_tabs()

        if self._auth.is_authenticated:
            self.after(100, self.reload_all)
        else:
            self.after(200, self._show_login)

    # ── Header ──────────────────────────────────────────────────────────────
    def _build_header(self, appearance_mode: str):
        bar = ctk.CTkFrame(self, fg_color=("gray85", "gray15"), corner_radius=0, height=44)
        bar.grid(row=0, column=0, sticky="ew")
        bar.grid_propagate(False)

        ctk.CTkLabel(
            bar, text=APP_NAME, font=ctk.CTkFont(size=16, weight="bold"),
        ).pack(side="left", padx=(12, 16), pady=8)

        self._refresh_btn = ctk.CTkButton(bar, text="Refresh", width=90, command=self.reload_all)
        self._refresh_btn.pack(side="left", padx=4)

        ctk.CTkButton(
            bar, text="Log out", width=80,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._logout,
        ).pack(side="right", padx=(4, 12))

        self._user_label = ctk.CTkLabel(bar, text="", text_color="gray60")
        self._user_label.pack(side="right", padx=8)

        self._appearance_var = ctk.StringVar(value=appearance_mode.title())
        ctk.CTkOptionMenu(
            bar, values=_APPEARANCE_MODES, variable=self._appearance_var,
            width=100, command=self._on_appearance_change,
        ).pack(side="right", padx=8)
        self._update_user_label()

    def _update_user_label(self):
        user = self._auth.user
        self._user_label.configure(text=(user.name or user.email) if user else "")

    def _on_appearance_change(self, value: str):
        ctk.set_appearance_mode(value.lower())
        try:
            set_appearance_mode(value.lower())
        except OSError as exc:
            self.show_banner(f"Could not save the appearance setting: {exc}", "warning")
        self.notify_tabs_refresh("full")

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=1, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Dashboard", "Transactions", "Budgets", "Accounts"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._dashboard_tab = DashboardTab(
            self._tabview.tab("Dashboard"),
            account_store=self._accounts,
            tx_store=self._txs,
            budget_store=self._budgets,
            catalog=self._catalog,
            date_format=self._date_format,
        )
        self._dashboard_tab.grid(row=0, column=0, sticky="nsew")

        self._transactions_tab = TransactionsTab(
            self._tabview.tab("Transactions"),
            tx_store=self._txs,
            account_store=self._accounts,
            catalog=self._catalog,
            notify_refresh=self.notify_tabs_refresh,
            report_error=self.report_error,
            date_format=self._date_format,
        )
        self._transactions_tab.grid(row=0, column=0, sticky="nsew")

        self._budgets_tab = BudgetsTab(
            self._tabview.tab("Budgets"),
            budget_store=self._budgets,
            catalog=self._catalog,
            notify_refresh=self.notify_tabs_refresh,
        )
        self._budgets_tab.grid(row=0, column=0, sticky="nsew")

        self._accounts_tab = AccountsTab(
            self._tabview.tab("Accounts"),
            account_store=self._accounts,
            tx_store=self._txs,
            notify_refresh=self.notify_tabs_refresh,
        )
        self._accounts_tab.grid(row=0, column=0, sticky="nsew")

    # ── Session ─────────────────────────────────────────────────────────────
    def _show_login(self):
        dialog = LoginDialog(self, self._auth)
        dialog.transient(self)
        dialog.grab_set()
        self.wait_window(dialog)
        if dialog.user is None:
            logger.info("Login cancelled, closing")
            self.destroy()
            return
        self._update_user_label()
        self.notify_tabs_refresh("full")
        self._show_store_errors()

    def _logout(self):
        try:
            self._auth.logout()
        except OSError as exc:
            self.show_banner(f"Could not clear the saved session: {exc}", "warning")
        self._clear_banners()
        self._update_user_label()
        self.notify_tabs_refresh("full")
        self._show_login()

    # ── Loading ─────────────────────────────────────────────────────────────
    def reload_all(self):
        """Reload every store off the Tk thread. Older reloads still in flight are ignored."""
        self._load_gen += 1
        gen = self._load_gen
        self._refresh_btn.configure(state="disabled", text="Loading…")

        def fetch():
            self._accounts.load()
            self._txs.load()
            self._budgets.load()

        run_in_background(self, fetch, on_done=lambda _r: self._on_reloaded(gen),
                          on_error=self.report_error)

    def _on_reloaded(self, gen: int):
        if gen != self._load_gen:
            return
        self._refresh_btn.configure(state="normal", text="Refresh")
        self.notify_tabs_refresh("full")
        self._show_store_errors()

    # ── Refresh ─────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        tabs = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        if "dashboard"    in tabs: self._dashboard_tab.refresh()
        if "transactions" in tabs: self._transactions_tab.refresh()
        if "budgets"      in tabs: self._budgets_tab.refresh()
        if "accounts"     in tabs: self._accounts_tab.refresh()

    # ── Banners ─────────────────────────────────────────────────────────────
    def report_error(self, exc: Exception):
        self._refresh_btn.configure(state="normal", text="Refresh")
        if isinstance(exc, (ApiError, ValueError)):
            self.show_banner(str(exc), "error")
        else:
            logger.error("Unexpected error", exc_info=exc)
            self.show_banner(f"Unexpected error: {exc}", "error")
        self.notify_tabs_refresh("full")

    def show_banner(self, message: str, severity: str = "info", on_dismiss=None):
        AlertBanner(self._banner_frame, message=message, severity=severity,
                    on_dismiss=on_dismiss).pack(fill="x", pady=2)

    def _clear_banners(self):
        for w in self._banner_frame.winfo_children():
            w.destroy()

    def _show_store_errors(self):
        self._clear_banners()
        for store in (self._accounts, self._txs, self._budgets):
            if store.error:
                self.show_banner(store.error, "error", on_dismiss=store.clear_error)
