import customtkinter as ctk

from models.account import ACCOUNT_TYPE_LABELS, Account
from services.account_store import AccountStore
from services.transaction_store import TransactionStore
from ui.components.account_form import AccountForm
from utils.currency import format_currency


class AccountsTab(ctk.CTkFrame):
    """Account list with balance and debt totals."""

    def __init__(self, master, account_store: AccountStore, tx_store: TransactionStore,
                 notify_refresh, **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._store = account_store
        self._txs = tx_store
        self._notify_refresh = notify_refresh

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkButton(bar, text="+ New Account", width=110, command=self._open_new).pack(
            side="left", padx=8, pady=6
        )
        self._totals_var = ctk.StringVar()
        ctk.CTkLabel(bar, textvariable=self._totals_var, text_color="gray60").pack(
            side="right", padx=12
        )

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        self._totals_var.set(
            f"Total balance: {format_currency(self._store.total_balance())}"
            f"  |  Debt: {format_currency(self._store.total_debt())}"
        )
        accounts = sorted(self._store.accounts, key=lambda a: (not a.is_active, a.name.lower()))
        if not accounts:
            ctk.CTkLabel(
                self._scroll,
                text="No accounts yet. Click '+ New Account' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return
        for idx, account in enumerate(accounts):
            self._add_account_row(idx, account)

    def _add_account_row(self, idx: int, account: Account):
        row = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=8)
        row.grid(row=idx, column=0, sticky="ew", padx=4, pady=4)
        row.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(row, text="", width=8, fg_color=account.color, corner_radius=4).grid(
            row=0, column=0, rowspan=2, padx=(10, 8), pady=10, sticky="ns"
        )
        name = account.name if account.is_active else f"{account.name} (inactive)"
        ctk.CTkLabel(
            row, text=name, font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).grid(row=0, column=1, sticky="w", pady=(8, 0))

        details = ACCOUNT_TYPE_LABELS.get(account.type, account.type)
        if account.bank:
            details += f" · {account.bank}"
        count = len(self._txs.transactions_by_account(account.id))
        details += f" · {count} transaction{'s' if count != 1 else ''}"
        ctk.CTkLabel(row, text=details, text_color="gray60", anchor="w").grid(
            row=1, column=1, sticky="w", pady=(0, 8)
        )

        ctk.CTkLabel(
            row, text=format_currency(account.balance),
            font=ctk.CTkFont(size=15, weight="bold"),
            text_color="#4CAF50" if account.balance >= 0 else "#F44336",
        ).grid(row=0, column=2, rowspan=2, padx=12)
        ctk.CTkButton(
            row, text="Edit", width=50, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda a=account: self._open_edit(a),
        ).grid(row=0, column=3, rowspan=2, padx=(0, 10))

    def _open_new(self):
        form = AccountForm(self.winfo_toplevel(), self._store)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("account")

    def _open_edit(self, account: Account):
        form = AccountForm(self.winfo_toplevel(), self._store, account=account)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("account")
