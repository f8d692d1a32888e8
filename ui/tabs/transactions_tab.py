import customtkinter as ctk

from models.transaction import TRANSACTION_STATUSES, Transaction
from services.account_store import AccountStore
from services.category_catalog import CategoryCatalog
from services.transaction_store import TransactionStore
from ui.components.background import run_in_background
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.transaction_form import TransactionForm
from utils.currency import format_currency, format_signed
from utils.date_helpers import (
    current_year_month, format_display_date, friendly_month, month_window, next_month, prev_month,
)

_MAX_RENDERED_ROWS = 100
_ALL_ACCOUNTS = "All Accounts"
_STATUS_COLORS = {"completed": "gray60", "pending": "#FF9800", "cancelled": "gray45"}


class TransactionsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        tx_store: TransactionStore,
        account_store: AccountStore,
        catalog: CategoryCatalog,
        notify_refresh,   # callable(scope)
        report_error,     # callable(exc)
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._store = tx_store
        self._accounts = account_store
        self._catalog = catalog
        self._notify_refresh = notify_refresh
        self._report_error = report_error
        self._date_format = date_format

        self._period = current_year_month()
        self._month_var = ctk.StringVar(value=friendly_month(*self._period))
        self._type_var = ctk.StringVar(value="all")
        self._status_var = ctk.StringVar(value="all")
        self._account_var = ctk.StringVar(value=_ALL_ACCOUNTS)
        self._search_var = ctk.StringVar()
        self._search_var.trace_add("write", lambda *_: self._load())

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)

        self._build_filter_bar()
        self._build_summary()
        self._build_header()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    # ── Filter bar ──────────────────────────────────────────────────────────
    def _build_filter_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkButton(bar, text="◀", width=28, command=self._prev_month).pack(side="left", padx=(8, 0), pady=6)
        ctk.CTkLabel(bar, textvariable=self._month_var, width=120, anchor="center").pack(side="left", padx=4)
        ctk.CTkButton(bar, text="▶", width=28, command=self._next_month).pack(side="left", padx=(0, 8))

        ctk.CTkSegmentedButton(
            bar, values=["all", "income", "expense"], variable=self._type_var,
            command=lambda _: self._load(),
        ).pack(side="left", padx=4)
        ctk.CTkSegmentedButton(
            bar, values=["all", *TRANSACTION_STATUSES], variable=self._status_var,
            command=lambda _: self._load(),
        ).pack(side="left", padx=4)

        self._account_combo = ctk.CTkComboBox(
            bar, values=[_ALL_ACCOUNTS], variable=self._account_var, width=150,
            state="readonly", command=lambda _: self._load(),
        )
        self._account_combo.pack(side="left", padx=4)

        ctk.CTkEntry(
            bar, textvariable=self._search_var, placeholder_text="Search…", width=140,
        ).pack(side="left", padx=4)

        ctk.CTkButton(
            bar, text="+ Expense", width=88, command=lambda: self._open_add_form("expense"),
        ).pack(side="right", padx=(2, 8))
        ctk.CTkButton(
            bar, text="+ Income", width=88, command=lambda: self._open_add_form("income"),
        ).pack(side="right", padx=2)

    def _prev_month(self):
        self._period = prev_month(*self._period)
        self._load()

    def _next_month(self):
        self._period = next_month(*self._period)
        self._load()

    def _build_summary(self):
        self._summary_var = ctk.StringVar()
        ctk.CTkLabel(self, textvariable=self._summary_var, anchor="w", text_color="gray60").grid(
            row=1, column=0, sticky="ew", padx=16, pady=(6, 0)
        )

    # ── Column headers ───────────────────────────────────────────────────────
    def _build_header(self):
        hdr = ctk.CTkFrame(self, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=2, column=0, sticky="ew", padx=8, pady=(4, 0))
        cols = [("Date", 85), ("Category", 150), ("Description", 200),
                ("Account", 120), ("Status", 80), ("Amount", 110), ("Actions", 100)]
        for i, (label, width) in enumerate(cols):
            ctk.CTkLabel(
                hdr, text=label, width=width, anchor="w", font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4, sticky="w")

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=3, column=0, sticky="nsew", padx=8, pady=(0, 8))
        self._scroll.grid_columnconfigure(0, weight=1)

    # ── Rows ────────────────────────────────────────────────────────────────
    def _filtered(self) -> list[Transaction]:
        start, end = month_window(*self._period)
        rows = self._store.transactions_in_period(start, end)

        type_f = self._type_var.get()
        if type_f != "all":
            rows = [t for t in rows if t.type == type_f]
        status_f = self._status_var.get()
        if status_f != "all":
            rows = [t for t in rows if t.status == status_f]
        account = next((a for a in self._accounts.accounts if a.name == self._account_var.get()), None)
        if account:
            rows = [t for t in rows if t.account_id == account.id]
        search = self._search_var.get().strip().lower()
        if search:
            rows = [
                t for t in rows
                if search in t.description.lower() or search in t.category.name.lower()
            ]
        return sorted(rows, key=lambda t: t.date, reverse=True)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        year, month = self._period
        self._month_var.set(friendly_month(year, month))
        names = [_ALL_ACCOUNTS] + [a.name for a in self._accounts.accounts]
        self._account_combo.configure(values=names)
        if self._account_var.get() not in names:
            self._account_var.set(_ALL_ACCOUNTS)

        start, end = month_window(year, month)
        income = self._store.total_income(start, end)
        expenses = self._store.total_expenses(start, end)
        self._summary_var.set(
            f"Income: {format_currency(income)}  |  Expenses: {format_currency(expenses)}"
            f"  |  Net: {format_signed(income - expenses)}  (completed only)"
        )

        rows = self._filtered()
        if not rows:
            ctk.CTkLabel(
                self._scroll, text="No transactions for this period.", text_color="gray60",
            ).grid(row=0, column=0, pady=20)
            return

        for idx, tx in enumerate(rows[:_MAX_RENDERED_ROWS]):
            self._add_row(idx, tx)
        if len(rows) > _MAX_RENDERED_ROWS:
            ctk.CTkLabel(
                self._scroll,
                text=f"Showing {_MAX_RENDERED_ROWS} of {len(rows)} transactions. Use filters or search to narrow results.",
                text_color="gray60",
                font=ctk.CTkFont(size=11),
            ).grid(row=_MAX_RENDERED_ROWS, column=0, pady=8)

    def _add_row(self, idx: int, tx: Transaction):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        ctk.CTkLabel(
            row, text=format_display_date(tx.date, self._date_format), width=85, anchor="w"
        ).grid(row=0, column=0, padx=4, pady=4)
        ctk.CTkLabel(
            row, text=f"{tx.category.icon} {tx.category.name}".strip(), width=150, anchor="w"
        ).grid(row=0, column=1, padx=4)
        ctk.CTkLabel(row, text=tx.description or "—", width=200, anchor="w").grid(
            row=0, column=2, padx=4
        )
        account = self._accounts.get_by_id(tx.account_id)
        ctk.CTkLabel(row, text=account.name if account else "—", width=120, anchor="w").grid(
            row=0, column=3, padx=4
        )
        ctk.CTkLabel(
            row, text=tx.status.title(), width=80, anchor="w",
            text_color=_STATUS_COLORS.get(tx.status, "gray60"),
        ).grid(row=0, column=4, padx=4)

        if tx.type == "income":
            amt_color, amt_text = "#4CAF50", f"+{format_currency(tx.amount)}"
        else:
            amt_color, amt_text = "#F44336", f"-{format_currency(tx.amount)}"
        ctk.CTkLabel(
            row, text=amt_text, width=110, anchor="e", text_color=amt_color
        ).grid(row=0, column=5, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=6, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=44, height=24,
            command=lambda t=tx: self._open_edit_form(t),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Del", width=38, height=24,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda t=tx: self._delete_tx(t),
        ).pack(side="left")

    # ── Actions ─────────────────────────────────────────────────────────────
    def _open_add_form(self, type_: str):
        form = TransactionForm(
            self.winfo_toplevel(), self._store, self._accounts, self._catalog,
            initial_type=type_, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _open_edit_form(self, tx: Transaction):
        form = TransactionForm(
            self.winfo_toplevel(), self._store, self._accounts, self._catalog,
            transaction=tx, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _delete_tx(self, tx: Transaction):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            "Delete Transaction",
            f"Delete this {tx.type} of {format_currency(tx.amount)}?",
        )
        if dlg.result:
            run_in_background(
                self, lambda: self._store.delete(tx.id),
                on_done=lambda _r: self._notify_refresh("transaction"),
                on_error=self._report_error,
            )
