import customtkinter as ctk

from api.client import ApiError
from models.transaction import TRANSACTION_STATUSES, Transaction
from services.account_store import AccountStore
from services.category_catalog import CategoryCatalog
from services.transaction_store import TransactionStore
from ui.components.background import run_in_background
from ui.components.confirm_dialog import center_on_master
from ui.components.date_picker import DatePickerWidget
from utils.date_helpers import today


class TransactionForm(ctk.CTkToplevel):
    """Add or edit an income or expense transaction."""

    _last_date = today()  # reset to today on each app launch

    def __init__(
        self,
        master,
        tx_store: TransactionStore,
        account_store: AccountStore,
        catalog: CategoryCatalog,
        initial_type: str = "expense",
        transaction: Transaction | None = None,
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._store = tx_store
        self._catalog = catalog
        self._transaction = transaction
        self.saved = False

        if transaction:
            initial_type = transaction.type
        self.title(f"{'Edit' if transaction else 'Add'} {initial_type.title()}")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._accounts = account_store.get_active()
        if transaction and not any(a.id == transaction.account_id for a in self._accounts):
            current = account_store.get_by_id(transaction.account_id)
            if current:
                self._accounts.append(current)

        r = 0
        self._label("Type:", r)
        self._type_var = ctk.StringVar(value=initial_type)
        type_frame = ctk.CTkFrame(self, fg_color="transparent")
        type_frame.grid(row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="w")
        for t in ("income", "expense"):
            ctk.CTkRadioButton(
                type_frame, text=t.title(),
                variable=self._type_var, value=t,
                command=self._on_type_change,
            ).pack(side="left", padx=4)
        r += 1

        self._label("Description:", r)
        self._desc_var = ctk.StringVar(value=transaction.description if transaction else "")
        ctk.CTkEntry(self, textvariable=self._desc_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{transaction.amount:.2f}" if transaction else "")
        ctk.CTkEntry(self, textvariable=self._amount_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._label("Date:", r)
        self._date_picker = DatePickerWidget(
            self,
            initial=transaction.date if transaction else TransactionForm._last_date,
            date_format=date_format,
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._label("Category:", r)
        self._cat_var = ctk.StringVar()
        self._cat_combo = ctk.CTkComboBox(
            self, values=[], variable=self._cat_var, width=220, state="readonly"
        )
        self._cat_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        self._fill_categories(transaction.category_id if transaction else None)
        r += 1

        self._label("Account:", r)
        account_names = [a.name for a in self._accounts]
        current_acct = next(
            (a.name for a in self._accounts if transaction and a.id == transaction.account_id),
            account_names[0] if account_names else "",
        )
        self._acct_var = ctk.StringVar(value=current_acct)
        ctk.CTkComboBox(
            self, values=account_names, variable=self._acct_var, width=220, state="readonly"
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._label("Status:", r)
        self._status_var = ctk.StringVar(
            value=(transaction.status if transaction else "completed").title()
        )
        ctk.CTkSegmentedButton(
            self, values=[s.title() for s in TRANSACTION_STATUSES], variable=self._status_var,
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w"
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        self._save_btn = ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save)
        self._save_btn.pack(side="right")

        self.transient(master)
        self.grab_set()
        center_on_master(self)

    def _label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=(16, 4) if row == 0 else 4, sticky="e"
        )

    def _fill_categories(self, selected_id: str | None = None):
        self._cats = self._catalog.for_transaction_type(self._type_var.get())
        names = [c.name for c in self._cats]
        self._cat_combo.configure(values=names)
        selected = next((c.name for c in self._cats if c.id == selected_id), None)
        self._cat_var.set(selected or (names[0] if names else ""))

    def _on_type_change(self):
        self._fill_categories()

    def _on_save(self):
        try:
            amount = float(self._amount_var.get().replace(",", "."))
        except ValueError:
            self._error_var.set("Invalid amount.")
            return
        when = self._date_picker.get()
        if when is None:
            self._error_var.set("Invalid date.")
            return
        category = next((c for c in self._cats if c.name == self._cat_var.get()), None)
        account = next((a for a in self._accounts if a.name == self._acct_var.get()), None)

        args = (
            account.id if account else "",
            self._type_var.get(),
            amount,
            when,
            category.id if category else "",
            self._desc_var.get().strip(),
            self._status_var.get().lower(),
        )
        if self._transaction:
            work = lambda: self._store.update(self._transaction.id, *args)
        else:
            work = lambda: self._store.create(*args)

        self._save_btn.configure(state="disabled", text="Saving…")
        self._error_var.set("")
        TransactionForm._last_date = when
        run_in_background(self, work, on_done=self._on_saved, on_error=self._on_failed)

    def _on_saved(self, _tx):
        self.saved = True
        self.destroy()

    def _on_failed(self, exc: Exception):
        self._save_btn.configure(state="normal", text="Save")
        if isinstance(exc, (ApiError, ValueError)):
            self._error_var.set(str(exc))
        else:
            raise exc
