import customtkinter as ctk

from api.client import ApiError
from models.account import ACCOUNT_TYPE_LABELS, DEBT_ACCOUNT_TYPES, Account
from services.account_store import AccountStore
from ui.components.background import run_in_background
from ui.components.confirm_dialog import ConfirmDialog, center_on_master

_ACCOUNT_COLORS = {
    "Blue": "#3498db",
    "Green": "#2ecc71",
    "Purple": "#9b59b6",
    "Orange": "#e67e22",
    "Red": "#e74c3c",
    "Gray": "#95a5a6",
}


class AccountForm(ctk.CTkToplevel):
    """Add or edit an account. Sets self.saved = True on success."""

    _TYPE_OPTIONS = list(ACCOUNT_TYPE_LABELS.values())
    _LABEL_TO_KEY = {v: k for k, v in ACCOUNT_TYPE_LABELS.items()}

    def __init__(self, master, account_store: AccountStore,
                 account: Account | None = None, **kwargs):
        super().__init__(master, **kwargs)
        self._store = account_store
        self._account = account
        self.saved = False

        self.title("Edit Account" if account else "New Account")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(self, text="Name:").grid(
            row=0, column=0, padx=(16, 8), pady=(16, 4), sticky="e"
        )
        self._name_var = ctk.StringVar(value=account.name if account else "")
        self._name_entry = ctk.CTkEntry(self, textvariable=self._name_var, width=240)
        self._name_entry.grid(row=0, column=1, padx=(0, 16), pady=(16, 4), sticky="ew")

        ctk.CTkLabel(self, text="Account Type:").grid(
            row=1, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._type_var = ctk.StringVar(
            value=ACCOUNT_TYPE_LABELS[account.type if account else "checking"]
        )
        ctk.CTkComboBox(
            self, values=self._TYPE_OPTIONS, variable=self._type_var,
            width=240, state="readonly", command=self._on_type_change,
        ).grid(row=1, column=1, padx=(0, 16), pady=4, sticky="ew")

        ctk.CTkLabel(self, text="Balance:").grid(
            row=2, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._balance_var = ctk.StringVar(value=f"{account.balance:.2f}" if account else "0.00")
        ctk.CTkEntry(self, textvariable=self._balance_var, width=240).grid(
            row=2, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        self._debt_hint = ctk.CTkLabel(
            self, text="Enter the amount owed as a negative balance",
            text_color="gray60", font=ctk.CTkFont(size=11)
        )
        self._debt_hint.grid(row=3, column=1, padx=(0, 16), pady=(0, 4), sticky="w")

        ctk.CTkLabel(self, text="Bank:").grid(
            row=4, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._bank_var = ctk.StringVar(value=account.bank if account else "")
        ctk.CTkEntry(self, textvariable=self._bank_var, width=240).grid(
            row=4, column=1, padx=(0, 16), pady=4, sticky="ew"
        )

        ctk.CTkLabel(self, text="Color:").grid(
            row=5, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        current_color = next(
            (name for name, hex_ in _ACCOUNT_COLORS.items() if account and hex_ == account.color),
            "Blue",
        )
        self._color_var = ctk.StringVar(value=current_color)
        ctk.CTkComboBox(
            self, values=list(_ACCOUNT_COLORS), variable=self._color_var,
            width=240, state="readonly",
        ).grid(row=5, column=1, padx=(0, 16), pady=4, sticky="ew")

        self._active_var = ctk.BooleanVar(value=account.is_active if account else True)
        if account:
            ctk.CTkCheckBox(self, text="Active", variable=self._active_var).grid(
                row=6, column=1, padx=(0, 16), pady=4, sticky="w"
            )

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var, text_color="#F44336",
            wraplength=280, anchor="w"
        ).grid(row=7, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=8, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        if account:
            ctk.CTkButton(
                btn_frame, text="Delete Account", width=110,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete_click,
            ).pack(side="left", padx=8)
        self._save_btn = ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save)
        self._save_btn.pack(side="right")

        self.transient(master)
        self.grab_set()
        self._on_type_change()
        center_on_master(self)
        self._name_entry.focus_set()

    def _on_type_change(self, _value=None):
        if self._LABEL_TO_KEY.get(self._type_var.get()) in DEBT_ACCOUNT_TYPES:
            self._debt_hint.grid()
        else:
            self._debt_hint.grid_remove()

    def _on_save(self):
        try:
            balance = float(self._balance_var.get().replace(",", "."))
        except ValueError:
            self._error_var.set("Balance must be a number.")
            return
        fields = dict(
            name=self._name_var.get(),
            type_=self._LABEL_TO_KEY.get(self._type_var.get(), "checking"),
            balance=balance,
            bank=self._bank_var.get().strip(),
            color=_ACCOUNT_COLORS[self._color_var.get()],
        )
        if self._account:
            work = lambda: self._store.update(
                self._account.id, is_active=self._active_var.get(), **fields
            )
        else:
            work = lambda: self._store.create(**fields)
        self._run(work)

    def _on_delete_click(self):
        dlg = ConfirmDialog(
            self, "Delete Account",
            f"Delete '{self._account.name}'? Its transactions stay in the history.",
        )
        if dlg.result:
            self._run(lambda: self._store.delete(self._account.id))

    def _run(self, work):
        self._save_btn.configure(state="disabled", text="Saving…")
        self._error_var.set("")
        run_in_background(self, work, on_done=self._on_saved, on_error=self._on_failed)

    def _on_saved(self, _result):
        self.saved = True
        self.destroy()

    def _on_failed(self, exc: Exception):
        self._save_btn.configure(state="normal", text="Save")
        if isinstance(exc, (ApiError, ValueError)):
            self._error_var.set(str(exc))
        else:
            raise exc
