import customtkinter as ctk

from api.client import ApiError
from models.budget import Budget
from services.budget_store import BudgetStore, classify, spent_percentage
from services.category_catalog import CategoryCatalog
from ui.components.background import run_in_background
from ui.components.confirm_dialog import ConfirmDialog, center_on_master
from utils.constants import BUDGET_DESCRIPTION_MAX, MONTH_NAMES, STATUS_COLORS, STATUS_LABELS
from utils.currency import format_currency
from utils.date_helpers import current_year_month


class BudgetForm(ctk.CTkToplevel):
    """Add or edit a monthly budget for one expense category."""

    def __init__(
        self,
        master,
        budget_store: BudgetStore,
        catalog: CategoryCatalog,
        year: int,
        month: int,
        budget: Budget | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._store = budget_store
        self._budget = budget
        self.saved = False

        self.title("Edit Budget" if budget else "New Budget")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._categories = catalog.get_expense()
        cat_labels = [self._label(c) for c in self._categories]
        this_year, _ = current_year_month()
        years = [str(y) for y in range(min(year, this_year), this_year + 3)]

        r = 0
        ctk.CTkLabel(self, text="Name:").grid(
            row=r, column=0, padx=(16, 8), pady=(16, 4), sticky="e"
        )
        self._name_var = ctk.StringVar(value=budget.name if budget else "")
        ctk.CTkEntry(self, textvariable=self._name_var, width=240).grid(
            row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew"
        )
        r += 1

        ctk.CTkLabel(self, text="Category:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        current = catalog.get_by_id(budget.category_id) if budget else None
        self._cat_var = ctk.StringVar(value=self._label(current) if current else "")
        ctk.CTkComboBox(
            self, values=cat_labels, variable=self._cat_var, width=240,
            state="readonly", command=lambda _v: self._update_preview(),
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        ctk.CTkLabel(self, text="Amount:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._amount_var = ctk.StringVar(value=f"{budget.amount:.2f}" if budget else "")
        self._amount_var.trace_add("write", lambda *_: self._update_preview())
        ctk.CTkEntry(self, textvariable=self._amount_var, width=240).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        ctk.CTkLabel(self, text="Period:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        period = ctk.CTkFrame(self, fg_color="transparent")
        period.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        self._month_var = ctk.StringVar(value=MONTH_NAMES[(budget.month if budget else month) - 1])
        ctk.CTkComboBox(
            period, values=MONTH_NAMES, variable=self._month_var, width=130,
            state="readonly", command=lambda _v: self._update_preview(),
        ).pack(side="left")
        self._year_var = ctk.StringVar(value=str(budget.year if budget else year))
        ctk.CTkComboBox(
            period, values=years, variable=self._year_var, width=90,
            state="readonly", command=lambda _v: self._update_preview(),
        ).pack(side="left", padx=(8, 0))
        r += 1

        ctk.CTkLabel(self, text="Description:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="ne"
        )
        self._desc_box = ctk.CTkTextbox(self, width=240, height=60)
        self._desc_box.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        if budget and budget.description:
            self._desc_box.insert("1.0", budget.description)
        r += 1

        self._active_var = ctk.BooleanVar(value=budget.is_active if budget else True)
        ctk.CTkCheckBox(self, text="Active", variable=self._active_var).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="w"
        )
        r += 1

        # Live spend for the chosen category/month
        self._preview_var = ctk.StringVar()
        self._preview = ctk.CTkLabel(self, textvariable=self._preview_var, anchor="w")
        self._preview.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 0), sticky="ew")
        r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=320, anchor="w"
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
        if budget:
            self._delete_btn = ctk.CTkButton(
                btn_frame, text="Delete", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete,
            )
            self._delete_btn.pack(side="left", padx=8)
        self._save_btn = ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save)
        self._save_btn.pack(side="right")

        self._update_preview()
        self.transient(master)
        self.grab_set()
        center_on_master(self)

    # ── Actions ──────────────────────────────────────────────────────────────

    def _on_save(self):
        category = self._selected_category()
        if category is None:
            return
        try:
            amount = float(self._amount_var.get().replace(",", "."))
        except ValueError:
            self._error_var.set("Invalid amount.")
            return
        description = self._desc_box.get("1.0", "end").strip()
        if len(description) > BUDGET_DESCRIPTION_MAX:
            self._error_var.set(f"Description must have at most {BUDGET_DESCRIPTION_MAX} characters.")
            return

        args = (
            self._name_var.get(), category.id, amount,
            int(self._year_var.get()), MONTH_NAMES.index(self._month_var.get()) + 1,
            description, self._active_var.get(),
        )
        if self._budget:
            work = lambda: self._store.update(self._budget.id, *args)
        else:
            work = lambda: self._store.create(*args)
        self._set_busy(True)
        run_in_background(self, work, on_done=self._on_saved, on_error=self._on_failed)

    def _on_delete(self):
        dlg = ConfirmDialog(
            self, "Delete Budget",
            f"Delete the budget '{self._budget.name}'?",
        )
        if not dlg.result:
            return
        self._set_busy(True)
        run_in_background(
            self, lambda: self._store.delete(self._budget.id),
            on_done=self._on_saved, on_error=self._on_failed,
        )

    def _on_saved(self, _result):
        self.saved = True
        self.destroy()

    def _on_failed(self, exc: Exception):
        self._set_busy(False)
        if isinstance(exc, (ApiError, ValueError)):
            self._error_var.set(str(exc))
        else:
            raise exc

    # ── Helpers ──────────────────────────────────────────────────────────────

    @staticmethod
    def _label(category) -> str:
        return f"{category.icon} {category.name}".strip()

    def _selected_category(self):
        label = self._cat_var.get()
        return next((c for c in self._categories if self._label(c) == label), None)

    def _set_busy(self, busy: bool):
        self._save_btn.configure(state="disabled" if busy else "normal",
                                 text="Saving…" if busy else "Save")
        if self._budget:
            self._delete_btn.configure(state="disabled" if busy else "normal")
        if busy:
            self._error_var.set("")

    def _update_preview(self):
        category = self._selected_category()
        try:
            amount = float(self._amount_var.get().replace(",", "."))
        except ValueError:
            amount = None
        if category is None or not amount or amount <= 0:
            self._preview_var.set("")
            return
        year = int(self._year_var.get())
        month = MONTH_NAMES.index(self._month_var.get()) + 1
        spent = self._store.category_spent(category.id, year, month)
        status = classify(spent, amount)
        self._preview_var.set(
            f"Spent so far: {format_currency(spent)} of {format_currency(amount)}"
            f" ({min(spent_percentage(spent, amount), 100):.0f}%) · {STATUS_LABELS[status]}"
        )
        self._preview.configure(text_color=STATUS_COLORS[status])
