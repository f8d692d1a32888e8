import customtkinter as ctk

from services.budget_store import BudgetStore
from services.category_catalog import CategoryCatalog
from ui.components.budget_form import BudgetForm
from utils.constants import STATUS_COLORS, STATUS_LABELS
from utils.currency import format_currency
from utils.date_helpers import current_year_month, friendly_month, next_month, prev_month


class BudgetsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        budget_store: BudgetStore,
        catalog: CategoryCatalog,
        notify_refresh,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._store = budget_store
        self._catalog = catalog
        self._notify_refresh = notify_refresh
        self._period = current_year_month()
        self._month_var = ctk.StringVar(value=friendly_month(*self._period))
        self._inactive_var = ctk.BooleanVar(value=False)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_toolbar()
        self._build_totals()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkButton(bar, text="◀", width=28, command=self._prev_month).pack(side="left", padx=(8, 0), pady=6)
        ctk.CTkLabel(
            bar, textvariable=self._month_var, width=150, anchor="center",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=4)
        ctk.CTkButton(bar, text="▶", width=28, command=self._next_month).pack(side="left", padx=(0, 12))

        ctk.CTkButton(bar, text="+ Add Budget", command=self._open_add).pack(side="left", padx=4)
        ctk.CTkCheckBox(
            bar, text="Show inactive", variable=self._inactive_var, command=self._load,
        ).pack(side="right", padx=8)

    def _prev_month(self):
        self._period = prev_month(*self._period)
        self._load()

    def _next_month(self):
        self._period = next_month(*self._period)
        self._load()

    def _build_totals(self):
        self._totals_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._totals_var, anchor="w", text_color="gray60",
        ).grid(row=1, column=0, sticky="ew", padx=16, pady=(6, 0))

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        year, month = self._period
        self._month_var.set(friendly_month(year, month))
        budgeted = self._store.total_budgeted(year, month)
        spent = self._store.total_spent(year, month)
        self._totals_var.set(
            f"Budgeted: {format_currency(budgeted)}  |  Spent: {format_currency(spent)}"
            f"  |  Remaining: {format_currency(budgeted - spent)}"
        )

        budgets = self._store.budgets_for_month(year, month, active_only=not self._inactive_var.get())
        if not budgets:
            ctk.CTkLabel(
                self._scroll,
                text="No budgets set for this month. Click '+ Add Budget' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        for idx, b in enumerate(budgets):
            self._add_budget_card(idx, self._store.with_status(b))

    def _add_budget_card(self, idx, b):
        card = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=8)
        card.grid(row=idx, column=0, sticky="ew", padx=4, pady=4)
        card.grid_columnconfigure(0, weight=1)

        hdr = ctk.CTkFrame(card, fg_color="transparent")
        hdr.grid(row=0, column=0, sticky="ew", padx=12, pady=(10, 4))
        hdr.grid_columnconfigure(0, weight=1)

        category = self._catalog.get_by_id(b.category_id)
        title = f"{category.icon} {b.name}" if category else b.name
        if not b.is_active:
            title += " (inactive)"
        ctk.CTkLabel(
            hdr, text=title, font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).grid(row=0, column=0, sticky="w")

        color = STATUS_COLORS[b.status]
        ctk.CTkLabel(
            hdr, text=f"{STATUS_LABELS[b.status]} · {b.percentage:.1f}%", text_color=color,
        ).grid(row=0, column=1, padx=(8, 0))

        ctk.CTkButton(
            hdr, text="Edit", width=50, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda budget=b: self._open_edit(budget),
        ).grid(row=0, column=2, padx=(8, 0))

        details = (
            f"Spent: {format_currency(b.spent)}  /  Limit: {format_currency(b.amount)}"
            f"  |  Remaining: {format_currency(b.remaining)}"
        )
        if category:
            details = f"{category.name}  |  {details}"
        ctk.CTkLabel(card, text=details, text_color="gray60", anchor="w").grid(
            row=1, column=0, padx=12, sticky="ew"
        )
        if b.description:
            ctk.CTkLabel(
                card, text=b.description, anchor="w", wraplength=700, justify="left",
            ).grid(row=2, column=0, padx=12, sticky="ew")

        bar = ctk.CTkProgressBar(card, progress_color=color)
        bar.grid(row=3, column=0, padx=12, pady=(4, 10), sticky="ew")
        bar.set(b.percentage / 100)

    def _open_add(self):
        form = BudgetForm(self.winfo_toplevel(), self._store, self._catalog, *self._period)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("budget")

    def _open_edit(self, budget):
        form = BudgetForm(
            self.winfo_toplevel(), self._store, self._catalog, *self._period, budget=budget,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("budget")
