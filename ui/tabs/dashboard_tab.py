import customtkinter as ctk
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure

from services.account_store import AccountStore
from services.budget_store import BudgetStore
from services.category_catalog import CategoryCatalog
from services.transaction_store import TransactionStore
from utils.constants import STATUS_COLORS
from utils.currency import format_currency
from utils.date_helpers import (
    current_year_month, format_display_date, friendly_month, month_window, next_month, prev_month,
)


class DashboardTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        account_store: AccountStore,
        tx_store: TransactionStore,
        budget_store: BudgetStore,
        catalog: CategoryCatalog,
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._accounts = account_store
        self._txs = tx_store
        self._budgets = budget_store
        self._catalog = catalog
        self._date_format = date_format
        self._period = current_year_month()
        self._month_var = ctk.StringVar(value=friendly_month(*self._period))

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_month_nav()
        self._build_summary_cards()
        self._build_bottom_section()
        self._load()

    def refresh(self):
        self._load()

    def _build_month_nav(self):
        nav = ctk.CTkFrame(self, fg_color="transparent")
        nav.grid(row=0, column=0, sticky="ew", padx=16, pady=(12, 0))
        ctk.CTkButton(nav, text="◀", width=28, command=self._prev_month).pack(side="left")
        ctk.CTkLabel(
            nav, textvariable=self._month_var,
            font=ctk.CTkFont(size=15, weight="bold"), width=150, anchor="center"
        ).pack(side="left", padx=8)
        ctk.CTkButton(nav, text="▶", width=28, command=self._next_month).pack(side="left")

    def _prev_month(self):
        self._period = prev_month(*self._period)
        self._load()

    def _next_month(self):
        self._period = next_month(*self._period)
        self._load()

    def _build_summary_cards(self):
        self._card_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._card_frame.grid(row=1, column=0, sticky="ew", padx=16, pady=12)
        self._card_frame.grid_columnconfigure((0, 1, 2, 3), weight=1)

    def _build_bottom_section(self):
        bottom = ctk.CTkFrame(self, fg_color="transparent")
        bottom.grid(row=2, column=0, sticky="nsew", padx=16, pady=(0, 12))
        bottom.grid_columnconfigure((0, 1), weight=1)
        bottom.grid_rowconfigure(0, weight=1)
        bottom.grid_rowconfigure(1, weight=1)

        self._recent_frame = ctk.CTkScrollableFrame(
            bottom, label_text="Transactions This Month", height=200
        )
        self._recent_frame.grid(row=0, column=0, sticky="nsew", padx=(0, 8), pady=(0, 8))

        self._budget_frame = ctk.CTkScrollableFrame(
            bottom, label_text="Budget Progress", height=200
        )
        self._budget_frame.grid(row=0, column=1, sticky="nsew", padx=(8, 0), pady=(0, 8))

        chart_outer = ctk.CTkFrame(bottom, fg_color=("gray90", "gray20"), corner_radius=8)
        chart_outer.grid(row=1, column=0, columnspan=2, sticky="nsew")
        ctk.CTkLabel(
            chart_outer, text="Budgeted vs Spent",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(pady=(10, 0))
        self._fig = Figure(figsize=(6, 2.6), dpi=80, tight_layout=True)
        self._ax = self._fig.add_subplot(111)
        self._canvas = FigureCanvasTkAgg(self._fig, master=chart_outer)
        self._canvas.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=(4, 10))

    def _load(self):
        year, month = self._period
        self._month_var.set(friendly_month(year, month))
        start, end = month_window(year, month)

        for w in self._card_frame.winfo_children():
            w.destroy()
        income = self._txs.total_income(start, end)
        expenses = self._txs.total_expenses(start, end)
        card_data = [
            ("Total Balance", format_currency(self._accounts.total_balance()), "#2196F3"),
            ("Debt", format_currency(self._accounts.total_debt()), "#F44336"),
            ("Income", format_currency(income), "#4CAF50"),
            ("Expenses", format_currency(expenses), "#FF9800"),
        ]
        for i, (label, text, color) in enumerate(card_data):
            self._make_card(self._card_frame, i, label, text, color)

        self._load_recent(start, end)
        budgets = [self._budgets.with_status(b) for b in self._budgets.budgets_for_month(year, month)]
        self._load_budget_progress(budgets)
        self._draw_chart(budgets)

    def _load_recent(self, start, end):
        for w in self._recent_frame.winfo_children():
            w.destroy()
        recent = sorted(self._txs.transactions_in_period(start, end),
                        key=lambda t: t.date, reverse=True)[:15]
        if not recent:
            ctk.CTkLabel(
                self._recent_frame, text="No transactions this month.", text_color="gray60",
            ).pack(pady=20)
        for idx, tx in enumerate(recent):
            bg = ("gray90", "gray20") if idx % 2 == 0 else ("gray86", "gray24")
            f = ctk.CTkFrame(self._recent_frame, fg_color=bg, corner_radius=4)
            f.pack(fill="x", pady=1)
            f.grid_columnconfigure(1, weight=1)
            color = "#4CAF50" if tx.type == "income" else "#F44336"
            sign = "+" if tx.type == "income" else "-"
            ctk.CTkLabel(
                f, text=format_display_date(tx.date, self._date_format), width=85, anchor="w"
            ).grid(row=0, column=0, padx=6, pady=3)
            ctk.CTkLabel(
                f, text=tx.description or f"{tx.category.icon} {tx.category.name}", anchor="w"
            ).grid(row=0, column=1, padx=4, sticky="ew")
            ctk.CTkLabel(
                f, text=f"{sign}{format_currency(tx.amount)}",
                text_color=color, anchor="e", width=110,
            ).grid(row=0, column=2, padx=6)

    def _load_budget_progress(self, budgets):
        for w in self._budget_frame.winfo_children():
            w.destroy()
        if not budgets:
            ctk.CTkLabel(
                self._budget_frame, text="No budgets set for this month.",
                text_color="gray60",
            ).pack(pady=20)
        for b in budgets:
            category = self._catalog.get_by_id(b.category_id)
            f = ctk.CTkFrame(self._budget_frame, fg_color="transparent")
            f.pack(fill="x", pady=4, padx=4)
            top_row = ctk.CTkFrame(f, fg_color="transparent")
            top_row.pack(fill="x")
            icon = f"{category.icon} " if category else ""
            ctk.CTkLabel(top_row, text=f"{icon}{b.name}", anchor="w").pack(side="left")
            ctk.CTkLabel(
                top_row,
                text=f"{format_currency(b.spent)} / {format_currency(b.amount)}",
                anchor="e", text_color="gray60",
            ).pack(side="right")
            bar = ctk.CTkProgressBar(f, progress_color=STATUS_COLORS[b.status])
            bar.pack(fill="x", pady=2)
            bar.set(b.percentage / 100)

    def _style_ax(self):
        is_dark = ctk.get_appearance_mode() == "Dark"
        bg = "#2b2b2b" if is_dark else "#e4e4e4"
        fg = "#aaaaaa" if is_dark else "#444444"
        self._fig.patch.set_facecolor(bg)
        self._ax.set_facecolor(bg)
        self._ax.tick_params(colors=fg, labelsize=8)
        for spine in self._ax.spines.values():
            spine.set_edgecolor(fg)

    def _draw_chart(self, budgets):
        ax = self._ax
        ax.clear()
        self._style_ax()
        if not budgets:
            ax.text(0.5, 0.5, "No budgets", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            self._canvas.draw_idle()
            return

        labels = [b.name for b in budgets]
        x = list(range(len(labels)))
        w = 0.35
        ax.bar([i - w / 2 for i in x], [b.amount for b in budgets], w, color="#2196F3")
        ax.bar([i + w / 2 for i in x], [b.spent for b in budgets], w,
               color=[STATUS_COLORS[b.status] for b in budgets])
        ax.set_xticks(x)
        ax.set_xticklabels(labels, rotation=20, ha="right")
        ax.yaxis.set_major_formatter(
            lambda v, _: f"{v/1000:.0f}k" if abs(v) >= 1000 else f"{v:.0f}"
        )
        self._canvas.draw_idle()

    def _make_card(self, parent, col, label, text, color):
        card = ctk.CTkFrame(parent, fg_color=("gray90", "gray20"), corner_radius=10)
        card.grid(row=0, column=col, padx=6, sticky="ew")
        card.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(
            card, text=label, font=ctk.CTkFont(size=12), text_color="gray60",
        ).grid(row=0, column=0, pady=(12, 0), padx=16)
        ctk.CTkLabel(
            card, text=text, font=ctk.CTkFont(size=20, weight="bold"), text_color=color,
        ).grid(row=1, column=0, pady=(4, 12), padx=16)
