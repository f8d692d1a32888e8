from dataclasses import dataclass, fields

BUDGET_STATUSES = ("on_track", "warning", "exceeded")


@dataclass
class Budget:
    id: str
    name: str
    category_id: str
    amount: float           # ceiling for the period
    year: int
    month: int              # 1-12
    is_active: bool = True
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Budget":
        category_id = data.get("categoryId")
        if category_id is None and isinstance(data.get("category"), dict):
            category_id = data["category"].get("id")
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            category_id=str(category_id or ""),
            amount=float(data.get("amount") or 0.0),
            year=int(data["year"]),
            month=int(data["month"]),
            is_active=bool(data.get("isActive", True)),
            description=data.get("description") or "",
        )


@dataclass
class BudgetWithStatus(Budget):
    """A budget plus its derived spend figures. Computed on demand, never persisted."""

    spent: float = 0.0
    remaining: float = 0.0
    percentage: float = 0.0     # display value, capped at 100
    status: str = "on_track"

    @classmethod
    def from_budget(
        cls, budget: Budget, spent: float, percentage: float, status: str
    ) -> "BudgetWithStatus":
        values = {f.name: getattr(budget, f.name) for f in fields(Budget)}
        return cls(
            **values,
            spent=spent,
            remaining=budget.amount - spent,
            percentage=min(percentage, 100.0),
            status=status,
        )
