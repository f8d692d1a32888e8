from models.category import Category
from utils.constants import EXPENSE_CATEGORIES, INCOME_CATEGORIES


class CategoryCatalog:
    """Read-only lookup of the predefined income and expense categories."""

    def __init__(
        self,
        income: list[dict] | None = None,
        expense: list[dict] | None = None,
    ):
        self._income = [
            Category.from_dict(c, type_="income")
            for c in (INCOME_CATEGORIES if income is None else income)
        ]
        self._expense = [
            Category.from_dict(c, type_="expense")
            for c in (EXPENSE_CATEGORIES if expense is None else expense)
        ]
        self._by_id = {c.id: c for c in self._income + self._expense}

    def get_all(self) -> list[Category]:
        return self._income + self._expense

    def get_income(self) -> list[Category]:
        return list(self._income)

    def get_expense(self) -> list[Category]:
        return list(self._expense)

    def get_by_id(self, category_id: str) -> Category | None:
        return self._by_id.get(category_id)

    def for_transaction_type(self, tx_type: str) -> list[Category]:
        if tx_type == "income":
            return self.get_income()
        if tx_type == "expense":
            return self.get_expense()
        return self.get_all()

    def is_expense(self, category_id: str) -> bool:
        return any(c.id == category_id for c in self._expense)
