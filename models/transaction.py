from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from models.category import Category
from utils.date_helpers import parse_datetime, to_iso

TRANSACTION_TYPES = ("income", "expense")
TRANSACTION_STATUSES = ("completed", "pending", "cancelled")


@dataclass
class Transaction:
    id: str
    date: datetime
    amount: float
    type: str               # 'income' | 'expense'
    category: Category
    account_id: str
    status: str = "completed"   # 'completed' | 'pending' | 'cancelled'
    description: str = ""

    @property
    def category_id(self) -> str:
        return self.category.id

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @classmethod
    def from_dict(
        cls,
        data: dict,
        category_lookup: Optional[Callable[[str], Optional[Category]]] = None,
    ) -> "Transaction":
        """Build from an API record.

        The list endpoint pre-joins category metadata as a nested object;
        single-record responses may only carry ``categoryId``, in which case
        ``category_lookup`` fills in name, icon and color.
        """
        raw_category = data.get("category")
        if isinstance(raw_category, dict) and raw_category.get("id") is not None:
            category = Category.from_dict(raw_category, type_=data.get("type"))
        else:
            category_id = str(raw_category if raw_category is not None else data.get("categoryId", ""))
            category = category_lookup(category_id) if category_lookup else None
            if category is None:
                category = Category(id=category_id, name=category_id, type=data.get("type", "expense"))

        date = parse_datetime(data.get("date"))
        if date is None:
            raise ValueError(f"Transaction {data.get('id')!r} has an invalid date: {data.get('date')!r}")

        return cls(
            id=str(data["id"]),
            date=date,
            amount=float(data.get("amount") or 0.0),
            type=data.get("type", "expense"),
            category=category,
            account_id=str(data.get("accountId", "")),
            status=data.get("status", "completed"),
            description=data.get("description") or "",
        )

    def to_payload(self) -> dict:
        return {
            "date": to_iso(self.date),
            "amount": self.amount,
            "type": self.type,
            "categoryId": self.category.id,
            "category": self.category.to_payload(),
            "accountId": self.account_id,
            "status": self.status,
            "description": self.description,
        }
