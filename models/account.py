from dataclasses import dataclass

ACCOUNT_TYPES = ("checking", "savings", "credit", "cash", "investment")
DEBT_ACCOUNT_TYPES = ("credit",)

ACCOUNT_TYPE_LABELS = {
    "checking": "Checking",
    "savings": "Savings",
    "credit": "Credit Card",
    "cash": "Cash",
    "investment": "Investment",
}


@dataclass
class Account:
    id: str
    name: str
    type: str = "checking"
    balance: float = 0.0
    is_active: bool = True
    bank: str = ""
    color: str = "#3498db"

    @property
    def is_debt_account(self) -> bool:
        return self.type in DEBT_ACCOUNT_TYPES

    @classmethod
    def from_dict(cls, data: dict) -> "Account":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            type=data.get("type", "checking"),
            balance=float(data.get("balance") or 0.0),
            is_active=bool(data.get("isActive", True)),
            bank=data.get("bank") or "",
            color=data.get("color") or "#3498db",
        )
