from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    icon: str = ""
    color: str = "#95a5a6"
    type: str = "expense"   # 'income' | 'expense'

    @classmethod
    def from_dict(cls, data: dict, type_: str | None = None) -> "Category":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            icon=data.get("icon", ""),
            color=data.get("color", "#95a5a6"),
            type=type_ or data.get("type", "expense"),
        )

    def to_payload(self) -> dict:
        return {"id": self.id, "name": self.name, "icon": self.icon, "color": self.color}
