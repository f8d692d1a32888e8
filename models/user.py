from dataclasses import dataclass, asdict


@dataclass
class User:
    id: str
    name: str = ""
    email: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=str(data["id"]),
            name=data.get("name") or data.get("nome") or "",
            email=data.get("email", ""),
        )

    def to_dict(self) -> dict:
        return asdict(self)
