from typing import Callable, Optional

from api.client import ApiClient, parse_record, parse_records
from models.category import Category
from models.transaction import Transaction


class TransactionAPI:
    PATH = "/transacoes"

    def __init__(
        self,
        client: ApiClient,
        category_lookup: Optional[Callable[[str], Optional[Category]]] = None,
    ):
        self._client = client
        self._category_lookup = category_lookup

    def _to_model(self, record: dict) -> Transaction:
        return parse_record(self._build, record)

    def _build(self, record: dict) -> Transaction:
        return Transaction.from_dict(record, category_lookup=self._category_lookup)

    def get_all(self) -> list[Transaction]:
        """The list endpoint returns records pre-joined with category metadata."""
        return parse_records(self._build, self._client.get(self.PATH))

    def create(self, data: dict) -> Transaction:
        return self._to_model(self._client.post(self.PATH, json=data))

    def update(self, tx_id: str, updates: dict) -> Transaction:
        return self._to_model(self._client.put(f"{self.PATH}/{tx_id}", json=updates))

    def delete(self, tx_id: str):
        self._client.delete(f"{self.PATH}/{tx_id}")
