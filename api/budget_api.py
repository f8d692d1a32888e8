from api.client import ApiClient, parse_record, parse_records
from models.budget import Budget


class BudgetAPI:
    PATH = "/orcamentos"

    def __init__(self, client: ApiClient):
        self._client = client

    def get_all(self) -> list[Budget]:
        return parse_records(Budget.from_dict, self._client.get(self.PATH))

    def create(self, data: dict) -> Budget:
        return parse_record(Budget.from_dict, self._client.post(self.PATH, json=data))

    def update(self, budget_id: str, updates: dict) -> Budget:
        return parse_record(Budget.from_dict, self._client.put(f"{self.PATH}/{budget_id}", json=updates))

    def delete(self, budget_id: str):
        self._client.delete(f"{self.PATH}/{budget_id}")
