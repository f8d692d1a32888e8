from api.client import ApiClient, parse_record, parse_records
from models.account import Account


class AccountAPI:
    PATH = "/contas"

    def __init__(self, client: ApiClient):
        self._client = client

    def get_all(self) -> list[Account]:
        return parse_records(Account.from_dict, self._client.get(self.PATH))

    def create(self, data: dict) -> Account:
        return parse_record(Account.from_dict, self._client.post(self.PATH, json=data))

    def update(self, account_id: str, updates: dict) -> Account:
        return parse_record(Account.from_dict, self._client.put(f"{self.PATH}/{account_id}", json=updates))

    def delete(self, account_id: str):
        self._client.delete(f"{self.PATH}/{account_id}")
