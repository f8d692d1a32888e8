from api.client import ApiClient, ApiError, parse_record
from models.user import User


class AuthAPI:
    def __init__(self, client: ApiClient):
        self._client = client

    def login(self, email: str, password: str) -> tuple[User, str]:
        payload = self._client.post("/auth/login", json={"email": email, "password": password})
        return self._session_from(payload)

    def register(self, data: dict) -> tuple[User, str]:
        payload = self._client.post("/auth/register", json=data)
        return self._session_from(payload)

    def reset_password(self, email: str):
        return self._client.post("/auth/reset-password", json={"email": email})

    @staticmethod
    def _session_from(payload) -> tuple[User, str]:
        if not isinstance(payload, dict) or not payload.get("user") or not payload.get("token"):
            raise ApiError("The server returned an incomplete session.")
        return parse_record(User.from_dict, payload["user"]), str(payload["token"])
