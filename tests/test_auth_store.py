import json

import pytest

from api.client import ApiClient, ApiError
from models.user import User
from services.auth_store import AuthStore
from utils.session_storage import SessionStorage


class FakeAuthAPI:
    def __init__(self):
        self.fail_with: str | None = None
        self.calls: list[tuple] = []

    def _maybe_fail(self):
        if self.fail_with:
            raise ApiError(self.fail_with, 401)

    def login(self, email, password):
        self.calls.append(("login", email))
        self._maybe_fail()
        return User(id="u1", name="Ana", email=email), "token-1"

    def register(self, data):
        self.calls.append(("register", data))
        self._maybe_fail()
        return User(id="u2", name=data["name"], email=data["email"]), "token-2"

    def reset_password(self, email):
        self.calls.append(("reset_password", email))
        self._maybe_fail()
        return None


@pytest.fixture
def storage(tmp_path):
    return SessionStorage(tmp_path / "session.json")


@pytest.fixture
def client():
    return ApiClient("http://api.test")


@pytest.fixture
def auth_api():
    return FakeAuthAPI()


@pytest.fixture
def auth(auth_api, client, storage):
    return AuthStore(auth_api, client, storage, namespace="financas")


def test_login_persists_session_and_notifies(auth, client, storage):
    seen = []
    auth.add_listener(seen.append)

    user = auth.login(" ana@x.com ", "secret")

    assert auth.is_authenticated
    assert client.has_token
    assert json.loads(storage.get_item("financas_user"))["email"] == "ana@x.com"
    assert storage.get_item("financas_token") == "token-1"
    assert seen == [user]


def test_restore_session_from_storage(auth_api, client, storage):
    AuthStore(auth_api, ApiClient("http://api.test"), storage).login("ana@x.com", "secret")

    restored = AuthStore(auth_api, client, storage)
    seen = []
    restored.add_listener(seen.append)
    user = restored.restore_session()

    assert user.id == "u1"
    assert client.has_token
    assert seen == [user]


def test_restore_requires_both_keys(auth, storage):
    storage.set_item("financas_user", json.dumps({"id": "u1"}))
    assert auth.restore_session() is None
    assert not auth.is_authenticated


@pytest.mark.parametrize(
    "content",
    ["{not json", "[1, 2]", json.dumps({"financas_user": "{broken", "financas_token": "t"})],
)
def test_corrupt_storage_means_signed_out(auth, storage, content):
    storage.path.write_text(content, encoding="utf-8")
    assert auth.restore_session() is None
    assert not auth.is_authenticated


def test_logout_clears_storage_and_notifies(auth, client, storage):
    auth.login("ana@x.com", "secret")
    seen = []
    auth.add_listener(seen.append)

    auth.logout()

    assert seen == [None]
    assert not client.has_token
    assert storage.get_item("financas_user") is None
    assert storage.get_item("financas_token") is None


def test_failed_login_records_error(auth, auth_api, storage):
    auth_api.fail_with = "Credenciais inválidas"
    with pytest.raises(ApiError, match="Credenciais inválidas"):
        auth.login("ana@x.com", "wrong")
    assert auth.error == "Credenciais inválidas"
    assert not auth.is_authenticated
    assert storage.get_item("financas_token") is None

    auth.clear_error()
    assert auth.error is None


def test_register_and_reset_password(auth, auth_api):
    user = auth.register("Bia", "bia@x.com", "secret")
    assert user.id == "u2"
    auth.reset_password("bia@x.com")
    assert auth_api.calls[-1] == ("reset_password", "bia@x.com")


def test_validation_runs_before_any_request(auth, auth_api):
    with pytest.raises(ValueError):
        auth.login("", "secret")
    with pytest.raises(ValueError):
        auth.register("Bia", "bia@x.com", "")
    with pytest.raises(ValueError):
        auth.reset_password("  ")
    assert auth_api.calls == []


def test_stores_follow_session_changes(auth, budget_store, tx_store, account_store,
                                       budget_api, tx_api, account_api):
    for store in (account_store, tx_store, budget_store):
        auth.add_listener(store.on_session_changed)

    auth.login("ana@x.com", "secret")
    assert ("get_all",) in account_api.calls
    assert ("get_all",) in tx_api.calls
    assert ("get_all",) in budget_api.calls

    budget_store.budgets = ["stale"]
    auth.logout()
    assert budget_store.budgets == []


class UnwritableStorage(SessionStorage):
    def set_item(self, key, value):
        raise OSError("read-only file system")


def test_login_keeps_session_when_it_cannot_be_saved(auth_api, client, tmp_path):
    auth = AuthStore(auth_api, client, UnwritableStorage(tmp_path / "session.json"))
    seen = []
    auth.add_listener(seen.append)

    user = auth.login("ana@x.com", "secret")

    assert auth.is_authenticated
    assert auth.user == user
    assert seen == [user]
    assert auth.error is None
    assert not (tmp_path / "session.json").exists()


def test_not_authenticated_without_a_token(auth, client):
    auth.login("ana@x.com", "secret")
    client.set_token(None)
    assert not auth.is_authenticated
