import json
import logging
from typing import Callable

from api.auth_api import AuthAPI
from api.client import ApiClient
from models.user import User
from services.store_state import StoreState
from utils.constants import STORAGE_NAMESPACE
from utils.session_storage import SessionStorage

logger = logging.getLogger(__name__)

SessionListener = Callable[[User | None], None]


class AuthStore(StoreState):
    """Signed-in user and bearer token, persisted across launches.

    Listeners are told about every session change so the data stores can
    reload for the new user or clear themselves on logout.
    """

    def __init__(
        self,
        auth_api: AuthAPI,
        client: ApiClient,
        storage: SessionStorage,
        namespace: str = STORAGE_NAMESPACE,
    ):
        super().__init__()
        self._api = auth_api
        self._client = client
        self._storage = storage
        self._user_key = f"{namespace}_user"
        self._token_key = f"{namespace}_token"
        self._listeners: list[SessionListener] = []
        self.user: User | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self._client.has_token

    def add_listener(self, callback: SessionListener):
        self._listeners.append(callback)

    # ── Session lifecycle ────────────────────────────────────────────────────

    def restore_session(self) -> User | None:
        """Load a session saved by a previous launch. Unreadable data means no session."""
        try:
            raw_user = self._storage.get_item(self._user_key)
            token = self._storage.get_item(self._token_key)
            user = User.from_dict(json.loads(raw_user)) if raw_user and token else None
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Could not read the stored session, starting signed out: %s", exc)
            user, token = None, None

        if user is None:
            self._set_session(None, None)
        else:
            logger.info("Restored session for %s", user.email or user.id)
            self._set_session(user, token)
        return user

    def login(self, email: str, password: str) -> User:
        email = email.strip()
        if not email or not password:
            raise ValueError("Email and password are required.")
        user, token = self._remote("Login", self._api.login, email, password)
        self._persist(user, token)
        logger.info("Signed in as %s", user.email or user.id)
        self._set_session(user, token)
        return user

    def register(self, name: str, email: str, password: str) -> User:
        name, email = name.strip(), email.strip()
        if not name or not email or not password:
            raise ValueError("Name, email and password are required.")
        data = {"name": name, "email": email, "password": password}
        user, token = self._remote("Registration", self._api.register, data)
        self._persist(user, token)
        logger.info("Registered %s", user.email or user.id)
        self._set_session(user, token)
        return user

    def reset_password(self, email: str):
        email = email.strip()
        if not email:
            raise ValueError("Email is required.")
        return self._remote("Password reset", self._api.reset_password, email)

    def logout(self):
        self._storage.remove_item(self._user_key)
        self._storage.remove_item(self._token_key)
        self.error = None
        logger.info("Signed out")
        self._set_session(None, None)

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _persist(self, user: User, token: str):
        """Save the session for the next launch. A write failure keeps the in-memory session."""
        try:
            self._storage.set_item(self._user_key, json.dumps(user.to_dict()))
            self._storage.set_item(self._token_key, token)
        except OSError as exc:
            logger.warning("Could not save the session to %s: %s", self._storage.path, exc)

    def _set_session(self, user: User | None, token: str | None):
        changed = (user.id if user else None) != (self.user.id if self.user else None)
        self.user = user
        self._client.set_token(token)
        if changed:
            for callback in self._listeners:
                callback(user)
