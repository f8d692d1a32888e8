import logging

import requests

logger = logging.getLogger(__name__)

_MESSAGE_KEYS = ("mensagem", "message", "erro", "error")


class ApiError(Exception):
    """A remote failure, carrying the server's human-readable message."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiClient:
    """Thin JSON client for the finance REST API.

    Every successful response is an envelope ``{"dados": <payload>}``;
    the client returns the payload. Failures raise ApiError.
    """

    def __init__(self, base_url: str, timeout: float = 15.0, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._token: str | None = None

    def get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"Accept": "application/json"})
        return self._session

    def set_token(self, token: str | None):
        self._token = token

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    def close(self):
        if self._session is not None:
            self._session.close()
            self._session = None

    # ── Verbs ────────────────────────────────────────────────────────────────

    def get(self, path: str):
        return self.request("GET", path)

    def post(self, path: str, json: dict | None = None):
        return self.request("POST", path, json=json)

    def put(self, path: str, json: dict | None = None):
        return self.request("PUT", path, json=json)

    def delete(self, path: str):
        return self.request("DELETE", path)

    def request(self, method: str, path: str, json: dict | None = None):
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        logger.debug("%s %s", method, url)
        try:
            response = self.get_session().request(
                method, url, json=json, headers=headers, timeout=self.timeout
            )
        except requests.Timeout as exc:
            raise ApiError("The server took too long to respond.") from exc
        except requests.RequestException as exc:
            raise ApiError(f"Could not reach the server: {exc}") from exc

        body = self._decode(response)
        if not response.ok:
            raise ApiError(self._error_message(response, body), response.status_code)
        if response.status_code == 204 or body is None:
            return None
        if isinstance(body, dict) and "dados" in body:
            return body["dados"]
        return body

    # ── Helpers ──────────────────────────────────────────────────────────────

    @staticmethod
    def _decode(response: requests.Response):
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            if response.ok:
                raise ApiError("The server returned an invalid response.", response.status_code)
            return None

    @staticmethod
    def _error_message(response: requests.Response, body) -> str:
        if isinstance(body, dict):
            for key in _MESSAGE_KEYS:
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
        return f"Request failed with status {response.status_code}."


def parse_record(convert, record):
    """Build a model from one payload record. Malformed records raise ApiError."""
    try:
        return convert(record)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        logger.warning("Malformed record from server: %s", exc)
        raise ApiError("The server returned an invalid record.") from exc


def parse_records(convert, payload) -> list:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ApiError("The server returned an invalid record.")
    return [parse_record(convert, r) for r in payload]
