import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class SessionStorage:
    """Durable string key/value storage backed by a single JSON file.

    Mirrors the browser localStorage contract: values are strings, missing
    keys read as None. Every write rewrites the file atomically.
    """

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not contain a JSON object")
        return data

    def _write_all(self, data: dict):
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self._path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        """Raises ValueError/OSError if the file exists but cannot be read."""
        value = self._read_all().get(key)
        return value if value is None else str(value)

    def set_item(self, key: str, value: str):
        try:
            data = self._read_all()
        except (OSError, ValueError) as exc:
            logger.warning("Discarding unreadable session file %s: %s", self._path, exc)
            data = {}
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str):
        try:
            data = self._read_all()
        except (OSError, ValueError) as exc:
            logger.warning("Discarding unreadable session file %s: %s", self._path, exc)
            data = {}
        data.pop(key, None)
        self._write_all(data)
