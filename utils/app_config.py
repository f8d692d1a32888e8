"""Client configuration. Zero imports from the services or UI layers.

Settings live in ~/.financas/config.json; the FINANCAS_* environment
variables take precedence over the file so a deployment can point the
client at another API without touching the user's preferences.
"""
import json
import logging
import os
from pathlib import Path

from utils.constants import DEFAULT_API_URL, DEFAULT_LOG_LEVEL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".financas"
CONFIG_FILE = CONFIG_DIR / "config.json"
SESSION_FILE = CONFIG_DIR / "session.json"

ENV_API_URL = "FINANCAS_API_URL"
ENV_TIMEOUT = "FINANCAS_TIMEOUT"
ENV_LOG_LEVEL = "FINANCAS_LOG_LEVEL"


def load_config(path: Path | None = None) -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    path = path or CONFIG_FILE
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected an object", path)
        return {}
    return data


def save_config(config: dict, path: Path | None = None) -> None:
    """Creates the config folder if needed; atomic write via .tmp + os.replace()."""
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, path)
    except OSError:
        logger.exception("Could not save config to %s", path)
        tmp.unlink(missing_ok=True)
        raise


def get_api_url(config: dict | None = None) -> str:
    config = load_config() if config is None else config
    url = os.environ.get(ENV_API_URL) or config.get("api_url") or DEFAULT_API_URL
    return url.rstrip("/")


def get_timeout(config: dict | None = None) -> float:
    config = load_config() if config is None else config
    raw = os.environ.get(ENV_TIMEOUT) or config.get("timeout", DEFAULT_TIMEOUT)
    try:
        timeout = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid timeout %r, using %s seconds", raw, DEFAULT_TIMEOUT)
        return float(DEFAULT_TIMEOUT)
    return timeout if timeout > 0 else float(DEFAULT_TIMEOUT)


def get_log_level(config: dict | None = None) -> str:
    config = load_config() if config is None else config
    return (os.environ.get(ENV_LOG_LEVEL) or config.get("log_level") or DEFAULT_LOG_LEVEL).upper()


def get_appearance_mode(config: dict | None = None) -> str:
    config = load_config() if config is None else config
    return config.get("appearance_mode", "system")


def set_appearance_mode(mode: str) -> None:
    config = load_config()
    config["appearance_mode"] = mode
    save_config(config)
