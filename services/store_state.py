import logging
from typing import Callable, TypeVar

from api.client import ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreState:
    """The is_loading / error pair every store exposes to the UI."""

    def __init__(self):
        self.is_loading = False
        self.error: str | None = None

    def clear_error(self):
        self.error = None

    def _remote(self, action: str, call: Callable[..., T], *args, **kwargs) -> T:
        """Run one API call. The error message sticks until the next success."""
        self.is_loading = True
        try:
            result = call(*args, **kwargs)
        except ApiError as exc:
            self.error = exc.message
            logger.error("%s failed: %s", action, exc.message)
            raise
        finally:
            self.is_loading = False
        self.error = None
        return result
