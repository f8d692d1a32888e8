import logging
import threading
import tkinter as tk

logger = logging.getLogger(__name__)


def run_in_background(widget, work, on_done=None, on_error=None):
    """Run ``work`` on a daemon thread and hand the outcome back to the Tk loop.

    Callbacks are dropped when ``widget`` no longer exists by the time the
    response arrives. In-flight requests are never cancelled.
    """

    def deliver(callback, value):
        try:
            if not widget.winfo_exists():
                return
        except tk.TclError:
            return
        if callback is not None:
            callback(value)
        elif isinstance(value, BaseException):
            logger.error("Background task failed", exc_info=value)

    def schedule(callback, value):
        try:
            widget.after(0, lambda: deliver(callback, value))
        except (tk.TclError, RuntimeError):
            logger.debug("Dropped a response for a closed window")

    def target():
        try:
            result = work()
        except Exception as exc:
            schedule(on_error, exc)
            return
        schedule(on_done, result)

    threading.Thread(target=target, daemon=True).start()
