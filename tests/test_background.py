import threading

import pytest

pytest.importorskip("tkinter")

from ui.components.background import run_in_background  # noqa: E402


class FakeWidget:
    """Runs scheduled callbacks inline and records what was delivered."""

    def __init__(self, alive=True):
        self.alive = alive
        self.done = threading.Event()

    def winfo_exists(self):
        return self.alive

    def after(self, _ms, callback):
        callback()
        self.done.set()


def test_result_is_delivered_to_on_done():
    widget = FakeWidget()
    received = []
    run_in_background(widget, lambda: 42, on_done=received.append)
    assert widget.done.wait(2)
    assert received == [42]


def test_exception_is_delivered_to_on_error():
    widget = FakeWidget()
    errors = []

    def work():
        raise ValueError("boom")

    run_in_background(widget, work, on_done=lambda _r: pytest.fail("unexpected"),
                      on_error=errors.append)
    assert widget.done.wait(2)
    assert len(errors) == 1
    assert str(errors[0]) == "boom"


def test_callbacks_skipped_when_widget_is_gone():
    widget = FakeWidget(alive=False)
    received = []
    run_in_background(widget, lambda: "late", on_done=received.append)
    assert widget.done.wait(2)
    assert received == []
