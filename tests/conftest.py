from unittest.mock import MagicMock

import pytest

from qrtag_admin.services.backend_client import ApiResponse, BackendClient


class FakeTimer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Debounce scheduler that only fires when the test says so."""

    def __init__(self):
        self.timers = []

    def __call__(self, delay, callback):
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def live(self):
        return [timer for timer in self.timers if not timer.cancelled]

    def flush(self):
        pending, self.timers = self.live, []
        for timer in pending:
            timer.callback()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def client():
    """BackendClient double; set `client.get.return_value = ApiResponse(...)` per test."""
    fake = MagicMock(spec=BackendClient)
    for method in ("get", "post", "put", "patch", "delete"):
        getattr(fake, method).return_value = ApiResponse()
    return fake
