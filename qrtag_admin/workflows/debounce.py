import threading
from typing import Callable, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


def thread_timer(delay_seconds: float, callback: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(delay_seconds, callback)
    timer.daemon = True
    timer.start()
    return timer


class Debouncer:
    """Runs the most recent callback once its input has been quiet for `delay_ms`."""

    def __init__(self, delay_ms: int, scheduler: Optional[Scheduler] = None) -> None:
        self.delay_ms = delay_ms
        self.scheduler = scheduler or thread_timer
        self._pending: Optional[TimerHandle] = None

    def call(self, callback: Callable[[], None]) -> None:
        self.cancel()

        def fire() -> None:
            self._pending = None
            callback()

        self._pending = self.scheduler(self.delay_ms / 1000.0, fire)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    @property
    def pending(self) -> bool:
        return self._pending is not None
