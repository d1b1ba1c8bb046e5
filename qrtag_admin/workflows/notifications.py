import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    level: str  # "success" | "error"
    message: str


class Notifier:
    """Collects user-facing success/error messages (the dashboard's toasts)."""

    def __init__(self) -> None:
        self.history: List[Notification] = []

    def _push(self, level: str, message: str) -> None:
        self.history.append(Notification(level, message))
        log = logger.warning if level == "error" else logger.info
        log("[%s] %s", level, message)

    def success(self, message: str) -> None:
        self._push("success", message)

    def error(self, message: str) -> None:
        self._push("error", message)

    @property
    def last(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None
