"""Transient user-visible notifications (toasts)."""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List


logger = logging.getLogger("chatapp.client.notifications")


@dataclass(frozen=True)
class Notification:
    level: str  # error, success
    message: str


class Notifier:
    """Collects recent notifications and forwards them to listeners."""

    def __init__(self, max_history: int = 50) -> None:
        self.history: Deque[Notification] = deque(maxlen=max_history)
        self._listeners: List[Callable[[Notification], None]] = []

    def add_listener(self, listener: Callable[[Notification], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _push(self, notification: Notification) -> None:
        self.history.append(notification)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                logger.exception("Notification listener failed")

    def error(self, message: str) -> None:
        logger.warning("notify error: %s", message)
        self._push(Notification("error", message))

    def success(self, message: str) -> None:
        logger.info("notify success: %s", message)
        self._push(Notification("success", message))

    @property
    def errors(self) -> List[str]:
        return [n.message for n in self.history if n.level == "error"]
