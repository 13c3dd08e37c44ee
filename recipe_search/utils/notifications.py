"""User-facing notifications (the toasts of the presentation layer).

Every failure the core catches ends up here instead of escaping as an
exception. Listeners subscribe to render them; the notifier also keeps a
bounded history (the most recent HISTORY_LIMIT entries) so callers and tests
can inspect what was surfaced.
"""

from collections import deque
from enum import Enum
from typing import Callable, Deque, List, Optional

from pydantic import BaseModel, ConfigDict

from recipe_search.utils.errors import ErrorKind
from recipe_search.utils.logger import logger


GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."
HISTORY_LIMIT = 100


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class Notification(BaseModel):
    """A single message destined for the user."""

    model_config = ConfigDict(frozen=True)

    level: NotificationLevel
    message: str
    kind: Optional[ErrorKind] = None


Listener = Callable[[Notification], None]


class Notifier:
    """Collects notifications and forwards them to listeners."""

    def __init__(self, history_limit: int = HISTORY_LIMIT) -> None:
        self.history: Deque[Notification] = deque(maxlen=history_limit)
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def notify(self, level: NotificationLevel, message: str, kind: Optional[ErrorKind] = None) -> Notification:
        notification = Notification(level=level, message=message, kind=kind)
        self.history.append(notification)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception as e:
                # Listener errors are logged, never raised
                logger.warning(f"Notification listener failed: {e}")
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(NotificationLevel.SUCCESS, message)

    def info(self, message: str) -> Notification:
        return self.notify(NotificationLevel.INFO, message)

    def error(self, message: str, kind: ErrorKind = ErrorKind.HARD_FAILURE) -> Notification:
        return self.notify(NotificationLevel.ERROR, message, kind)

    def of_kind(self, kind: ErrorKind) -> List[Notification]:
        return [n for n in self.history if n.kind == kind]

    def clear(self) -> None:
        self.history.clear()
