from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str


class Notifier(Protocol):
    def success(self, message: str) -> None:
        """Report a completed user action."""

    def error(self, message: str) -> None:
        """Report a failed user action; local state is left as it was."""


class NotificationLog(Notifier):
    """Keeps the most recent notifications until a renderer dismisses them."""

    def __init__(self, max_entries: int = 20) -> None:
        self._entries: deque[Notification] = deque(maxlen=max_entries)

    @property
    def entries(self) -> list[Notification]:
        return list(self._entries)

    def success(self, message: str) -> None:
        logger.info(message)
        self._entries.append(Notification(NotificationLevel.SUCCESS, message))

    def error(self, message: str) -> None:
        logger.warning(message)
        self._entries.append(Notification(NotificationLevel.ERROR, message))

    def dismiss(self, index: int) -> None:
        del self._entries[index]

    def clear(self) -> None:
        self._entries.clear()
