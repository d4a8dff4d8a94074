"""Soft, dismissible user notices raised by the state layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from vocab_master import logging_manager as log_mgr

logger = log_mgr.get_logger().getChild("notifications")


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """A message for the user that never interrupts the current flow."""

    message: str
    level: NoticeLevel = NoticeLevel.INFO

    @classmethod
    def info(cls, message: str) -> "Notice":
        return cls(message, NoticeLevel.INFO)

    @classmethod
    def success(cls, message: str) -> "Notice":
        return cls(message, NoticeLevel.SUCCESS)

    @classmethod
    def error(cls, message: str) -> "Notice":
        return cls(message, NoticeLevel.ERROR)


NoticeListener = Callable[[Notice], None]

_LOG_LEVELS = {
    NoticeLevel.INFO: logging.INFO,
    NoticeLevel.SUCCESS: logging.INFO,
    NoticeLevel.ERROR: logging.WARNING,
}


class NoticeBoard:
    """Fan notices out to subscribers and keep a bounded backlog."""

    def __init__(self, *, max_backlog: int = 100) -> None:
        self._listeners: List[NoticeListener] = []
        self._backlog: List[Notice] = []
        self._max_backlog = max_backlog

    def subscribe(self, listener: NoticeListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def publish(self, notice: Notice) -> Notice:
        logger.log(
            _LOG_LEVELS[notice.level],
            notice.message,
            extra={"event": "notice.published", "status": notice.level.value},
        )
        self._backlog.append(notice)
        if len(self._backlog) > self._max_backlog:
            del self._backlog[: len(self._backlog) - self._max_backlog]
        for listener in list(self._listeners):
            try:
                listener(notice)
            except Exception:
                logger.exception(
                    "Notice listener failed",
                    extra={"event": "notice.listener_failed"},
                )
        return notice

    @property
    def latest(self) -> Optional[Notice]:
        return self._backlog[-1] if self._backlog else None

    def drain(self) -> List[Notice]:
        """Return and forget every notice published so far."""
        notices, self._backlog = self._backlog, []
        return notices


__all__ = ["Notice", "NoticeBoard", "NoticeLevel", "NoticeListener"]
