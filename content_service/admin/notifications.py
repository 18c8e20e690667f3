"""Transient success/error notices shown after admin actions."""

import itertools
import time
from collections.abc import Callable
from dataclasses import dataclass

from content_service.config.settings import get_settings


@dataclass
class Notice:
    id: int
    kind: str  # "success" | "error"
    message: str
    expires_at: float


class NotificationCenter:
    """Holds notices until they expire or are dismissed."""

    def __init__(self, ttl: float | None = None, clock: Callable[[], float] = time.monotonic):
        self.ttl = get_settings().notification_ttl_seconds if ttl is None else ttl
        self._clock = clock
        self._ids = itertools.count(1)
        self._notices: list[Notice] = []

    def success(self, message: str) -> Notice:
        return self._push("success", message)

    def error(self, message: str) -> Notice:
        return self._push("error", message)

    def active(self) -> list[Notice]:
        """Unexpired notices, oldest first. Expired ones are dropped."""
        now = self._clock()
        self._notices = [n for n in self._notices if n.expires_at > now]
        return list(self._notices)

    def dismiss(self, notice_id: int) -> None:
        self._notices = [n for n in self._notices if n.id != notice_id]

    def _push(self, kind: str, message: str) -> Notice:
        notice = Notice(next(self._ids), kind, message, self._clock() + self.ttl)
        self._notices.append(notice)
        return notice
