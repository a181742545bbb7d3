from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


logger = logging.getLogger(__name__)

NOTICE_EVENT = 'notice'

EventHandler = Callable[[dict[str, Any]], None]


@dataclass(frozen=True)
class Notice:
    title: str
    description: str
    kind: str = 'info'

    def as_dict(self) -> dict[str, str]:
        return {'title': self.title, 'description': self.description, 'kind': self.kind}


class NotificationBus:
    """Synchronous publish/subscribe for user-facing confirmations.

    Handlers run in subscription order; a failing handler is logged and the
    remaining handlers still run, so emitting never raises to the caller.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event_name, []).append(handler)

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        handlers = self._handlers.get(event_name, []) + self._handlers.get('*', [])
        for handler in handlers:
            try:
                handler(data)
            except Exception:
                logger.exception('notification_handler_failed event=%s', event_name)

    def notify(self, notice: Notice) -> None:
        self.emit(NOTICE_EVENT, notice.as_dict())


class RecentNotices:
    def __init__(self, limit: int = 50) -> None:
        self._items: deque[dict[str, Any]] = deque(maxlen=max(1, int(limit)))

    def __call__(self, data: dict[str, Any]) -> None:
        self._items.append(dict(data))

    def items(self) -> list[dict[str, Any]]:
        return list(reversed(self._items))

    def clear(self) -> None:
        self._items.clear()


def log_notice(data: dict[str, Any]) -> None:
    logger.info('notice title=%s description=%s', data.get('title'), data.get('description'))
