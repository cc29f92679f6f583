"""Change notifications for the tracker and sync service."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class Event:
    """Something that changed in the tracker or sync state."""

    event_type: str
    message: str
    data: dict | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "message": self.message,
            "data": self.data,
            "timestamp": self.timestamp.isoformat(),
        }


Subscriber = Callable[[Event], None]


class EventBus:
    """Synchronous publish/subscribe channel.

    Subscribers are called in subscription order. A subscriber that raises
    is logged and skipped so one broken listener cannot block the others.
    """

    def __init__(self, max_history: int = 100):
        self._subscribers: list[tuple[str | None, Subscriber]] = []
        self._history: list[Event] = []
        self._max_history = max_history

    def subscribe(self, callback: Subscriber, event_type: str | None = None) -> None:
        """Register a callback.

        Args:
            callback: Called with each matching event
            event_type: Exact type or a prefix ending in ``.*`` such as
                ``session.*``; None receives everything
        """
        self._subscribers.append((event_type, callback))

    def unsubscribe(self, callback: Subscriber) -> None:
        self._subscribers = [(t, cb) for t, cb in self._subscribers if cb is not callback]

    def publish(self, event_type: str, message: str, data: dict | None = None) -> Event:
        event = Event(event_type, message, data)
        self._history.append(event)
        if len(self._history) > self._max_history:
            del self._history[: -self._max_history]

        for pattern, callback in list(self._subscribers):
            if not _matches(pattern, event_type):
                continue
            try:
                callback(event)
            except Exception:
                logger.exception("event_subscriber_failed", event_type=event_type)
        return event

    @property
    def history(self) -> list[Event]:
        """Recently published events, oldest first."""
        return list(self._history)


def _matches(pattern: str | None, event_type: str) -> bool:
    if pattern is None:
        return True
    if pattern.endswith(".*"):
        return event_type.startswith(pattern[:-1])
    return pattern == event_type
