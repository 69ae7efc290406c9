"""Simple synchronous in-process notification bus."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable


class EventBus:
    """Publish/subscribe bus for domain notifications.

    Topics are notification classes; handlers are called synchronously in
    registration order on the publishing thread.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Callable) -> None:
        self._subscribers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable) -> None:
        """Detach ``handler`` from ``event_type``. No-op when not attached."""
        handlers = self._subscribers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def handler_count(self, event_type: type | None = None) -> int:
        if event_type is None:
            return sum(len(h) for h in self._subscribers.values())
        return len(self._subscribers.get(event_type, []))

    def publish(self, event: Any) -> None:
        # Copy so a handler may unsubscribe while being called
        for handler in list(self._subscribers.get(type(event), [])):
            handler(event)
