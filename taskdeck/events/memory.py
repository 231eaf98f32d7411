from __future__ import annotations

import fnmatch
from collections.abc import Callable

from taskdeck.observability import get_json_logger

from .interface import DomainEvent, EventBus, EventHandler


class InMemoryEventBus(EventBus):
    """Synchronous in-process bus; handlers run in subscription order."""

    def __init__(self) -> None:
        self._subscriptions: list[tuple[str, EventHandler]] = []

    def subscribe(self, pattern: str, handler: EventHandler) -> Callable[[], None]:
        entry = (pattern, handler)
        self._subscriptions.append(entry)

        def _unsubscribe() -> None:
            if entry in self._subscriptions:
                self._subscriptions.remove(entry)

        return _unsubscribe

    def publish(self, event: DomainEvent) -> None:
        logger = get_json_logger("taskdeck.events")
        handlers = [h for p, h in list(self._subscriptions) if fnmatch.fnmatchcase(event.type, p)]
        logger.debug(
            "event published",
            extra={
                "event": "event_published",
                "operation": event.type,
                "correlation_id": event.correlation_id,
                "attributes": {"handlers": len(handlers)},
            },
        )
        for handler in handlers:
            try:
                handler(event)
            except Exception as exc:
                logger.error(
                    "event handler failed",
                    exc_info=exc,
                    extra={
                        "event": "event_handler_failed",
                        "operation": event.type,
                        "correlation_id": event.correlation_id,
                    },
                )


__all__ = ["InMemoryEventBus"]
