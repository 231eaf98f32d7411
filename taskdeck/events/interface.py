from __future__ import annotations

import datetime as _dt
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

TASK_CREATED = "DOMAIN.TASK.CREATED"
TASK_COMPLETED = "DOMAIN.TASK.COMPLETED"
TASK_UNCOMPLETED = "DOMAIN.TASK.UNCOMPLETED"
TASK_DELETED = "DOMAIN.TASK.DELETED"
TASKS_CLEARED = "DOMAIN.TASK.ALL_CLEARED"
STORAGE_RESTORED = "SYSTEM.STORAGE.LOAD_COMPLETED"

# Subscribing to this pattern receives every event
ALL_EVENTS = "*"


@dataclass(slots=True)
class DomainEvent:
    type: str
    payload: dict[str, Any]
    correlation_id: str | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: _dt.datetime = field(default_factory=lambda: _dt.datetime.now(_dt.UTC))


EventHandler = Callable[[DomainEvent], None]


class EventBus(Protocol):
    """Minimal publish/subscribe interface for task domain events.

    Delivery happens after the change is persisted. A failing handler must
    not affect the publisher or the other handlers.
    """

    def publish(self, event: DomainEvent) -> None:
        """Deliver one event to every matching subscriber."""

    def subscribe(self, pattern: str, handler: EventHandler) -> Callable[[], None]:
        """Register a handler for an event type or glob pattern.

        Returns a callable that removes the subscription.
        """


__all__ = [
    "DomainEvent",
    "EventBus",
    "EventHandler",
    "ALL_EVENTS",
    "TASK_CREATED",
    "TASK_COMPLETED",
    "TASK_UNCOMPLETED",
    "TASK_DELETED",
    "TASKS_CLEARED",
    "STORAGE_RESTORED",
]
