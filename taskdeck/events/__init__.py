from __future__ import annotations

from .interface import (
    ALL_EVENTS,
    STORAGE_RESTORED,
    TASK_COMPLETED,
    TASK_CREATED,
    TASK_DELETED,
    TASK_UNCOMPLETED,
    TASKS_CLEARED,
    DomainEvent,
    EventBus,
    EventHandler,
)
from .memory import InMemoryEventBus

__all__ = [
    "DomainEvent",
    "EventBus",
    "EventHandler",
    "InMemoryEventBus",
    "ALL_EVENTS",
    "TASK_CREATED",
    "TASK_COMPLETED",
    "TASK_UNCOMPLETED",
    "TASK_DELETED",
    "TASKS_CLEARED",
    "STORAGE_RESTORED",
]
