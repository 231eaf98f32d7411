from __future__ import annotations

import datetime as _dt
import uuid
from collections.abc import Callable

from .models import Task


def _utc_now() -> _dt.datetime:
    return _dt.datetime.now(_dt.UTC)


def _new_id() -> str:
    return str(uuid.uuid4())


class TaskFactory:
    """Builds new Task values from an already trimmed, validated description.

    Timestamps never go backwards between two tasks built by the same
    factory: a clock that steps back is clamped to the previous value.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], _dt.datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory
        self._last_created_at: _dt.datetime | None = None

    def advance_to(self, floor: _dt.datetime) -> None:
        """Never stamp a new task earlier than ``floor`` (e.g. restored tasks)."""
        if self._last_created_at is None or floor > self._last_created_at:
            self._last_created_at = floor

    def create_task(self, description: str) -> Task:
        created_at = self._clock()
        if self._last_created_at is not None and created_at < self._last_created_at:
            created_at = self._last_created_at
        self._last_created_at = created_at
        return Task(
            id=self._id_factory(),
            description=description,
            completed=False,
            created_at=created_at,
        )


_DEFAULT_FACTORY = TaskFactory()


def create_task(description: str) -> Task:
    return _DEFAULT_FACTORY.create_task(description)


__all__ = ["TaskFactory", "create_task"]
