from __future__ import annotations

from collections.abc import Iterable

from taskdeck.config import TaskConfig
from taskdeck.errors import NotFoundError, ValidationError
from taskdeck.observability import get_json_logger

from .factory import TaskFactory
from .models import Task
from .validation import trim_description, validate_description


class TaskStore:
    """In-memory, creation-ordered task collection.

    - New tasks are appended; nothing ever re-sorts the list
    - Deletion removes one element and leaves survivors in place
    - Every read hands out copies so callers cannot mutate stored tasks
    """

    def __init__(
        self,
        *,
        config: TaskConfig | None = None,
        factory: TaskFactory | None = None,
    ) -> None:
        self._config = config or TaskConfig()
        self._factory = factory or TaskFactory()
        self._tasks: list[Task] = []
        self._total_created = 0

    @property
    def total_created(self) -> int:
        """Tasks ever created, including deleted ones."""
        return self._total_created

    def __len__(self) -> int:
        return len(self._tasks)

    def _index_of(self, task_id: str) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    def _not_found(self, operation: str, task_id: str) -> NotFoundError:
        get_json_logger("taskdeck.store").error(
            "task not found",
            extra={
                "event": "task_not_found",
                "operation": operation,
                "task_id": task_id,
                "task_count": len(self._tasks),
            },
        )
        return NotFoundError(task_id)

    def create(self, description: str) -> Task:
        result = validate_description(
            description,
            max_length=self._config.max_description_length,
            warning_threshold=self._config.warning_threshold,
        )
        if not result.valid:
            raise ValidationError(result.errors)
        task = self._factory.create_task(trim_description(description))
        if self._index_of(task.id) is not None:
            raise ValueError(f"duplicate task id: {task.id}")
        self._tasks.append(task)
        self._total_created += 1
        get_json_logger("taskdeck.store").debug(
            "task created",
            extra={"event": "task_created", "task_id": task.id, "task_count": len(self._tasks)},
        )
        return task.model_copy()

    def toggle_by_id(self, task_id: str) -> Task:
        idx = self._index_of(task_id)
        if idx is None:
            raise self._not_found("toggle", task_id)
        task = self._tasks[idx]
        task.completed = not task.completed
        return task.model_copy()

    def delete_by_id(self, task_id: str) -> Task:
        """Remove one task and return it."""
        idx = self._index_of(task_id)
        if idx is None:
            raise self._not_found("delete", task_id)
        removed = self._tasks.pop(idx)
        get_json_logger("taskdeck.store").debug(
            "task deleted",
            extra={"event": "task_deleted", "task_id": task_id, "task_count": len(self._tasks)},
        )
        return removed

    def find_by_id(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx].model_copy()

    def list_tasks(self) -> list[Task]:
        return [t.model_copy() for t in self._tasks]

    def replace_all(self, tasks: Iterable[Task], *, total_created: int | None = None) -> None:
        """Swap in a restored collection; descriptions are not re-validated."""
        incoming = [t.model_copy() for t in tasks]
        seen: set[str] = set()
        for t in incoming:
            if t.id in seen:
                raise ValueError(f"duplicate task id: {t.id}")
            seen.add(t.id)
        self._tasks = incoming
        if incoming:
            self._factory.advance_to(max(t.created_at for t in incoming))
        self._total_created = max(total_created or 0, len(incoming))

    def clear(self) -> None:
        self._tasks = []


__all__ = ["TaskStore"]
