from __future__ import annotations


class TaskDeckError(Exception):
    """Base class for recoverable task-domain errors."""

    kind = "error"


class ValidationError(TaskDeckError):
    """A candidate description was rejected."""

    kind = "validation"

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid description")


class NotFoundError(TaskDeckError):
    kind = "not_found"

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"task not found: {task_id}")


class FormatError(TaskDeckError):
    """The storage document failed schema validation."""

    kind = "format"

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("invalid storage data: " + "; ".join(self.errors))


class PersistenceError(TaskDeckError):
    """Reading or writing the storage medium failed."""

    kind = "persistence"


__all__ = [
    "TaskDeckError",
    "ValidationError",
    "NotFoundError",
    "FormatError",
    "PersistenceError",
]
