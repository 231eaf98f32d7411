from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from taskdeck.config import TaskConfig
from taskdeck.storage import MemoryDocumentStorage
from taskdeck.tasks.app import IntentResult, TaskApp, build_app
from taskdeck.tasks.models import StorageDocument, Task


@dataclass
class WorldContext:
    """Mutable per-scenario state; rebuilt by ``TaskWorld.reset_context``."""

    tasks: list[Task] = field(default_factory=list)
    current_task: Task | None = None
    last_result: IntentResult | None = None
    last_errors: list[str] = field(default_factory=list)
    last_deleted: Task | None = None


class TaskWorld:
    """Scenario driver for the task domain without any rendering layer.

    Owns one app and one in-memory storage slot. Scenarios go through the
    facade for toggles and deletes, and through the store directly for setup.
    """

    def __init__(self, config: TaskConfig | None = None) -> None:
        self.config = config or TaskConfig(storage_backend="memory")
        self.storage = MemoryDocumentStorage()
        self.app: TaskApp = build_app(self.config, storage=self.storage)
        self.context = WorldContext()

    def reset_context(self) -> None:
        self.app.store.replace_all([])
        self.storage.clear()
        self.context = WorldContext()

    def sync(self) -> None:
        self.context.tasks = self.app.list_tasks()

    def _record(self, result: IntentResult) -> IntentResult:
        self.context.last_result = result
        self.context.last_errors = list(result.errors)
        self.sync()
        return result

    # ----------------------------
    # Setup and intents
    # ----------------------------
    def add_task(self, description: str) -> Task:
        task = self.app.store.create(description)
        self.app.save()
        self.sync()
        self.context.current_task = task
        return task

    def add_tasks(self, descriptions: Iterable[str]) -> list[Task]:
        return [self.add_task(d) for d in descriptions]

    def submit(self, text: str) -> IntentResult:
        result = self._record(self.app.submit_description(text))
        if result.ok:
            self.context.current_task = result.task
        return result

    def toggle_task(self, task_id: str) -> IntentResult:
        result = self._record(self.app.toggle_task(task_id))
        if result.ok:
            self.context.current_task = result.task
        return result

    def delete_task(self, task_id: str) -> IntentResult:
        result = self._record(self.app.delete_task(task_id))
        if result.ok:
            self.context.last_deleted = result.task
            if self.context.current_task and self.context.current_task.id == task_id:
                self.context.current_task = None
        return result

    # ----------------------------
    # Lookups
    # ----------------------------
    def find_task_by_id(self, task_id: str) -> Task | None:
        return next((t for t in self.context.tasks if t.id == task_id), None)

    def find_task_by_description(self, description: str) -> Task | None:
        return next((t for t in self.context.tasks if t.description == description), None)

    def descriptions(self) -> list[str]:
        return [t.description for t in self.context.tasks]

    # ----------------------------
    # Storage simulation
    # ----------------------------
    def stored_document(self) -> StorageDocument | None:
        raw = self.storage.read()
        return None if raw is None else self.app.codec.deserialize(raw)

    def simulate_storage_restore(self, tasks: Iterable[Task]) -> IntentResult:
        """Write ``tasks`` through the codec, then hydrate the app from it."""
        self.storage.write(self.app.codec.dumps(tasks))
        return self._record(self.app.restore())

    def simulate_storage_corruption(self, payload: str = "invalid json data") -> None:
        self.storage.write(payload)

    def simulate_restart(self, *, fallback_to_empty: bool = False) -> IntentResult:
        """Throw away the in-memory app and start a new one on the same storage."""
        self.app = build_app(self.config, storage=self.storage)
        return self._record(self.app.restore(fallback_to_empty=fallback_to_empty))


__all__ = ["TaskWorld", "WorldContext"]
