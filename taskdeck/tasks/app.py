from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass, field
from typing import Any

from taskdeck import __version__
from taskdeck.config import TaskConfig, load_config
from taskdeck.errors import (
    FormatError,
    NotFoundError,
    PersistenceError,
    TaskDeckError,
    ValidationError,
)
from taskdeck.events import (
    STORAGE_RESTORED,
    TASK_COMPLETED,
    TASK_CREATED,
    TASK_DELETED,
    TASK_UNCOMPLETED,
    TASKS_CLEARED,
    DomainEvent,
    EventBus,
    InMemoryEventBus,
)
from taskdeck.observability import (
    Metrics,
    get_correlation_context,
    get_json_logger,
    get_metrics,
    use_correlation,
)
from taskdeck.storage import DocumentStorage, build_storage

from .codec import TaskCodec
from .models import StorageMetadata, Task
from .store import TaskStore
from .validation import validate_description

STORAGE_RESET_WARNING = "storage was reset to an empty task list"


@dataclass(slots=True)
class IntentResult:
    """Outcome of one user intent, reported back to the renderer."""

    ok: bool
    task: Task | None = None
    tasks: list[Task] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error_kind: str | None = None

    @classmethod
    def failure(cls, exc: TaskDeckError, **kwargs: Any) -> IntentResult:
        errors = getattr(exc, "errors", None) or [str(exc)]
        return cls(ok=False, errors=list(errors), error_kind=exc.kind, **kwargs)


class TaskApp:
    """Runs each intent as validate -> mutate store -> persist -> report.

    Storage writes always carry the full collection. A write that fails is
    reported as a failed intent; the in-memory mutation is not rolled back
    and the affected task is still returned on the result.

    A domain event is published on ``events`` only after the write succeeds,
    tagged with the intent's correlation id.
    """

    def __init__(
        self,
        *,
        store: TaskStore,
        codec: TaskCodec,
        storage: DocumentStorage,
        config: TaskConfig | None = None,
        metrics: Metrics | None = None,
        events: EventBus | None = None,
    ) -> None:
        self.store = store
        self.codec = codec
        self.storage = storage
        self.events = events if events is not None else InMemoryEventBus()
        self._config = config or TaskConfig()
        self._metrics = metrics

    @property
    def metrics(self) -> Metrics:
        return self._metrics or get_metrics()

    # ----------------------------
    # Persistence
    # ----------------------------
    def _metadata(self) -> StorageMetadata:
        return StorageMetadata(
            last_updated=_dt.datetime.now(_dt.UTC),
            total_tasks_created=self.store.total_created,
            app_version=__version__,
        )

    def save(self) -> None:
        """Write the whole collection to storage."""
        payload = self.codec.dumps(self.store.list_tasks(), metadata=self._metadata())
        self.storage.write(payload)

    def export_document(self) -> str:
        return self.codec.dumps(self.store.list_tasks(), metadata=self._metadata())

    # ----------------------------
    # Intents
    # ----------------------------
    def _fail(self, intent: str, exc: TaskDeckError, **kwargs: Any) -> IntentResult:
        self.metrics.increment("intent_errors", {"intent": intent, "kind": exc.kind})
        level = logging.WARNING if isinstance(exc, ValidationError) else logging.ERROR
        get_json_logger("taskdeck.app").log(
            level,
            "intent failed",
            extra={
                "event": "intent_failed",
                "error_kind": exc.kind,
                "errors": getattr(exc, "errors", None) or [str(exc)],
            },
        )
        return IntentResult.failure(exc, **kwargs)

    def _publish(self, event_type: str, payload: dict[str, Any]) -> None:
        ctx = get_correlation_context() or {}
        self.events.publish(
            DomainEvent(type=event_type, payload=payload, correlation_id=ctx.get("correlation_id"))
        )

    def _persist_then_report(
        self,
        intent: str,
        result: IntentResult,
        event: tuple[str, dict[str, Any]] | None = None,
    ) -> IntentResult:
        try:
            self.save()
        except PersistenceError as e:
            return self._fail(intent, e, task=result.task, warnings=result.warnings)
        if event is not None:
            self._publish(*event)
        get_json_logger("taskdeck.app").info(
            "intent completed",
            extra={
                "event": "intent_completed",
                "task_id": result.task.id if result.task else None,
                "task_count": len(self.store),
            },
        )
        return result

    def submit_description(self, text: str) -> IntentResult:
        intent = "submit_description"
        with use_correlation(intent):
            self.metrics.increment("intents", {"intent": intent})
            check = validate_description(
                text,
                max_length=self._config.max_description_length,
                warning_threshold=self._config.warning_threshold,
            )
            try:
                task = self.store.create(text)
            except ValidationError as e:
                return self._fail(intent, e)
            return self._persist_then_report(
                intent,
                IntentResult(ok=True, task=task, warnings=check.warnings),
                (TASK_CREATED, {"task_id": task.id, "description": task.description}),
            )

    def toggle_task(self, task_id: str) -> IntentResult:
        intent = "toggle_task"
        with use_correlation(intent):
            self.metrics.increment("intents", {"intent": intent})
            try:
                task = self.store.toggle_by_id(task_id)
            except NotFoundError as e:
                return self._fail(intent, e)
            return self._persist_then_report(
                intent,
                IntentResult(ok=True, task=task),
                (
                    TASK_COMPLETED if task.completed else TASK_UNCOMPLETED,
                    {"task_id": task.id, "completed": task.completed},
                ),
            )

    def delete_task(self, task_id: str) -> IntentResult:
        intent = "delete_task"
        with use_correlation(intent):
            self.metrics.increment("intents", {"intent": intent})
            try:
                removed = self.store.delete_by_id(task_id)
            except NotFoundError as e:
                return self._fail(intent, e)
            return self._persist_then_report(
                intent,
                IntentResult(ok=True, task=removed),
                (TASK_DELETED, {"task_id": removed.id, "description": removed.description}),
            )

    def restore(self, *, fallback_to_empty: bool = False) -> IntentResult:
        """Hydrate the store from storage, as on application start.

        A missing document starts an empty list. An invalid document never
        reaches the store: the previous collection is kept, unless
        ``fallback_to_empty`` asks for a reset to a fresh, empty document.
        """
        intent = "restore"
        with use_correlation(intent):
            self.metrics.increment("intents", {"intent": intent})
            try:
                raw = self.storage.read()
            except PersistenceError as e:
                return self._fail(intent, e, tasks=self.store.list_tasks())
            if raw is None:
                self.store.replace_all([])
                return self._persist_then_report(intent, IntentResult(ok=True))
            try:
                doc = self.codec.deserialize(raw)
            except FormatError as e:
                if not fallback_to_empty:
                    return self._fail(intent, e, tasks=self.store.list_tasks())
                self.store.replace_all([])
                result = self._fail(intent, e, warnings=[STORAGE_RESET_WARNING])
                try:
                    self.save()
                except PersistenceError as pe:
                    result.errors.append(str(pe))
                return result
            total = doc.metadata.total_tasks_created if doc.metadata else None
            self.store.replace_all(doc.tasks, total_created=total)
            get_json_logger("taskdeck.app").info(
                "storage restored",
                extra={"event": "storage_restored", "task_count": len(self.store)},
            )
            self._publish(STORAGE_RESTORED, {"task_count": len(self.store)})
            return IntentResult(ok=True, tasks=self.store.list_tasks())

    def clear(self) -> IntentResult:
        intent = "clear"
        with use_correlation(intent):
            self.metrics.increment("intents", {"intent": intent})
            self.store.clear()
            return self._persist_then_report(intent, IntentResult(ok=True), (TASKS_CLEARED, {}))

    # ----------------------------
    # Reads
    # ----------------------------
    def list_tasks(self) -> list[Task]:
        return self.store.list_tasks()

    def find_task(self, task_id: str) -> Task | None:
        return self.store.find_by_id(task_id)


def build_app(
    config: TaskConfig | None = None,
    *,
    storage: DocumentStorage | None = None,
    events: EventBus | None = None,
) -> TaskApp:
    cfg = config or load_config()
    return TaskApp(
        store=TaskStore(config=cfg),
        codec=TaskCodec(cfg),
        storage=storage if storage is not None else build_storage(cfg),
        config=cfg,
        events=events,
    )


__all__ = ["IntentResult", "TaskApp", "build_app", "STORAGE_RESET_WARNING"]
