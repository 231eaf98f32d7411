from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

import pydantic

from taskdeck.config import TaskConfig
from taskdeck.errors import FormatError

from .models import StorageDocument, StorageMetadata, Task


def _format_pydantic_errors(exc: pydantic.ValidationError) -> list[str]:
    messages: list[str] = []
    for err in exc.errors():
        path = ".".join(str(p) for p in err.get("loc", ()))
        msg = str(err.get("msg", "invalid value"))
        messages.append(f"{path}: {msg}" if path else msg)
    return messages


class TaskCodec:
    """Converts the task collection to and from the versioned storage document.

    Document shape::

        {"version": "1.0",
         "tasks": [{"id": ..., "description": ..., "completed": ..., "createdAt": ...}],
         "metadata": {"lastUpdated": ..., "totalTasksCreated": ..., "appVersion": ...}}
    """

    def __init__(self, config: TaskConfig | None = None) -> None:
        self._config = config or TaskConfig()

    @property
    def version(self) -> str:
        return self._config.storage_version

    def serialize(
        self, tasks: Iterable[Task], *, metadata: StorageMetadata | None = None
    ) -> dict[str, Any]:
        doc = StorageDocument(version=self.version, tasks=list(tasks), metadata=metadata)
        return doc.model_dump(mode="json", by_alias=True, exclude_none=True)

    def dumps(self, tasks: Iterable[Task], *, metadata: StorageMetadata | None = None) -> str:
        return json.dumps(self.serialize(tasks, metadata=metadata), indent=2, ensure_ascii=False)

    def deserialize(self, raw: Mapping[str, Any] | str | bytes) -> StorageDocument:
        if isinstance(raw, str | bytes):
            return self.loads(raw)
        return self._from_object(raw)

    def _from_object(self, raw: Any) -> StorageDocument:
        if not isinstance(raw, Mapping):
            raise FormatError(["document must be an object"])
        version = raw.get("version")
        if not isinstance(version, str):
            raise FormatError(["version: missing"])
        if version != self.version:
            raise FormatError([f"version: unsupported storage version {version!r}"])
        if not isinstance(raw.get("tasks"), list):
            raise FormatError(["tasks: must be a list"])
        try:
            doc = StorageDocument.model_validate(
                dict(raw),
                context={
                    "stored": True,
                    "max_description_length": self._config.max_description_length,
                },
            )
        except pydantic.ValidationError as exc:
            raise FormatError(_format_pydantic_errors(exc)) from exc
        seen: set[str] = set()
        for i, task in enumerate(doc.tasks):
            if task.id in seen:
                raise FormatError([f"tasks.{i}.id: duplicate task id {task.id}"])
            seen.add(task.id)
        return doc

    def loads(self, text: str | bytes) -> StorageDocument:
        try:
            parsed = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise FormatError([f"invalid JSON: {exc}"]) from exc
        return self._from_object(parsed)


__all__ = ["TaskCodec"]
