from __future__ import annotations

import datetime as _dt
import re
import uuid
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .validation import trim_description, validate_description

_STORED_FIELDS = (
    ("id", None),
    ("description", None),
    ("completed", None),
    ("createdAt", "created_at"),
)

_CREATED_AT_MESSAGE = "createdAt must be an ISO-8601 string"
# Extended date-time form only; pydantic alone would also take epoch numbers
_ISO_DATETIME = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}", re.ASCII)


def _parse_stored_timestamp(value: Any) -> _dt.datetime:
    if not isinstance(value, str) or not _ISO_DATETIME.match(value):
        raise ValueError(_CREATED_AT_MESSAGE)
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        return _dt.datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(_CREATED_AT_MESSAGE) from exc


class Task(BaseModel):
    """A single to-do item.

    - ``id`` and ``created_at`` are fixed at creation
    - ``completed`` only changes through the store's toggle
    - ``created_at`` travels as ``createdAt`` (ISO-8601) in stored documents

    With a ``stored`` validation context every field is required and the
    description length rule applies (``max_description_length``); new tasks
    are validated before they reach the model.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: StrictStr = Field(default_factory=lambda: str(uuid.uuid4()))
    description: StrictStr
    completed: StrictBool = False
    created_at: _dt.datetime = Field(
        default_factory=lambda: _dt.datetime.now(_dt.UTC), alias="createdAt"
    )

    @model_validator(mode="before")
    @classmethod
    def _require_stored_fields(cls, data: Any, info: ValidationInfo) -> Any:
        if not (info.context or {}).get("stored") or not isinstance(data, dict):
            return data
        missing = [
            name
            for name, alias in _STORED_FIELDS
            if name not in data and (alias is None or alias not in data)
        ]
        if missing:
            raise ValueError(f"missing fields: {', '.join(missing)}")
        return data

    @field_validator("id")
    @classmethod
    def _check_id(cls, value: str) -> str:
        try:
            uuid.UUID(value)
        except ValueError as exc:
            raise ValueError("Task ID must be a valid UUID") from exc
        return value

    @field_validator("description")
    @classmethod
    def _check_description(cls, value: str, info: ValidationInfo) -> str:
        ctx = info.context or {}
        limit = ctx.get("max_description_length")
        if limit is None:
            return value
        result = validate_description(value, max_length=limit, warning_threshold=limit)
        if not result.valid:
            raise ValueError(result.errors[0])
        return trim_description(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _check_created_at_type(cls, value: Any, info: ValidationInfo) -> Any:
        if (info.context or {}).get("stored"):
            return _parse_stored_timestamp(value)
        if not isinstance(value, str | _dt.datetime):
            raise ValueError(_CREATED_AT_MESSAGE)
        return value

    @field_validator("created_at")
    @classmethod
    def _require_timezone(cls, value: _dt.datetime) -> _dt.datetime:
        if value.tzinfo is None:
            raise ValueError("createdAt must include a timezone")
        return value


class StorageMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    last_updated: _dt.datetime | None = Field(default=None, alias="lastUpdated")
    total_tasks_created: int | None = Field(default=None, ge=0, alias="totalTasksCreated")
    app_version: StrictStr | None = Field(default=None, alias="appVersion")


class StorageDocument(BaseModel):
    """Versioned, whole-collection persisted form of the task list."""

    version: StrictStr
    tasks: list[Task] = Field(default_factory=list)
    metadata: StorageMetadata | None = None


__all__ = ["Task", "StorageMetadata", "StorageDocument"]
