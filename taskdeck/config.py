from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

DEFAULT_MAX_DESCRIPTION_LENGTH = 500
DEFAULT_WARNING_THRESHOLD = 400
DEFAULT_STORAGE_VERSION = "1.0"
DEFAULT_STORAGE_KEY = "task-manager-data"
STORAGE_BACKENDS = ("memory", "file", "redis")


@dataclass(slots=True, frozen=True)
class TaskConfig:
    max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH
    warning_threshold: int = DEFAULT_WARNING_THRESHOLD
    storage_version: str = DEFAULT_STORAGE_VERSION
    storage_key: str = DEFAULT_STORAGE_KEY
    storage_backend: str = "file"
    storage_path: str = os.path.join("~", ".taskdeck", "tasks.json")
    redis_url: str = "redis://localhost:6379/0"
    redis_prefix: str = "taskdeck"


def _read_int(e: dict[str, Any], name: str, default: int) -> int:
    raw = (e.get(name) or "").strip()
    try:
        value = int(raw) if raw else default
    except ValueError:
        return default
    return value if value > 0 else default


def _read_backend(e: dict[str, Any]) -> str:
    raw = (e.get("TASKDECK_STORAGE") or "").strip().lower()
    return raw if raw in STORAGE_BACKENDS else "file"


def load_config(env: dict[str, str] | None = None) -> TaskConfig:
    e: dict[str, Any] = dict(os.environ)
    if env:
        e.update(env)
    max_length = _read_int(e, "TASKDECK_MAX_DESCRIPTION_LENGTH", DEFAULT_MAX_DESCRIPTION_LENGTH)
    threshold = _read_int(e, "TASKDECK_WARNING_THRESHOLD", DEFAULT_WARNING_THRESHOLD)
    # The soft warning has to fire before the hard limit does
    if threshold >= max_length:
        threshold = max(0, max_length - 1)
    return TaskConfig(
        max_description_length=max_length,
        warning_threshold=threshold,
        storage_version=(e.get("TASKDECK_STORAGE_VERSION") or "").strip()
        or DEFAULT_STORAGE_VERSION,
        storage_key=(e.get("TASKDECK_STORAGE_KEY") or "").strip() or DEFAULT_STORAGE_KEY,
        storage_backend=_read_backend(e),
        storage_path=e.get("TASKDECK_STORAGE_PATH")
        or os.path.join("~", ".taskdeck", "tasks.json"),
        redis_url=e.get("REDIS_URL", "redis://localhost:6379/0"),
        redis_prefix=e.get("TASKDECK_REDIS_PREFIX", "taskdeck"),
    )


__all__ = ["TaskConfig", "load_config", "STORAGE_BACKENDS"]
