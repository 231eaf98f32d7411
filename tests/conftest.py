from __future__ import annotations

import json
import logging
import os
import uuid
from collections.abc import Callable, Generator
from typing import Any

import pytest

from taskdeck.config import TaskConfig
from taskdeck.observability import get_json_logger, reset_metrics, set_log_stream
from taskdeck.storage import MemoryDocumentStorage
from taskdeck.tasks.app import TaskApp, build_app
from tests.helpers.world import TaskWorld

# Loggers pick their formatter once, so fix JSON output before any is created
os.environ["LOG_FORMAT"] = "json"


def _redis_ping(url: str) -> bool:
    try:
        import redis

        return bool(redis.Redis.from_url(url, socket_connect_timeout=0.5).ping())
    except Exception:
        return False


@pytest.fixture(autouse=True)
def _fresh_metrics() -> None:
    reset_metrics()


@pytest.fixture(autouse=True)
def _default_log_levels() -> None:
    # The CLI lowers these and moves them to stderr; keep tests on INFO and stdout
    set_log_stream("stdout")
    for name in ("taskdeck", "taskdeck.app", "taskdeck.store", "taskdeck.events"):
        get_json_logger(name).setLevel(logging.INFO)


@pytest.fixture()
def config() -> TaskConfig:
    return TaskConfig(storage_backend="memory")


@pytest.fixture()
def storage() -> MemoryDocumentStorage:
    return MemoryDocumentStorage()


@pytest.fixture()
def app(config: TaskConfig, storage: MemoryDocumentStorage) -> TaskApp:
    return build_app(config, storage=storage)


@pytest.fixture()
def world() -> Generator[TaskWorld, None, None]:
    w = TaskWorld()
    w.reset_context()
    yield w
    w.reset_context()


@pytest.fixture()
def log_records(capsys: pytest.CaptureFixture[str]) -> Callable[[], list[dict[str, Any]]]:
    """Parse the JSON log lines written to stdout so far."""

    def _read() -> list[dict[str, Any]]:
        out = capsys.readouterr().out
        return [json.loads(line) for line in out.splitlines() if line.startswith("{")]

    return _read


@pytest.fixture()
def redis_url() -> str:
    url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    if not _redis_ping(url):
        pytest.skip("Redis not available; set REDIS_URL or start local Redis")
    return url


@pytest.fixture()
def redis_prefix() -> str:
    return f"testtaskdeck:{uuid.uuid4()}"
