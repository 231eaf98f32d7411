from __future__ import annotations

import os

import pytest

from taskdeck.config import TaskConfig, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("TASKDECK_"):
            monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    cfg = load_config()
    assert cfg.max_description_length == 500
    assert cfg.warning_threshold == 400
    assert cfg.storage_version == "1.0"
    assert cfg.storage_key == "task-manager-data"
    assert cfg.storage_backend == "file"


def test_env_overrides() -> None:
    cfg = load_config(
        {
            "TASKDECK_MAX_DESCRIPTION_LENGTH": "120",
            "TASKDECK_WARNING_THRESHOLD": "100",
            "TASKDECK_STORAGE": "REDIS",
            "TASKDECK_STORAGE_KEY": "tasks",
            "TASKDECK_REDIS_PREFIX": "td",
            "REDIS_URL": "redis://example:6379/1",
        }
    )
    assert cfg == TaskConfig(
        max_description_length=120,
        warning_threshold=100,
        storage_backend="redis",
        storage_key="tasks",
        storage_path=cfg.storage_path,
        redis_url="redis://example:6379/1",
        redis_prefix="td",
    )


@pytest.mark.parametrize("raw", ["abc", "-5", "0", ""])
def test_invalid_ints_fall_back(raw: str) -> None:
    cfg = load_config({"TASKDECK_MAX_DESCRIPTION_LENGTH": raw})
    assert cfg.max_description_length == 500


def test_threshold_clamped_below_max() -> None:
    cfg = load_config(
        {"TASKDECK_MAX_DESCRIPTION_LENGTH": "50", "TASKDECK_WARNING_THRESHOLD": "80"}
    )
    assert cfg.warning_threshold == 49


def test_unknown_backend_falls_back_to_file() -> None:
    assert load_config({"TASKDECK_STORAGE": "sqlite"}).storage_backend == "file"
