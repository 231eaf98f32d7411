from __future__ import annotations

import contextvars
import datetime as dt
import json
import logging
import os
import sys
import uuid
from collections.abc import Generator, Mapping
from contextlib import contextmanager
from typing import Any

_EXTRA_FIELDS = (
    "event",
    "intent",
    "operation",
    "task_id",
    "task_count",
    "error_kind",
    "errors",
    "correlation_id",
    "attributes",
)


def _iso_now() -> str:
    return dt.datetime.now(dt.UTC).isoformat()


def _build_base_payload(record: logging.LogRecord) -> dict[str, Any]:
    return {
        "ts": _iso_now(),
        "level": record.levelname.lower(),
        "logger": record.name,
        "msg": record.getMessage(),
    }


def _add_standard_extras(payload: dict[str, Any], record: logging.LogRecord) -> None:
    for attr in _EXTRA_FIELDS:
        if hasattr(record, attr):
            payload[attr] = getattr(record, attr)


def _enrich_with_context(payload: dict[str, Any]) -> None:
    ctx = get_correlation_context() or {}
    for key in ("correlation_id", "intent"):
        value = ctx.get(key)
        if key not in payload and value is not None:
            payload[key] = value


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = _build_base_payload(record)
        _add_standard_extras(payload, record)
        _enrich_with_context(payload)
        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["err_type"] = getattr(exc_type, "__name__", str(exc_type))
            if exc_value is not None:
                payload["err"] = str(exc_value)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ConsoleLogFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__("%(message)s")

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        ts = _iso_now()[11:19]  # HH:MM:SS
        parts: list[str] = [ts, record.levelname.upper(), record.name]
        event = getattr(record, "event", None)
        if event:
            parts.append(str(event))
        task_id = getattr(record, "task_id", None)
        if task_id:
            parts.append(f"task={str(task_id)[:8]}")
        ctx = get_correlation_context() or {}
        corr = getattr(record, "correlation_id", None) or ctx.get("correlation_id")
        if corr:
            parts.append(f"corr={str(corr)[:8]}")
        parts.append("-")
        parts.append(record.getMessage())
        return " ".join(parts)


_LOG_STREAMS = ("stdout", "stderr")
_log_stream = "stdout"


def set_log_stream(name: str) -> None:
    """Send every taskdeck log line to ``"stdout"`` (the default) or ``"stderr"``."""
    global _log_stream
    if name not in _LOG_STREAMS:
        raise ValueError(f"unknown log stream: {name!r}")
    _log_stream = name


class _StdioHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Stream handler bound to the current sys.stdout or sys.stderr at emit time."""

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr if _log_stream == "stderr" else sys.stdout
        super().emit(record)


def _choose_formatter() -> logging.Formatter:
    format_pref = (os.getenv("LOG_FORMAT") or "").strip().lower() or "auto"
    if format_pref == "auto":
        if sys.stdout.isatty():
            return ConsoleLogFormatter()
        return JsonLogFormatter()
    if format_pref == "console":
        return ConsoleLogFormatter()
    return JsonLogFormatter()


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    name = (value or "").strip().upper()
    if not name:
        return default
    level = getattr(logging, name, None)
    return level if isinstance(level, int) else default


def _level_for_logger(logger_name: str) -> int:
    base_level = _parse_level(os.getenv("LOG_LEVEL"), logging.INFO)
    overrides = (os.getenv("LOG_MODULE_LEVELS") or "").strip()
    if not overrides:
        return base_level
    # Format: "taskdeck.store=debug,taskdeck.app=warning"
    for entry in overrides.split(","):
        prefix, sep, lvl = entry.strip().partition("=")
        prefix = prefix.strip()
        if not sep or not prefix:
            continue
        if logger_name == prefix or logger_name.startswith(prefix + "."):
            return _parse_level(lvl, base_level)
    return base_level


def get_json_logger(name: str = "taskdeck") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = _StdioHandler(stream=sys.stdout)
        handler.setFormatter(_choose_formatter())
        logger.addHandler(handler)
        logger.setLevel(_level_for_logger(name))
        logger.propagate = False
    return logger


# ----------------------------
# Correlation context helpers
# ----------------------------

_correlation_var: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "taskdeck_correlation", default=None
)


def get_correlation_context() -> dict[str, Any] | None:
    return _correlation_var.get()


@contextmanager
def use_correlation(
    intent: str, correlation_id: str | None = None
) -> Generator[str, None, None]:
    """Tag every log line emitted inside the block with one correlation id."""
    cid = correlation_id or str(uuid.uuid4())
    token = _correlation_var.set({"correlation_id": cid, "intent": intent})
    try:
        yield cid
    finally:
        _correlation_var.reset(token)


# ----------------------------
# Metrics
# ----------------------------


class Metrics:
    def __init__(self) -> None:
        self._counters: dict[tuple[str, tuple[tuple[str, str], ...]], int] = {}

    def increment(
        self,
        name: str,
        labels: Mapping[str, str] | None = None,
        amount: int = 1,
    ) -> None:
        label_items: tuple[tuple[str, str], ...] = tuple(sorted((labels or {}).items()))
        key = (name, label_items)
        self._counters[key] = self._counters.get(key, 0) + amount

    def value(self, name: str, labels: Mapping[str, str] | None = None) -> int:
        label_items = tuple(sorted((labels or {}).items()))
        return self._counters.get((name, label_items), 0)

    def snapshot(self) -> list[dict[str, Any]]:
        return [
            {"name": name, "labels": dict(label_items), "value": value}
            for (name, label_items), value in sorted(self._counters.items())
        ]


_metrics_singleton: Metrics | None = None


def get_metrics() -> Metrics:
    global _metrics_singleton
    if _metrics_singleton is None:
        _metrics_singleton = Metrics()
    return _metrics_singleton


def reset_metrics() -> None:
    global _metrics_singleton
    _metrics_singleton = Metrics()


__all__ = [
    "JsonLogFormatter",
    "ConsoleLogFormatter",
    "get_json_logger",
    "set_log_stream",
    "get_correlation_context",
    "use_correlation",
    "Metrics",
    "get_metrics",
    "reset_metrics",
]
