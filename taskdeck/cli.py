from __future__ import annotations

import argparse
import json
import logging
import sys

from taskdeck.config import load_config
from taskdeck.observability import get_json_logger, set_log_stream
from taskdeck.tasks.app import IntentResult, TaskApp, build_app
from taskdeck.tasks.models import Task

_LOGGERS = ("taskdeck", "taskdeck.app", "taskdeck.store", "taskdeck.events")


def _configure_logging(level_name: str) -> None:
    # stdout carries command output only
    set_log_stream("stderr")
    level = getattr(logging, level_name.upper(), logging.WARNING)
    for name in _LOGGERS:
        get_json_logger(name).setLevel(level)


def _render_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    return f"[{mark}] {task.id}  {task.description}"


def _report(result: IntentResult, verb: str) -> int:
    for w in result.warnings:
        print(f"warning: {w}", file=sys.stderr)
    if not result.ok:
        for err in result.errors:
            print(f"error: {err}", file=sys.stderr)
        return 1
    if result.task is not None:
        print(f"{verb}: {_render_task(result.task)}")
    return 0


def _list(app: TaskApp, as_json: bool) -> int:
    tasks = app.list_tasks()
    if as_json:
        print(json.dumps(app.codec.serialize(tasks)["tasks"], indent=2))
        return 0
    if not tasks:
        print("No tasks yet.")
        return 0
    for t in tasks:
        print(_render_task(t))
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser("taskdeck")
    parser.add_argument(
        "--log-level", choices=["debug", "info", "warning", "error"], default="warning"
    )
    parser.add_argument(
        "--reset-corrupted",
        action="store_true",
        help="Start from an empty list when the stored document is unreadable",
    )
    sub = parser.add_subparsers(dest="cmd")

    p_add = sub.add_parser("add", help="Create a task")
    p_add.add_argument("description")

    p_list = sub.add_parser("list", help="Show tasks in creation order")
    p_list.add_argument("--json", action="store_true")

    p_toggle = sub.add_parser("toggle", help="Flip a task between active and completed")
    p_toggle.add_argument("task_id")

    p_delete = sub.add_parser("delete", help="Delete a task")
    p_delete.add_argument("task_id")

    sub.add_parser("clear", help="Delete every task")
    sub.add_parser("export", help="Print the stored document")

    args = parser.parse_args(argv)
    if not args.cmd:
        parser.print_help()
        raise SystemExit(0)

    _configure_logging(args.log_level)
    app = build_app(load_config())
    restored = app.restore(fallback_to_empty=args.reset_corrupted)
    if not restored.ok and not args.reset_corrupted:
        for err in restored.errors:
            print(f"error: {err}", file=sys.stderr)
        print("hint: rerun with --reset-corrupted to start over", file=sys.stderr)
        raise SystemExit(1)

    if args.cmd == "add":
        raise SystemExit(_report(app.submit_description(args.description), "created"))
    if args.cmd == "toggle":
        raise SystemExit(_report(app.toggle_task(args.task_id), "toggled"))
    if args.cmd == "delete":
        raise SystemExit(_report(app.delete_task(args.task_id), "deleted"))
    if args.cmd == "clear":
        raise SystemExit(_report(app.clear(), "cleared"))
    if args.cmd == "export":
        print(app.export_document())
        raise SystemExit(0)
    raise SystemExit(_list(app, args.json))


if __name__ == "__main__":
    main()
