"""Feature: Task creation

As a user I want to add tasks so that I can track what I need to do.
"""

from __future__ import annotations

import pytest

from taskdeck.tasks.validation import EMPTY_DESCRIPTION, too_long_message
from tests.helpers.world import TaskWorld


def test_create_a_task_with_a_valid_description(world: TaskWorld) -> None:
    # Given the task list is empty
    assert world.context.tasks == []
    # When I enter "Buy groceries" as the task description
    result = world.submit("Buy groceries")
    # Then a new task should be created
    assert result.ok is True
    assert len(world.context.tasks) == 1
    task = world.find_task_by_description("Buy groceries")
    assert task is not None
    # And the task should be active
    assert task.completed is False
    # And the task should be saved to storage
    doc = world.stored_document()
    assert doc is not None
    assert doc.tasks == world.context.tasks


@pytest.mark.parametrize("padded", ["  Walk the dog  ", "\tWalk the dog\n", "Walk the dog "])
def test_surrounding_whitespace_is_trimmed(world: TaskWorld, padded: str) -> None:
    # When I enter a description with surrounding spaces
    result = world.submit(padded)
    # Then the stored description should be trimmed
    assert result.ok is True
    assert world.descriptions() == ["Walk the dog"]
    # And I should be told the spaces were removed
    assert result.warnings


@pytest.mark.parametrize("blank", ["", "   ", "\n\t "])
def test_empty_descriptions_are_rejected(world: TaskWorld, blank: str) -> None:
    # Given I have one task
    world.add_task("Existing")
    doc_before = world.storage.read()
    # When I submit an empty description
    result = world.submit(blank)
    # Then I should see a validation error
    assert result.ok is False
    assert world.context.last_errors == [EMPTY_DESCRIPTION]
    # And no task should be added or persisted
    assert world.descriptions() == ["Existing"]
    assert world.storage.read() == doc_before


def test_overlong_description_is_rejected(world: TaskWorld) -> None:
    result = world.submit("a" * 501)
    assert result.ok is False
    assert world.context.last_errors == [too_long_message(500)]
    assert world.context.tasks == []
    assert world.stored_document() is None


def test_tasks_appear_in_creation_order(world: TaskWorld) -> None:
    # When I create tasks "A", "B", "C"
    for d in ("A", "B", "C"):
        world.submit(d)
    # Then they are listed in the order they were created
    assert world.descriptions() == ["A", "B", "C"]
    stamps = [t.created_at for t in world.context.tasks]
    assert stamps == sorted(stamps)
    # And each task has its own id
    assert len({t.id for t in world.context.tasks}) == 3


def test_duplicate_descriptions_are_separate_tasks(world: TaskWorld) -> None:
    first = world.add_task("Same")
    second = world.add_task("Same")
    assert first.id != second.id
    assert world.descriptions() == ["Same", "Same"]
