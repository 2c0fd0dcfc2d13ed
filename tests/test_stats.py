"""Tests for task filtering, stats and display helpers."""

from datetime import datetime
from typing import Any

import pytest

from baserow_todo.baserow.schemas import Task
from baserow_todo.todo import display
from baserow_todo.todo.stats import compute_stats, empty_message, filter_tasks


def make_task(task_id: int, **fields: Any) -> Task:
    return Task(id=task_id, task_name=f"Task {task_id}", **fields)


@pytest.fixture
def tasks() -> list[Task]:
    return [
        make_task(1, status="todo", admin_block="morning"),
        make_task(2, status="completed", admin_block="morning"),
        make_task(3, status="todo", admin_block="afternoon"),
        make_task(4, status="completed", admin_block="afternoon"),
        make_task(5, status="todo", admin_block="afternoon"),
    ]


def test_stats_empty_list() -> None:
    """Test no percentage is computed for an empty list."""
    stats = compute_stats([])

    assert stats.total == 0
    assert stats.completed == 0
    assert stats.progress is None
    assert stats.completion_percentage is None


def test_stats_quarter_done() -> None:
    """Test 1 of 4 completed is 25 percent."""
    stats = compute_stats(
        [make_task(1, status="completed")] + [make_task(i, status="todo") for i in range(2, 5)]
    )

    assert stats.total == 4
    assert stats.completed == 1
    assert stats.completion_percentage == 25


def test_stats_percentage_rounds_half_up() -> None:
    """Test 1 of 8 (12.5%) rounds to 13 and 2 of 3 to 67."""
    eighth = compute_stats([make_task(1, status="completed")] + [make_task(i) for i in range(2, 9)])
    two_thirds = compute_stats(
        [make_task(1, status="completed"), make_task(2, status="completed"), make_task(3)]
    )

    assert eighth.completion_percentage == 13
    assert two_thirds.completion_percentage == 67


def test_stats_block_counts(tasks: list[Task]) -> None:
    stats = compute_stats(tasks)

    assert stats.morning == 2
    assert stats.afternoon == 3
    assert stats.completed == 2
    assert stats.completion_percentage == 40


@pytest.mark.parametrize(
    ("status_filter", "block_filter", "expected"),
    [
        ("all", "all", [1, 2, 3, 4, 5]),
        ("active", "all", [1, 3, 5]),
        ("completed", "all", [2, 4]),
        ("all", "morning", [1, 2]),
        ("active", "morning", [1]),
        ("completed", "afternoon", [4]),
    ],
)
def test_filter_conjunction(
    tasks: list[Task], status_filter: str, block_filter: str, expected: list[int]
) -> None:
    """Test a task is shown only when it passes both filters."""
    visible = filter_tasks(tasks, status_filter, block_filter)  # type: ignore[arg-type]

    assert [t.id for t in visible] == expected


def test_empty_messages() -> None:
    assert empty_message("completed") == "No completed tasks yet"
    assert empty_message("active") == "No active tasks"
    assert empty_message("all") == "No tasks yet"


def test_priority_colors() -> None:
    """Test priority colour coding with gray as the fallback."""
    assert display.priority_color("high") == "red"
    assert display.priority_color("medium") == "yellow"
    assert display.priority_color("low") == "green"
    assert display.priority_color("urgent") == "gray"
    assert display.priority_icon("high") == "alert-circle"
    assert display.priority_icon("urgent") is None


def test_block_labels() -> None:
    assert display.block_hours("morning") == "9-11am"
    assert display.block_hours("afternoon") == "2-5pm"
    assert display.block_label("morning") == "Morning (9-11am)"
    assert display.block_label("afternoon") == "Afternoon (2-5pm)"
    assert display.block_icon("morning") == "sun"
    assert display.block_icon("afternoon") == "sunset"


def test_format_due_date() -> None:
    assert display.format_due_date(None) is None
    assert display.format_due_date(datetime(2025, 6, 2, 9, 0)) == "2025-06-02"
