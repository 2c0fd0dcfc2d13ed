"""Task filtering and derived statistics."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from baserow_todo.baserow.schemas import Task

StatusFilter = Literal["all", "active", "completed"]
BlockFilter = Literal["all", "morning", "afternoon"]


@dataclass(frozen=True)
class TaskStats:
    """Counts shown in the header and the progress bar."""

    total: int
    completed: int
    morning: int
    afternoon: int
    progress: float | None  # completed/total, None for an empty list

    @property
    def completion_percentage(self) -> int | None:
        """Completion rounded half up to a whole percent."""
        if not self.total:
            return None
        return (200 * self.completed + self.total) // (2 * self.total)


def matches_status(task: Task, status_filter: StatusFilter) -> bool:
    """Check a task against the all/active/completed filter."""
    if status_filter == "active":
        return not task.is_completed
    if status_filter == "completed":
        return task.is_completed
    return True


def matches_block(task: Task, block_filter: BlockFilter) -> bool:
    """Check a task against the admin block filter."""
    return block_filter == "all" or task.admin_block == block_filter


def filter_tasks(
    tasks: Iterable[Task], status_filter: StatusFilter, block_filter: BlockFilter
) -> list[Task]:
    """Return the tasks passing both filters, in list order.

    Args:
        tasks: Cached task list
        status_filter: all, active or completed
        block_filter: all, morning or afternoon

    Returns:
        Tasks matching the status filter AND the block filter
    """
    return [
        task
        for task in tasks
        if matches_status(task, status_filter) and matches_block(task, block_filter)
    ]


def compute_stats(tasks: Iterable[Task]) -> TaskStats:
    """Compute counts over the whole (unfiltered) task list."""
    total = completed = morning = afternoon = 0
    for task in tasks:
        total += 1
        if task.is_completed:
            completed += 1
        if task.admin_block == "morning":
            morning += 1
        elif task.admin_block == "afternoon":
            afternoon += 1

    progress = completed / total if total else None
    return TaskStats(
        total=total,
        completed=completed,
        morning=morning,
        afternoon=afternoon,
        progress=progress,
    )


def empty_message(status_filter: StatusFilter) -> str:
    """Placeholder text for an empty filtered list."""
    if status_filter == "completed":
        return "No completed tasks yet"
    if status_filter == "active":
        return "No active tasks"
    return "No tasks yet"
