"""API models for Baserow Todo."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator

from baserow_todo.baserow.schemas import AdminBlock, Priority, Task, TaskStatus
from baserow_todo.todo import display
from baserow_todo.todo.controller import Draft, LoadPhase, TodoController
from baserow_todo.todo.stats import BlockFilter, StatusFilter, empty_message


class TaskResponse(BaseModel):
    """API response model for a task card."""

    id: int
    task_name: str
    status: TaskStatus
    priority: Priority
    category: str
    admin_block: AdminBlock
    due_date: datetime | None
    notes: str | None
    completed: bool
    priority_color: str
    priority_icon: str | None
    block_icon: str
    block_hours: str
    block_label: str
    due_date_display: str | None


class StatsResponse(BaseModel):
    """Header counts and progress bar."""

    total: int
    completed: int
    morning: int
    afternoon: int
    completion_percentage: int | None
    progress: float | None


class StateResponse(BaseModel):
    """Everything the page renders."""

    tasks: list[TaskResponse]
    stats: StatsResponse
    status_filter: StatusFilter
    block_filter: BlockFilter
    draft: Draft
    load_phase: LoadPhase
    syncing: bool
    error: str | None
    truncated: bool
    remote_count: int | None
    empty_message: str | None


class FiltersRequest(BaseModel):
    """Request model for changing list filters."""

    status_filter: StatusFilter | None = None
    block_filter: BlockFilter | None = None


class DraftRequest(BaseModel):
    """Request model for editing the new-task form.

    Only the fields that are set are applied to the draft.
    """

    task_name: str | None = None
    priority: Priority | None = None
    category: str | None = None
    admin_block: AdminBlock | None = None
    due_date: datetime | None = None
    notes: str | None = None

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_due_date(cls, value: Any) -> Any:
        # An emptied date input clears the due date
        return None if value == "" else value

    def changes(self) -> dict[str, Any]:
        """Fields sent by the client; null only clears the nullable ones."""
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None or name in ("due_date", "notes")
        }


def task_to_response(task: Task) -> TaskResponse:
    """Convert Task to TaskResponse."""
    return TaskResponse(
        id=task.id,
        task_name=task.task_name,
        status=task.status,
        priority=task.priority,
        category=task.category,
        admin_block=task.admin_block,
        due_date=task.due_date,
        notes=task.notes,
        completed=task.is_completed,
        priority_color=display.priority_color(task.priority),
        priority_icon=display.priority_icon(task.priority),
        block_icon=display.block_icon(task.admin_block),
        block_hours=display.block_hours(task.admin_block),
        block_label=display.block_label(task.admin_block),
        due_date_display=display.format_due_date(task.due_date),
    )


def state_to_response(controller: TodoController) -> StateResponse:
    """Render the controller state with filters and stats applied."""
    state = controller.state
    stats = controller.stats()
    visible = controller.visible_tasks()
    return StateResponse(
        tasks=[task_to_response(task) for task in visible],
        stats=StatsResponse(
            total=stats.total,
            completed=stats.completed,
            morning=stats.morning,
            afternoon=stats.afternoon,
            completion_percentage=stats.completion_percentage,
            progress=stats.progress,
        ),
        status_filter=state.status_filter,
        block_filter=state.block_filter,
        draft=state.draft,
        load_phase=state.load_phase,
        syncing=state.syncing,
        error=state.error,
        truncated=state.truncated,
        remote_count=state.remote_count,
        empty_message=None if visible else empty_message(state.status_filter),
    )
