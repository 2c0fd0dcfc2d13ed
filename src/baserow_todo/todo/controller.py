"""Todo controller: owns the task cache, draft, filters and the busy slot."""

import asyncio
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, field_validator

from baserow_todo.baserow.client import BaserowConnectionError, BaserowError, TableClient
from baserow_todo.baserow.schemas import AdminBlock, Priority, StatusUpdate, Task, TaskCreate
from baserow_todo.todo.stats import (
    BlockFilter,
    StatusFilter,
    TaskStats,
    compute_stats,
    filter_tasks,
)

logger = logging.getLogger(__name__)

LoadPhase = Literal["loading", "ready", "errored"]

CONNECTION_BLOCKED_MESSAGE = (
    "Connection to Baserow was blocked or could not be established. "
    "Check network access and cross-origin settings, "
    "or use the Baserow web interface directly."
)


class OperationInProgressError(Exception):
    """Another Baserow call is still in flight."""


class TaskNotFoundError(Exception):
    """No cached task has the requested id."""


class Draft(BaseModel):
    """Fields of the new-task form."""

    task_name: str = ""
    priority: Priority = "medium"
    category: str = "General"
    admin_block: AdminBlock = "afternoon"
    due_date: datetime | None = None
    notes: str = ""

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_due_date(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("notes", mode="before")
    @classmethod
    def _null_notes(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_create(self) -> TaskCreate:
        """Build the create-row body; blank optional fields are sent as null."""
        return TaskCreate(
            task_name=self.task_name.strip(),
            status="todo",
            priority=self.priority,
            category=self.category.strip() or "General",
            admin_block=self.admin_block,
            due_date=self.due_date,
            notes=self.notes or None,
        )


@dataclass
class AppState:
    """Everything the task page renders."""

    tasks: list[Task] = field(default_factory=list)
    load_phase: LoadPhase = "loading"
    syncing: bool = False
    error: str | None = None
    status_filter: StatusFilter = "all"
    block_filter: BlockFilter = "all"
    draft: Draft = field(default_factory=Draft)
    truncated: bool = False
    remote_count: int | None = None


class TodoController:
    """Applies the task operations to the application state.

    Every Baserow call runs in a single in-flight slot: while one call is
    running, another one is rejected with OperationInProgressError.
    """

    def __init__(self, client: TableClient) -> None:
        """Initialize controller with a table client and empty state."""
        self._client = client
        self._slot = asyncio.Lock()
        self._on_change: Callable[[], Awaitable[None]] | None = None
        self.state = AppState()

    def set_on_change(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Set coroutine called after every state change."""
        self._on_change = callback

    # -------------------- derived views --------------------

    def visible_tasks(self) -> list[Task]:
        """Tasks passing the current status and block filters."""
        return filter_tasks(self.state.tasks, self.state.status_filter, self.state.block_filter)

    def stats(self) -> TaskStats:
        """Counts over the whole list, ignoring the filters."""
        return compute_stats(self.state.tasks)

    # -------------------- remote operations --------------------

    async def load_tasks(self) -> list[Task]:
        """Replace the cached list with the rows Baserow returns.

        On failure the previous list is kept and the error is recorded.

        Returns:
            The new task list

        Raises:
            OperationInProgressError: If another call is in flight
            BaserowError: If the list call fails
        """
        async with self._operation("load"):
            try:
                page = await self._client.list_rows()
            except BaserowConnectionError as e:
                self._fail("Load", CONNECTION_BLOCKED_MESSAGE, e)
                raise
            except BaserowError as e:
                self._fail("Load", f"Error loading tasks: {e}", e)
                raise

            self.state.tasks = list(page.results)
            self.state.truncated = page.truncated
            self.state.remote_count = page.count
            self.state.load_phase = "ready"
            self.state.error = None
            if page.truncated:
                logger.warning(
                    f"[TodoController] Showing {len(page.results)} of {page.count} rows, "
                    "table exceeds one page"
                )
            return self.state.tasks

    async def create_task(self) -> Task | None:
        """Insert the draft as a new task.

        Does nothing when the trimmed task name is empty. On success the new
        row is prepended to the list and the draft is reset; on failure the
        draft and the list are left as they are.

        Returns:
            The created task, or None if the draft name was blank

        Raises:
            OperationInProgressError: If another call is in flight
            BaserowError: If the create call fails
        """
        if not self.state.draft.task_name.strip():
            logger.debug("[TodoController] Ignoring draft with empty task name")
            return None

        payload = self.state.draft.to_create()
        async with self._operation("create"):
            try:
                task = await self._client.create_row(payload)
            except BaserowError as e:
                self._fail("Add", f"Error adding task: {e}", e)
                raise

            self.state.tasks = [task, *self.state.tasks]
            self.state.draft = Draft()
            logger.info(f"[TodoController] Added task {task.id}: {task.task_name}")
            return task

    async def toggle_task(self, task_id: int) -> Task:
        """Flip a task between todo and completed.

        The cached row is replaced by the full row Baserow returns.

        Raises:
            TaskNotFoundError: If no cached task has this id
            OperationInProgressError: If another call is in flight
            BaserowError: If the update call fails
        """
        current = self._find(task_id)
        new_status = "todo" if current.is_completed else "completed"

        async with self._operation("toggle"):
            try:
                updated = await self._client.update_row(task_id, StatusUpdate(status=new_status))
            except BaserowError as e:
                self._fail("Update", f"Error updating task: {e}", e)
                raise

            self.state.tasks = [updated if t.id == task_id else t for t in self.state.tasks]
            logger.info(f"[TodoController] Task {task_id} is now {updated.status}")
            return updated

    async def delete_task(self, task_id: int) -> None:
        """Delete a task and drop it from the list.

        Raises:
            OperationInProgressError: If another call is in flight
            BaserowError: If the delete call fails
        """
        async with self._operation("delete"):
            try:
                await self._client.delete_row(task_id)
            except BaserowError as e:
                self._fail("Delete", f"Error deleting task: {e}", e)
                raise

            self.state.tasks = [t for t in self.state.tasks if t.id != task_id]
            logger.info(f"[TodoController] Deleted task {task_id}")

    # -------------------- local operations --------------------

    async def set_filters(
        self,
        status_filter: StatusFilter | None = None,
        block_filter: BlockFilter | None = None,
    ) -> None:
        """Change one or both list filters."""
        if status_filter is not None:
            self.state.status_filter = status_filter
        if block_filter is not None:
            self.state.block_filter = block_filter
        await self._notify()

    async def update_draft(self, **changes: Any) -> Draft:
        """Change draft fields.

        Raises:
            pydantic.ValidationError: If a value is not valid for its field
        """
        self.state.draft = Draft.model_validate({**self.state.draft.model_dump(), **changes})
        await self._notify()
        return self.state.draft

    async def clear_error(self) -> None:
        """Dismiss the error banner."""
        self.state.error = None
        await self._notify()

    # -------------------- helpers --------------------

    def _find(self, task_id: int) -> Task:
        for task in self.state.tasks:
            if task.id == task_id:
                return task
        raise TaskNotFoundError(f"Task not found: {task_id}")

    def _fail(self, action: str, message: str, error: Exception) -> None:
        self.state.error = message
        if action == "Load" and self.state.load_phase == "loading":
            self.state.load_phase = "errored"
        logger.error(f"[TodoController] {action} error: {error}")

    @asynccontextmanager
    async def _operation(self, name: str) -> AsyncGenerator[None, None]:
        """Hold the in-flight slot and the syncing flag around a Baserow call."""
        # Check and acquire happen with no await in between
        if self._slot.locked():
            logger.warning(f"[TodoController] Rejected {name}: another operation is in flight")
            raise OperationInProgressError("Another operation is still syncing with Baserow")

        async with self._slot:
            self.state.syncing = True
            await self._notify()
            try:
                yield
            finally:
                self.state.syncing = False
                await self._notify()

    async def _notify(self) -> None:
        if self._on_change is None:
            return
        try:
            await self._on_change()
        except Exception as e:
            logger.warning(f"[TodoController] State change callback failed: {e}")
