"""Row schemas for the Baserow todo table."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

TaskStatus = Literal["todo", "completed"]
Priority = Literal["low", "medium", "high"]
AdminBlock = Literal["morning", "afternoon"]


def _unwrap_select_option(value: Any) -> Any:
    """Return the option value of a Baserow single-select field."""
    # Single select fields come back as {"id": 1, "value": "todo", "color": "blue"}
    if isinstance(value, dict):
        return value.get("value")
    return value


class Task(BaseModel):
    """A row of the todo table."""

    model_config = ConfigDict(extra="ignore")

    id: int
    task_name: str = ""
    status: TaskStatus = "todo"
    priority: Priority = "medium"
    category: str = "General"
    admin_block: AdminBlock = "afternoon"
    due_date: datetime | None = None
    notes: str | None = None

    @field_validator("status", "priority", "admin_block", mode="before")
    @classmethod
    def _select_value(cls, value: Any, info: ValidationInfo) -> Any:
        value = _unwrap_select_option(value)
        # Empty single select cells are returned as null
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("task_name", "category", mode="before")
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        # Empty text cells are returned as null
        return "" if value is None else value

    @field_validator("due_date", "notes", mode="before")
    @classmethod
    def _empty_to_none(cls, value: Any) -> Any:
        return None if value == "" else value

    @property
    def is_completed(self) -> bool:
        """Whether the task is checked off."""
        return self.status == "completed"


class RowPage(BaseModel):
    """Response of the list rows endpoint."""

    model_config = ConfigDict(extra="ignore")

    count: int | None = None
    next: str | None = None
    previous: str | None = None
    results: list[Task] = Field(default_factory=list)

    @property
    def truncated(self) -> bool:
        """Whether the table holds more rows than this page returned."""
        if self.next:
            return True
        return self.count is not None and self.count > len(self.results)


class TaskCreate(BaseModel):
    """Body of the create row request."""

    task_name: str
    status: TaskStatus = "todo"
    priority: Priority = "medium"
    category: str = "General"
    admin_block: AdminBlock = "afternoon"
    due_date: datetime | None = None
    notes: str | None = None


class StatusUpdate(BaseModel):
    """Body of the update row request. Only the status is ever patched."""

    status: TaskStatus
