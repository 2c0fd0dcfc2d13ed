"""Task API endpoints."""

import logging
from typing import NoReturn

from fastapi import APIRouter, HTTPException

from baserow_todo.api.models import (
    DraftRequest,
    FiltersRequest,
    StateResponse,
    state_to_response,
)
from baserow_todo.baserow.client import BaserowError
from baserow_todo.factory import get_controller
from baserow_todo.todo.controller import OperationInProgressError, TaskNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()


def _raise_http(e: Exception) -> NoReturn:
    """Map controller errors to HTTP errors."""
    if isinstance(e, OperationInProgressError):
        raise HTTPException(status_code=409, detail=str(e)) from e
    if isinstance(e, TaskNotFoundError):
        raise HTTPException(status_code=404, detail=str(e)) from e
    if isinstance(e, BaserowError):
        # The controller already holds the user-facing message
        detail = get_controller().state.error or str(e)
        raise HTTPException(status_code=502, detail=detail) from e
    raise e


@router.get("/state", response_model=StateResponse)
async def get_state() -> StateResponse:
    """Get the rendered page state.

    Returns:
        Filtered tasks, stats, filters, draft and sync status
    """
    return state_to_response(get_controller())


@router.post("/tasks/reload", response_model=StateResponse)
async def reload_tasks() -> StateResponse:
    """Reload all rows from Baserow, replacing the cached list.

    Raises:
        HTTPException: 409 while another call is syncing, 502 if Baserow fails
    """
    controller = get_controller()
    try:
        await controller.load_tasks()
    except (OperationInProgressError, BaserowError) as e:
        _raise_http(e)
    return state_to_response(controller)


@router.post("/tasks", response_model=StateResponse)
async def create_task(request: DraftRequest | None = None) -> StateResponse:
    """Submit the draft as a new task.

    Args:
        request: Optional draft fields applied before submitting

    Returns:
        Page state; unchanged if the task name is blank

    Raises:
        HTTPException: 409 while another call is syncing, 502 if Baserow fails
    """
    controller = get_controller()
    if request is not None:
        await controller.update_draft(**request.changes())

    try:
        task = await controller.create_task()
    except (OperationInProgressError, BaserowError) as e:
        _raise_http(e)

    if task is None:
        logger.debug("Blank task name, nothing created")
    return state_to_response(controller)


@router.patch("/tasks/{task_id}/toggle", response_model=StateResponse)
async def toggle_task(task_id: int) -> StateResponse:
    """Toggle a task between todo and completed.

    Raises:
        HTTPException: 404 for an unknown task, 409 while syncing, 502 if Baserow fails
    """
    controller = get_controller()
    try:
        await controller.toggle_task(task_id)
    except (TaskNotFoundError, OperationInProgressError, BaserowError) as e:
        _raise_http(e)
    return state_to_response(controller)


@router.delete("/tasks/{task_id}", response_model=StateResponse)
async def delete_task(task_id: int) -> StateResponse:
    """Delete a task.

    Raises:
        HTTPException: 409 while another call is syncing, 502 if Baserow fails
    """
    controller = get_controller()
    try:
        await controller.delete_task(task_id)
    except (OperationInProgressError, BaserowError) as e:
        _raise_http(e)
    return state_to_response(controller)


@router.put("/filters", response_model=StateResponse)
async def set_filters(request: FiltersRequest) -> StateResponse:
    controller = get_controller()
    await controller.set_filters(request.status_filter, request.block_filter)
    return state_to_response(controller)


@router.patch("/draft", response_model=StateResponse)
async def update_draft(request: DraftRequest) -> StateResponse:
    """Edit fields of the new-task form."""
    controller = get_controller()
    await controller.update_draft(**request.changes())
    return state_to_response(controller)


@router.delete("/error", response_model=StateResponse)
async def clear_error() -> StateResponse:
    """Dismiss the current error message."""
    controller = get_controller()
    await controller.clear_error()
    return state_to_response(controller)
