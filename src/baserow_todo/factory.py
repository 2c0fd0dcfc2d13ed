"""Dependency injection factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from baserow_todo.api.models import state_to_response
from baserow_todo.baserow.client import BaserowClient, BaserowError
from baserow_todo.config import Config
from baserow_todo.todo.controller import TodoController
from baserow_todo.websocket.pages import PageConnections

logger = logging.getLogger(__name__)

# Global config instance for dependency injection
_config: Config | None = None

# Global table client, controller and open pages
_client: BaserowClient | None = None
_controller: TodoController | None = None
_pages: PageConnections | None = None


def get_config() -> Config:
    """Get or create Config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_table_client() -> BaserowClient:
    """Get or create the Baserow client for the configured table."""
    global _client
    if _client is None:
        config = get_config()
        if not config.api_token:
            logger.warning("[Factory] No API token configured, Baserow will reject requests")
        _client = BaserowClient(config)
    return _client


def get_page_connections() -> PageConnections:
    """Get or create PageConnections singleton."""
    global _pages
    if _pages is None:
        _pages = PageConnections()
    return _pages


def get_controller() -> TodoController:
    """Get or create TodoController singleton.

    The controller pushes every state change to connected pages.
    """
    global _controller
    if _controller is None:
        _controller = TodoController(get_table_client())
        _controller.set_on_change(broadcast_state)
    return _controller


async def broadcast_state() -> None:
    """Push the current page state to all open pages."""
    await get_page_connections().publish(state_to_response(get_controller()))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle - initial load and client shutdown."""
    logger.info("[Lifespan] Loading tasks from Baserow...")
    try:
        await get_controller().load_tasks()
    except BaserowError as e:
        # The page shows the error and can retry with Sync
        logger.error(f"[Lifespan] Initial load failed: {e}")
    try:
        yield
    finally:
        if _client is not None:
            logger.info("[Lifespan] Closing Baserow client...")
            await _client.aclose()


def create_app() -> FastAPI:
    """Create FastAPI application (composition root)."""
    from baserow_todo.api.tasks import router as tasks_router
    from baserow_todo.api.websocket import router as ws_router

    app = FastAPI(
        title="Baserow Todo",
        description="Work todo list backed by a Baserow table",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(tasks_router, prefix="/api")
    app.include_router(ws_router)  # WebSocket at /ws

    # Mount the single page (HTML/JS)
    static_dir = Path(__file__).parent / "static"
    if static_dir.exists():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")

    return app
