"""Open task pages receiving live state pushes."""

import asyncio
import logging

from fastapi import WebSocket

from baserow_todo.api.models import StateResponse

logger = logging.getLogger(__name__)


def encode_state(state: StateResponse) -> str:
    """Wrap the page state in a ``{"type": "state", "state": ...}`` message."""
    return f'{{"type": "state", "state": {state.model_dump_json()}}}'


class PageConnections:
    """Websockets of open task pages.

    A page gets the full state when it attaches and again after every change.
    Identical consecutive states are pushed only once.
    """

    def __init__(self) -> None:
        """Initialize with no open pages."""
        self._pages: set[WebSocket] = set()
        self._last_payload: str | None = None

    @property
    def count(self) -> int:
        """Number of open pages."""
        return len(self._pages)

    async def attach(self, websocket: WebSocket, state: StateResponse) -> None:
        """Accept a page and send it the current state.

        Args:
            websocket: Connection of the page
            state: Page state at connect time
        """
        await websocket.accept()
        await websocket.send_text(encode_state(state))
        self._pages.add(websocket)
        self._last_payload = None
        logger.info(f"[PageConnections] Page attached (open: {self.count})")

    def detach(self, websocket: WebSocket) -> None:
        """Forget a page; unknown connections are ignored."""
        if websocket in self._pages:
            self._pages.discard(websocket)
            logger.info(f"[PageConnections] Page detached (open: {self.count})")

    async def publish(self, state: StateResponse) -> None:
        """Push a state to every open page.

        Pages whose socket fails are detached.
        """
        payload = encode_state(state)
        if payload == self._last_payload or not self._pages:
            self._last_payload = payload
            return
        self._last_payload = payload

        pages = list(self._pages)
        results = await asyncio.gather(
            *(page.send_text(payload) for page in pages), return_exceptions=True
        )
        for page, result in zip(pages, results):
            if isinstance(result, Exception):
                logger.warning(f"[PageConnections] Dropping page after failed push: {result}")
                self.detach(page)
        logger.debug(
            f"[PageConnections] Pushed state (syncing={state.syncing}) to {self.count} pages"
        )
