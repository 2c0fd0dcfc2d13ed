"""WebSocket endpoint pushing page state."""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from baserow_todo.api.models import state_to_response
from baserow_todo.factory import get_controller, get_page_connections

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """WebSocket endpoint for live state updates.

    The current state is sent right after connecting; later changes are
    published by the controller callback.
    """
    pages = get_page_connections()
    await pages.attach(websocket, state_to_response(get_controller()))
    try:
        while True:
            data = await websocket.receive_text()
            logger.debug(f"[WebSocket] Received from page: {data}")
            if data == "ping":
                await websocket.send_text("pong")

    except WebSocketDisconnect:
        logger.info("[WebSocket] Page disconnected normally")
        pages.detach(websocket)
    except Exception as e:
        logger.error(f"[WebSocket] Error: {e}", exc_info=True)
        pages.detach(websocket)
