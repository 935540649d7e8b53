from __future__ import annotations

import logging

import anyio
from fastapi import APIRouter, WebSocket

from ..connection import WebSocketConnection
from ..game_logic import MessageRouter

log = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["ws"])


@router.websocket("/ws")
@router.websocket("/")
async def websocket_endpoint(ws: WebSocket):
    messages: MessageRouter = ws.app.state.messages
    await ws.accept()
    connection = WebSocketConnection(ws)
    log.info(f"Connection {connection.id} opened")

    try:
        async with anyio.create_task_group() as task_group:
            # Outbound queue drains concurrently with the read loop.
            task_group.start_soon(connection.pump)
            try:
                while True:
                    frame = await ws.receive()
                    if frame["type"] == "websocket.disconnect":
                        break
                    raw = frame.get("text")
                    messages.handle_message(connection, raw if raw is not None else frame.get("bytes", b""))
            finally:
                connection.close()
    finally:
        log.info(f"Connection {connection.id} closed")
        messages.handle_disconnect(connection)
