"""Delivery channel abstraction used by the room core.

The core only ever needs three things from a client channel: a stable id,
whether it is still open, and a non-blocking ``send``. ``WebSocketConnection``
is the FastAPI binding; tests provide their own in-memory implementation.
"""
from __future__ import annotations

import logging
import math
import uuid
from typing import Optional, Protocol

import anyio
from fastapi import WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState

log = logging.getLogger(__name__)


class Connection(Protocol):
    id: str

    @property
    def is_open(self) -> bool:
        ...

    def send(self, data: str) -> None:
        """Queue one serialized message. Must never block."""
        ...


class WebSocketConnection:
    """A FastAPI ``WebSocket`` with an unbounded outbound queue.

    ``send`` only enqueues; :meth:`pump` drains the queue onto the socket and
    is meant to run as its own task for the lifetime of the connection, so a
    slow client never holds up the event loop or any other client.
    """

    def __init__(self, websocket: WebSocket, connection_id: Optional[str] = None):
        self.id = connection_id or str(uuid.uuid4())
        self.websocket = websocket
        self._outbox, self._pending = anyio.create_memory_object_stream(max_buffer_size=math.inf)
        self._closed = False

    def __repr__(self) -> str:
        return f"<WebSocketConnection {self.id}>"

    @property
    def is_open(self) -> bool:
        return not self._closed and self.websocket.client_state == WebSocketState.CONNECTED

    def send(self, data: str) -> None:
        if not self.is_open:
            return
        try:
            self._outbox.send_nowait(data)
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            self._closed = True

    async def pump(self) -> None:
        async with self._pending:
            async for data in self._pending:
                try:
                    await self.websocket.send_text(data)
                except (WebSocketDisconnect, RuntimeError) as exc:
                    log.warning(f"Dropping outbound messages for {self.id}: {exc!r}")
                    self._closed = True
                    return

    def close(self) -> None:
        """Stop accepting messages; :meth:`pump` finishes once the queue drains."""
        self._closed = True
        self._outbox.close()


__all__ = ["Connection", "WebSocketConnection"]
