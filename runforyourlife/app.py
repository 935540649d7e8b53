from __future__ import annotations

import logging
import os
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from . import config
from .broadcast import BroadcastHub
from .game_logic import MessageRouter
from .room import Room
from .rounds import RoundController
from .routers import status as status_router
from .routers import websockets as ws_router

log = logging.getLogger(__name__)


def create_app(
    room: Optional[Room] = None,
    static_dir: Optional[str] = config.STATIC_DIR,
    cors_origins: List[str] = config.CORS_ORIGINS,
) -> FastAPI:
    """Build the application around a single room.

    The room and its collaborators hang off ``app.state`` so that every
    request handler works on the same instance.
    """
    app = FastAPI(title="RunForYourLife")

    room = room or Room()
    hub = BroadcastHub(room.players)
    rounds = RoundController(room, hub)
    app.state.room = room
    app.state.hub = hub
    app.state.rounds = rounds
    app.state.messages = MessageRouter(room, rounds, hub)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(status_router.router)
    app.include_router(ws_router.router)

    # Browser client, if one has been deployed next to the server.
    if static_dir and os.path.isdir(static_dir):
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="public")
    elif static_dir:
        log.info(f"Static directory {static_dir!r} not found; serving API only")

    return app


__all__ = ["create_app"]
