"""Inbound message handling for the tap room.

This module stays framework-agnostic: the WebSocket router hands it a
:class:`~runforyourlife.connection.Connection` and raw text, and everything
else (validation, dispatch, error replies, disconnect cleanup) happens here.
"""
from __future__ import annotations

import json
import logging
from typing import Callable, Dict

from .broadcast import BroadcastHub
from .connection import Connection
from .errors import ProtocolError, RoomError, UnknownMessageType
from .room import Room
from .rounds import RoundController
from .schemas import ErrorMessage, WelcomeMessage

log = logging.getLogger(__name__)

Handler = Callable[[Connection, dict], None]


class MessageRouter:
    def __init__(self, room: Room, rounds: RoundController, hub: BroadcastHub):
        self.room = room
        self.rounds = rounds
        self.hub = hub
        self._handlers: Dict[str, Handler] = {
            "join": self._handle_join,
            "set_duration": self._handle_set_duration,
            "start_round": self._handle_start_round,
            "tap": self._handle_tap,
        }

    # ---------------------------------------------------------------------
    # Entry points
    # ---------------------------------------------------------------------

    def handle_message(self, connection: Connection, raw: str | bytes) -> None:
        try:
            data = self._parse(raw)
            kind = data.get("type")
            handler = self._handlers.get(kind) if isinstance(kind, str) else None
            if handler is None:
                raise UnknownMessageType()
            handler(connection, data)
        except RoomError as exc:
            log.debug(f"Rejected message from {connection.id}: {exc.message}")
            self.hub.send_to(connection, ErrorMessage(message=exc.message))

    def handle_disconnect(self, connection: Connection) -> None:
        if connection.id not in self.room.players:
            return
        self.room.players.remove(connection.id)
        self.room.update_host()
        self.rounds.handle_player_left()
        self.hub.broadcast_state(self.room)

    # ---------------------------------------------------------------------
    # Handlers
    # ---------------------------------------------------------------------

    def _handle_join(self, connection: Connection, data: dict) -> None:
        already_joined = connection.id in self.room.players
        player_id = self.room.players.join(connection, data.get("name"), data.get("avatar"))
        if already_joined:
            return
        self.room.update_host()
        self.hub.send_to(
            connection,
            WelcomeMessage(player_id=player_id, host_id=self.room.host_id, duration=self.room.round.duration),
        )
        self.hub.broadcast_state(self.room)

    def _handle_set_duration(self, connection: Connection, data: dict) -> None:
        self.rounds.set_duration(connection.id, data.get("duration"))

    def _handle_start_round(self, connection: Connection, data: dict) -> None:
        self.rounds.start_round(connection.id)

    def _handle_tap(self, connection: Connection, data: dict) -> None:
        self.rounds.tap(connection.id)

    @staticmethod
    def _parse(raw: str | bytes) -> dict:
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            raise ProtocolError() from None
        if not isinstance(data, dict):
            raise ProtocolError()
        return data


__all__ = ["MessageRouter"]
