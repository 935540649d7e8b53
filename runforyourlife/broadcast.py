"""Snapshot assembly and fan-out to every joined connection."""
from __future__ import annotations

import logging

from .connection import Connection
from .room import PlayerRegistry, Room
from .schemas import PlayerView, StateMessage, WireModel

log = logging.getLogger(__name__)


def assemble_snapshot(room: Room) -> StateMessage:
    """Build the full ``state`` message from the live room. Never cached."""
    return StateMessage(
        players=[
            PlayerView(
                id=p.id,
                name=p.name,
                avatar=p.avatar,
                taps=p.taps,
                wins=p.wins,
                losses=p.losses,
                is_host=p.id == room.host_id,
            )
            for p in room.players.snapshot()
        ],
        host_id=room.host_id,
        round=room.round.model_copy(),
        round_result=room.round_result.model_copy() if room.round_result else None,
    )


class BroadcastHub:
    def __init__(self, players: PlayerRegistry):
        self.players = players

    def broadcast(self, event: WireModel) -> None:
        """Serialize *event* once and queue it on every open, joined connection."""
        data = event.to_json()
        for conn in self.players.connections():
            if conn.is_open:
                conn.send(data)

    def send_to(self, connection: Connection, event: WireModel) -> None:
        if connection.is_open:
            connection.send(event.to_json())
        else:
            log.debug(f"Skipping {event.__class__.__name__} for closed connection {connection.id}")

    def broadcast_state(self, room: Room) -> None:
        self.broadcast(assemble_snapshot(room))


__all__ = ["assemble_snapshot", "BroadcastHub"]
