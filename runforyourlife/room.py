from __future__ import annotations

import logging
import time
from typing import Dict, Iterable, List, Optional, Sequence

from .connection import Connection
from .constants import MAX_PLAYERS, NAME_MAX_LENGTH
from .errors import NameRequired, NotRegistered, RoomFull
from .schemas import Player, RoundInfo, RoundResult

log = logging.getLogger(__name__)


class PlayerRegistry:
    """Joined players and the connections used to reach them."""

    def __init__(self, max_players: int = MAX_PLAYERS):
        self.max_players = max_players
        self.players: Dict[str, Player] = {}
        # player id -> connection; never handed out past the broadcast hub
        self._connections: Dict[str, Connection] = {}
        self._last_joined_at = 0.0

    def __len__(self) -> int:
        return len(self.players)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self.players

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    # -------------------- Membership -------------------- #

    def join(self, connection: Connection, name: object, avatar: object = "") -> str:
        """Register *connection* as a player and return its id.

        A connection that already joined keeps its player untouched.
        """
        if not isinstance(name, str) or not name:
            raise NameRequired()
        if self.is_full:
            raise RoomFull()
        if connection.id in self.players:
            return connection.id

        player = Player(
            id=connection.id,
            name=name[:NAME_MAX_LENGTH],
            avatar=avatar if isinstance(avatar, str) else "",
            joined_at=self._next_join_time(),
        )
        self.players[player.id] = player
        self._connections[player.id] = connection
        log.info(f"Player {player.name!r} joined as {player.id} ({len(self)}/{self.max_players})")
        return player.id

    def _next_join_time(self) -> float:
        # Strictly increasing even on coarse clocks, so join order is never ambiguous.
        self._last_joined_at = max(time.monotonic(), self._last_joined_at + 1e-6)
        return self._last_joined_at

    def remove(self, player_id: str) -> None:
        player = self.players.pop(player_id, None)
        self._connections.pop(player_id, None)
        if player:
            log.info(f"Player {player.name!r} ({player_id}) left")

    def get(self, player_id: str) -> Optional[Player]:
        return self.players.get(player_id)

    def snapshot(self) -> List[Player]:
        """Players in join order."""
        return sorted(self.players.values(), key=lambda p: p.joined_at)

    def connections(self) -> List[Connection]:
        return [self._connections[p.id] for p in self.snapshot()]

    # -------------------- Counters -------------------- #

    def record_tap(self, player_id: str) -> None:
        player = self.players.get(player_id)
        if player is None:
            raise NotRegistered()
        player.taps += 1

    def reset_taps_for_new_round(self) -> None:
        for player in self.players.values():
            player.taps = 0

    def apply_round_outcome(self, winners: Iterable[str], losers: Iterable[str]) -> None:
        for pid in winners:
            if pid in self.players:
                self.players[pid].wins += 1
        for pid in losers:
            if pid in self.players:
                self.players[pid].losses += 1


def elect_host(players: Sequence[Player], current_host_id: Optional[str]) -> Optional[str]:
    """Keep the current host while registered, else pick the earliest joiner."""
    if current_host_id is not None and any(p.id == current_host_id for p in players):
        return current_host_id
    if not players:
        return None
    return min(players, key=lambda p: p.joined_at).id


class Room:
    """The one room this server hosts: players, host, round and last result."""

    def __init__(self, max_players: int = MAX_PLAYERS):
        self.players = PlayerRegistry(max_players)
        self.host_id: Optional[str] = None
        self.round = RoundInfo()
        self.round_result: Optional[RoundResult] = None

    def update_host(self) -> None:
        new_host = elect_host(self.players.snapshot(), self.host_id)
        if new_host != self.host_id:
            log.info(f"Host changed from {self.host_id} to {new_host}")
        self.host_id = new_host

    def is_host(self, player_id: str) -> bool:
        return self.host_id is not None and player_id == self.host_id


__all__ = ["PlayerRegistry", "elect_host", "Room"]
