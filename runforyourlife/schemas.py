"""Pydantic data schemas shared by the room core and the transport layer.

Runtime records (players, the round, its result) and every server → client
message live here. All of them serialise with camelCase keys, which is what
the browser client expects (``hostId``, ``isHost``, ``startTime`` ...).
"""
from __future__ import annotations

import asyncio
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, PrivateAttr
from pydantic.alias_generators import to_camel

from .constants import DEFAULT_DURATION


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


# -----------------------------
# Runtime records
# -----------------------------

class Player(WireModel):
    """A joined participant. Only the registry holds these."""

    id: str
    name: str
    avatar: str = ""
    taps: int = 0
    wins: int = 0
    losses: int = 0
    # Monotonic clock reading; only used to order players for host election.
    joined_at: float


class RoundInfo(WireModel):
    in_progress: bool = False
    duration: int = DEFAULT_DURATION
    start_time: Optional[int] = None  # epoch ms
    end_time: Optional[int] = None  # epoch ms

    # Pending end-of-round task while the round is running.
    _timer: Optional[asyncio.Task] = PrivateAttr(default=None)

    @property
    def timer(self) -> Optional[asyncio.Task]:
        return self._timer

    def attach_timer(self, task: asyncio.Task) -> None:
        self._timer = task

    def detach_timer(self) -> Optional[asyncio.Task]:
        task, self._timer = self._timer, None
        return task


class RoundResult(WireModel):
    winners: List[str]
    losers: List[str]


class PlayerView(WireModel):
    """Public view of a :class:`Player` inside a state snapshot."""

    id: str
    name: str
    avatar: str
    taps: int
    wins: int
    losses: int
    is_host: bool


# -----------------------------
# Server → client messages
# -----------------------------

class WelcomeMessage(WireModel):
    type: Literal["welcome"] = "welcome"
    player_id: str
    host_id: Optional[str]
    duration: int


class StateMessage(WireModel):
    type: Literal["state"] = "state"
    players: List[PlayerView]
    host_id: Optional[str]
    round: RoundInfo
    round_result: Optional[RoundResult] = None


class RoundStartedMessage(WireModel):
    type: Literal["round_started"] = "round_started"
    duration: int
    start_time: int
    end_time: int


class RoundEndedMessage(WireModel):
    type: Literal["round_ended"] = "round_ended"
    result: Optional[RoundResult]


class ErrorMessage(WireModel):
    type: Literal["error"] = "error"
    message: str


class StatusResponse(BaseModel):
    status: str = "ok"


__all__ = [
    "WireModel",
    "Player",
    "RoundInfo",
    "RoundResult",
    "PlayerView",
    "WelcomeMessage",
    "StateMessage",
    "RoundStartedMessage",
    "RoundEndedMessage",
    "ErrorMessage",
    "StatusResponse",
]
