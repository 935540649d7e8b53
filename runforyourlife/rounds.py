"""Round state machine: configuration, start, taps, timed end and scoring.

The controller has two states, idle and running, read from
``room.round.in_progress``. Every public method is synchronous: it mutates
the room and queues its broadcasts in a single step of the event loop, so
no two operations (including the timer firing) can interleave.
"""
from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Awaitable, Callable, Optional

from .broadcast import BroadcastHub
from .constants import MAX_DURATION, MIN_DURATION, MIN_PLAYERS_TO_START
from .errors import ActiveRound, AlreadyRunning, InsufficientPlayers, InvalidDuration, NotHost
from .room import Room
from .schemas import RoundEndedMessage, RoundResult, RoundStartedMessage

log = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def _now_ms() -> int:
    return int(time.time() * 1000)


def parse_duration(value: object) -> int:
    """Return *value* as whole seconds within bounds or raise ``InvalidDuration``."""
    if isinstance(value, bool):
        raise InvalidDuration()
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise InvalidDuration() from None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise InvalidDuration()
        value = int(value)
    if not isinstance(value, int) or not MIN_DURATION <= value <= MAX_DURATION:
        raise InvalidDuration()
    return value


def compute_result(room: Room) -> Optional[RoundResult]:
    """Everyone tied on the most taps wins; everyone tied on the fewest loses."""
    players = room.players.snapshot()
    if not players:
        return None
    max_taps = max(p.taps for p in players)
    min_taps = min(p.taps for p in players)
    return RoundResult(
        winners=[p.id for p in players if p.taps == max_taps],
        losers=[p.id for p in players if p.taps == min_taps],
    )


class RoundController:
    def __init__(self, room: Room, hub: BroadcastHub, sleep: Sleep = asyncio.sleep):
        self.room = room
        self.hub = hub
        self._sleep = sleep

    @property
    def running(self) -> bool:
        return self.room.round.in_progress

    # -------------------- Host commands -------------------- #

    def set_duration(self, requester_id: str, value: object) -> None:
        if not self.room.is_host(requester_id):
            raise NotHost("Only the host can change the duration.")
        if self.running:
            raise ActiveRound()
        self.room.round.duration = parse_duration(value)
        log.info(f"Round duration set to {self.room.round.duration}s")
        self.hub.broadcast_state(self.room)

    def start_round(self, requester_id: str) -> None:
        if not self.room.is_host(requester_id):
            raise NotHost("Only the host can start a round.")
        if self.running:
            raise AlreadyRunning()
        if len(self.room.players) < MIN_PLAYERS_TO_START:
            raise InsufficientPlayers()

        rnd = self.room.round
        self.room.players.reset_taps_for_new_round()
        self.room.round_result = None
        rnd.in_progress = True
        rnd.start_time = _now_ms()
        rnd.end_time = rnd.start_time + rnd.duration * 1000

        self._cancel_timer()
        rnd.attach_timer(asyncio.get_running_loop().create_task(self._end_after(rnd.duration)))
        log.info(f"Round started with {len(self.room.players)} players for {rnd.duration}s")

        self.hub.broadcast(
            RoundStartedMessage(duration=rnd.duration, start_time=rnd.start_time, end_time=rnd.end_time)
        )
        self.hub.broadcast_state(self.room)

    # -------------------- Player input -------------------- #

    def tap(self, player_id: str) -> bool:
        """Count one tap. Returns ``False`` (and does nothing) when idle."""
        if not self.running:
            return False
        self.room.players.record_tap(player_id)
        self.hub.broadcast_state(self.room)
        return True

    # -------------------- Ending -------------------- #

    def end_round(self) -> None:
        if not self.running:
            return
        self._cancel_timer()

        rnd = self.room.round
        rnd.in_progress = False
        rnd.start_time = None
        rnd.end_time = None

        result = compute_result(self.room)
        if result is not None:
            self.room.players.apply_round_outcome(result.winners, result.losers)
        self.room.round_result = result
        log.info(f"Round ended: {result}")

        self.hub.broadcast(RoundEndedMessage(result=result))
        self.hub.broadcast_state(self.room)

    def handle_player_left(self) -> None:
        """End a running round early once too few players remain."""
        if self.running and len(self.room.players) < MIN_PLAYERS_TO_START:
            log.info("Too few players left; ending round early")
            self.end_round()

    async def _end_after(self, delay: float) -> None:
        await self._sleep(delay)
        # Drop our own handle first so end_round does not cancel this task.
        self.room.round.detach_timer()
        self.end_round()

    def _cancel_timer(self) -> None:
        task = self.room.round.detach_timer()
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()


__all__ = ["RoundController", "compute_result", "parse_duration"]
