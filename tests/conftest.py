import asyncio
import itertools
import json

import pytest

from runforyourlife.broadcast import BroadcastHub
from runforyourlife.game_logic import MessageRouter
from runforyourlife.room import Room
from runforyourlife.rounds import RoundController

_ids = itertools.count(1)


# ---------------------------------------------------------------------------
# In-memory connection
# ---------------------------------------------------------------------------

class FakeConnection:
    """Records every message the server queues for it, decoded from JSON."""

    def __init__(self, connection_id=None):
        self.id = connection_id or f"conn-{next(_ids)}"
        self.sent: list[dict] = []
        self.open = True

    @property
    def is_open(self):
        return self.open

    def send(self, data):
        self.sent.append(json.loads(data))

    def of_type(self, msg_type):
        return [m for m in self.sent if m["type"] == msg_type]

    def last(self, msg_type):
        found = self.of_type(msg_type)
        return found[-1] if found else None

    def types(self):
        return [m["type"] for m in self.sent]

    def clear(self):
        self.sent.clear()


class SleepGate:
    """Stand-in for ``asyncio.sleep`` that waits until the test releases it."""

    def __init__(self):
        self.delays = []
        self.release = asyncio.Event()

    async def __call__(self, delay):
        self.delays.append(delay)
        await self.release.wait()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def room():
    return Room()


@pytest.fixture()
def hub(room):
    return BroadcastHub(room.players)


@pytest.fixture()
def gate():
    return SleepGate()


@pytest.fixture()
def rounds(room, hub, gate):
    return RoundController(room, hub, sleep=gate)


@pytest.fixture()
def router(room, rounds, hub):
    return MessageRouter(room, rounds, hub)


@pytest.fixture()
def join(router):
    """Connect a fake client and send ``join`` for it."""

    def _join(name="Player", avatar=""):
        conn = FakeConnection()
        router.handle_message(conn, json.dumps({"type": "join", "name": name, "avatar": avatar}))
        return conn

    return _join


def send(router, conn, **payload):
    router.handle_message(conn, json.dumps(payload))
