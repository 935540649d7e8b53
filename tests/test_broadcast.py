from conftest import FakeConnection
from runforyourlife.broadcast import assemble_snapshot
from runforyourlife.schemas import ErrorMessage


def test_closed_connections_are_skipped(room, hub):
    alice, bob = FakeConnection(), FakeConnection()
    room.players.join(alice, "Alice")
    room.players.join(bob, "Bob")
    bob.open = False

    hub.broadcast_state(room)

    assert alice.types() == ["state"]
    assert bob.sent == []


def test_unjoined_connections_get_no_broadcasts(room, hub):
    alice, lurker = FakeConnection(), FakeConnection()
    room.players.join(alice, "Alice")
    hub.broadcast_state(room)
    assert lurker.sent == []


def test_send_to_skips_closed_connection(hub):
    conn = FakeConnection()
    conn.open = False
    hub.send_to(conn, ErrorMessage(message="nope"))
    assert conn.sent == []


def test_snapshot_reflects_live_state(room):
    alice = FakeConnection()
    room.players.join(alice, "Alice")
    room.update_host()

    before = assemble_snapshot(room)
    room.players.get(alice.id).taps = 7
    room.round.duration = 30
    after = assemble_snapshot(room)

    assert before.players[0].taps == 0
    assert before.round.duration == 10
    assert after.players[0].taps == 7
    assert after.round.duration == 30
    assert after.players[0].is_host is True
