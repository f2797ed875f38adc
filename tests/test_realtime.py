"""
Tests for the real-time channel.

This test suite covers:
- Room membership in the WebSocket hub
- Global versus per-user delivery
- Dropping sockets that fail to receive
- The /ws endpoint join/leave protocol
"""

import asyncio
import uuid

import pytest

from adapters.broadcast import Broadcaster, NullBroadcaster, WebSocketHub, user_room
from test_fixtures import client


class FakeWebSocket:
    def __init__(self, fail=False):
        self.accepted = False
        self.sent = []
        self.fail = fail

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


def test_user_room_name():
    user_id = uuid.uuid4()
    assert user_room(user_id) == f"user_{user_id}"


def test_broadcaster_interface_is_abstract():
    with pytest.raises(TypeError):
        Broadcaster()

    class Incomplete(Broadcaster):
        pass

    with pytest.raises(TypeError):
        Incomplete()


def test_null_broadcaster_accepts_anything():
    NullBroadcaster().publish("orderCreated", {"order_id": "x"}, room="user_1")


def test_publish_without_connections_is_a_noop():
    WebSocketHub().publish("orderCreated", {"order_id": "x"})


@pytest.mark.anyio
async def test_global_and_room_delivery():
    hub = WebSocketHub()
    alice, bob = FakeWebSocket(), FakeWebSocket()
    await hub.connect(alice, "alice")
    await hub.connect(bob)

    await hub.broadcast("orderUpdated", {"n": 1})
    await hub.broadcast("newNotification", {"n": 2}, room=user_room("alice"))

    assert alice.accepted and bob.accepted
    assert [m["event"] for m in alice.sent] == ["orderUpdated", "newNotification"]
    assert [m["event"] for m in bob.sent] == ["orderUpdated"]
    assert hub.connection_count() == 2
    assert hub.connection_count(user_room("alice")) == 1


@pytest.mark.anyio
async def test_publish_from_sync_code_is_delivered():
    hub = WebSocketHub()
    ws = FakeWebSocket()
    await hub.connect(ws, "carol")

    hub.publish("orderCreated", {"order_id": "abc"}, room=user_room("carol"))
    for _ in range(20):
        if ws.sent:
            break
        await asyncio.sleep(0.01)

    assert ws.sent == [{"event": "orderCreated", "data": {"order_id": "abc"}}]


@pytest.mark.anyio
async def test_failing_socket_is_dropped():
    hub = WebSocketHub()
    good, bad = FakeWebSocket(), FakeWebSocket(fail=True)
    await hub.connect(good, "dave")
    await hub.connect(bad, "dave")

    await hub.broadcast("orderUpdated", {})

    assert hub.connection_count() == 1
    assert hub.connection_count(user_room("dave")) == 1
    assert len(good.sent) == 1


@pytest.mark.anyio
async def test_leave_and_disconnect_clean_up_rooms():
    hub = WebSocketHub()
    ws = FakeWebSocket()
    await hub.connect(ws, "erin")

    hub.leave(ws, user_room("erin"))
    assert hub.connection_count(user_room("erin")) == 0

    hub.join(ws, user_room("erin"))
    hub.disconnect(ws)
    assert hub.connection_count() == 0
    assert hub.connection_count(user_room("erin")) == 0


def test_websocket_join_and_leave():
    user_id = str(uuid.uuid4())
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"action": "join", "user_id": user_id})
        assert ws.receive_json() == {"event": "join", "data": {"room": f"user_{user_id}"}}

        ws.send_json({"action": "leave", "user_id": user_id})
        assert ws.receive_json()["event"] == "leave"

        ws.send_json({"action": "dance", "user_id": user_id})
        assert ws.receive_json()["event"] == "error"


def test_websocket_requires_user_id_in_messages():
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"action": "join"})
        assert ws.receive_json() == {"event": "error", "data": "user_id required"}
