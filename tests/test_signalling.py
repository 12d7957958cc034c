"""
Tests for the socket.io signalling handlers
"""
from unittest.mock import AsyncMock, call

import pytest

from eduko.relay import SessionRegistry
from eduko.signalling import SignallingNamespace, create_signalling_server, relay_registry


@pytest.fixture
def namespace():
    ns = SignallingNamespace(SessionRegistry())
    ns.emit = AsyncMock()
    return ns


async def _connect(ns, *sids):
    for sid in sids:
        await ns.on_connect(sid, {})


def _signals_to(ns, sid):
    return [c for c in ns.emit.call_args_list if c.args[0] == "signal" and c.kwargs.get("to") == sid]


@pytest.mark.asyncio
async def test_offer_reaches_peer_in_same_room(namespace):
    await _connect(namespace, "A", "B")
    await namespace.on_join_session("A", {"sessionId": "room1"})
    await namespace.on_join_session("B", {"sessionId": "room1"})

    await namespace.on_signal("A", {"sessionId": "room1", "payload": {"type": "offer"}})

    namespace.emit.assert_awaited_once_with("signal", {"from": "A", "payload": {"type": "offer"}}, to="B")
    assert _signals_to(namespace, "A") == []


@pytest.mark.asyncio
async def test_peer_in_other_room_receives_nothing(namespace):
    await _connect(namespace, "A", "B", "C")
    await namespace.on_join_session("A", {"sessionId": "room1"})
    await namespace.on_join_session("B", {"sessionId": "room1"})
    await namespace.on_join_session("C", {"sessionId": "room2"})

    await namespace.on_signal("A", {"sessionId": "room1", "payload": {"candidate": "ice"}})

    assert _signals_to(namespace, "C") == []
    assert len(_signals_to(namespace, "B")) == 1


@pytest.mark.asyncio
async def test_signal_after_disconnect_has_no_recipients(namespace):
    await _connect(namespace, "A", "B")
    await namespace.on_join_session("A", {"sessionId": "room1"})
    await namespace.on_join_session("B", {"sessionId": "room1"})

    await namespace.on_disconnect("A", "client disconnect")
    await namespace.on_signal("B", {"sessionId": "room1", "payload": {"type": "answer"}})

    namespace.emit.assert_not_awaited()
    assert "A" not in namespace.registry


@pytest.mark.asyncio
async def test_remaining_members_still_receive_after_disconnect(namespace):
    await _connect(namespace, "A", "B", "C")
    for sid in ("A", "B", "C"):
        await namespace.on_join_session(sid, {"sessionId": "room1"})

    await namespace.on_disconnect("B")
    await namespace.on_signal("A", {"sessionId": "room1", "payload": "sdp"})

    namespace.emit.assert_awaited_once_with("signal", {"from": "A", "payload": "sdp"}, to="C")


@pytest.mark.asyncio
async def test_payload_is_forwarded_verbatim(namespace):
    await _connect(namespace, "A", "B")
    await namespace.on_join_session("B", {"sessionId": "room1"})
    payload = {"sdp": "v=0\r\n", "nested": [1, {"x": None}]}

    await namespace.on_signal("A", {"sessionId": "room1", "payload": payload})

    namespace.emit.assert_awaited_once_with("signal", {"from": "A", "payload": payload}, to="B")


@pytest.mark.asyncio
async def test_failed_delivery_does_not_block_other_recipients(namespace):
    await _connect(namespace, "A", "B", "C")
    for sid in ("A", "B", "C"):
        await namespace.on_join_session(sid, {"sessionId": "room1"})

    async def flaky_emit(event, data, to=None):
        if to == "B":
            raise ConnectionError("gone")

    namespace.emit.side_effect = flaky_emit

    await namespace.on_signal("A", {"sessionId": "room1", "payload": 1})

    assert call("signal", {"from": "A", "payload": 1}, to="C") in namespace.emit.await_args_list


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [None, "room1", {"sessionId": ""}, {"sessionId": 7}, {}])
async def test_malformed_join_answers_with_error(namespace, body):
    await _connect(namespace, "A")

    await namespace.on_join_session("A", body)

    namespace.emit.assert_awaited_once()
    event, data = namespace.emit.await_args.args
    assert event == "error"
    assert data["event"] == "join-session"
    assert data["code"] in {"invalid_session_id", "relay_error"}
    assert namespace.emit.await_args.kwargs == {"to": "A"}
    assert namespace.registry.session_of("A") is None


@pytest.mark.asyncio
async def test_malformed_signal_answers_with_error(namespace):
    await _connect(namespace, "A", "B")
    await namespace.on_join_session("B", {"sessionId": "room1"})

    await namespace.on_signal("A", {"payload": {"type": "offer"}})

    namespace.emit.assert_awaited_once()
    assert namespace.emit.await_args.args[0] == "error"
    assert namespace.emit.await_args.kwargs == {"to": "A"}


@pytest.mark.asyncio
async def test_full_session_is_reported():
    ns = SignallingNamespace(SessionRegistry(max_peers_per_session=1))
    ns.emit = AsyncMock()
    await _connect(ns, "A", "B")
    await ns.on_join_session("A", {"sessionId": "room1"})

    await ns.on_join_session("B", {"sessionId": "room1"})

    event, data = ns.emit.await_args.args
    assert event == "error"
    assert data["code"] == "session_full"
    assert data["details"] == {"maxPeers": 1}


@pytest.mark.asyncio
async def test_dashed_event_names_dispatch_to_handlers(namespace):
    await namespace.trigger_event("connect", "A", {})
    await namespace.trigger_event("connect", "B", {})
    await namespace.trigger_event("join-session", "A", {"sessionId": "room1"})
    await namespace.trigger_event("join-session", "B", {"sessionId": "room1"})

    await namespace.trigger_event("signal", "B", {"sessionId": "room1", "payload": "hi"})

    assert namespace.registry.members("room1") == {"A", "B"}
    namespace.emit.assert_awaited_once_with("signal", {"from": "B", "payload": "hi"}, to="A")


def test_server_exposes_registry():
    registry = SessionRegistry()
    sio = create_signalling_server(registry)
    assert relay_registry(sio) is registry
