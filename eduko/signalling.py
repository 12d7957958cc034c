"""Socket.IO front end of the signalling relay.

Translates the wire events into calls on a SessionRegistry and fans signals
out to the other members of a session.
"""

import asyncio
import logging
from typing import Any

import socketio

from .relay import RelayError, SessionRegistry, validate_session_id

logger = logging.getLogger(__name__)


class SignallingNamespace(socketio.AsyncNamespace):
    """Socket.IO handlers for ``join-session`` and ``signal``.

    Payloads are forwarded verbatim as ``{"from": <sender sid>, "payload": ...}``
    to every other member of the named session. Bad input is answered with an
    ``error`` event to the sender only.
    """

    def __init__(self, registry: SessionRegistry, namespace: str | None = None):
        super().__init__(namespace)
        self.registry = registry

    async def trigger_event(self, event, *args):
        # Wire events use dashes ("join-session"); handler names cannot.
        return await super().trigger_event(event.replace("-", "_"), *args)

    async def on_connect(self, sid: str, environ: dict, auth: Any = None) -> None:
        self.registry.connect(sid)
        logger.info("client connected %s", sid)

    async def on_join_session(self, sid: str, data: Any = None) -> None:
        try:
            session_id = validate_session_id(self._field(data, "sessionId"))
            previous = self.registry.join(sid, session_id)
        except RelayError as exc:
            await self._reject(sid, "join-session", exc)
            return
        if previous is not None:
            logger.info("%s moved from %s to %s", sid, previous, session_id)
        else:
            logger.info("%s joined %s", sid, session_id)

    async def on_signal(self, sid: str, data: Any = None) -> None:
        try:
            session_id = validate_session_id(self._field(data, "sessionId"))
        except RelayError as exc:
            await self._reject(sid, "signal", exc)
            return

        recipients = self.registry.recipients(session_id, sid)
        message = {"from": sid, "payload": data.get("payload")}
        results = await asyncio.gather(
            *(self.emit("signal", message, to=peer_id) for peer_id in recipients),
            return_exceptions=True,
        )
        for peer_id, result in zip(recipients, results):
            if isinstance(result, Exception):
                logger.warning("signal from %s to %s dropped: %s", sid, peer_id, result)
        logger.debug("signal from %s relayed to %d peer(s) in %s", sid, len(recipients), session_id)

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        peer = self.registry.disconnect(sid)
        session_id = peer.session_id if peer is not None else None
        logger.info("disconnect %s (session=%s, reason=%s)", sid, session_id, reason)

    @staticmethod
    def _field(data: Any, name: str) -> Any:
        if not isinstance(data, dict):
            raise RelayError("message body must be an object", details={"received": type(data).__name__})
        return data.get(name)

    async def _reject(self, sid: str, event: str, exc: RelayError) -> None:
        logger.warning("rejected %s from %s: %s", event, sid, exc)
        body: dict[str, Any] = {"error": str(exc), "code": exc.code, "event": event}
        if exc.details is not None:
            body["details"] = exc.details
        await self.emit("error", body, to=sid)


def create_signalling_server(
    registry: SessionRegistry | None = None,
    *,
    cors_allowed_origins: str | list[str] = "*",
) -> socketio.AsyncServer:
    sio = socketio.AsyncServer(async_mode="asgi", cors_allowed_origins=cors_allowed_origins)
    sio.register_namespace(SignallingNamespace(registry or SessionRegistry()))
    return sio


def relay_registry(sio: socketio.AsyncServer) -> SessionRegistry:
    return sio.namespace_handlers["/"].registry
