"""In-memory membership table for the signalling relay.

A peer belongs to at most one session. Joining a different session moves the
peer out of its previous one; disconnecting removes it everywhere. Sessions
have no record of their own: a session exists while at least one peer names
it and is dropped from the table with its last member.

The table is not thread-safe. It is owned by the relay's event loop and only
mutated from handlers running on that loop.
"""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


class RelayError(ValueError):
    code = "relay_error"

    def __init__(self, message: str, details: object | None = None):
        super().__init__(message)
        self.details = details


class InvalidSessionId(RelayError):
    code = "invalid_session_id"


class UnknownPeer(RelayError):
    code = "unknown_peer"


class DuplicatePeer(RelayError):
    code = "duplicate_peer"


class SessionFull(RelayError):
    code = "session_full"


@dataclass
class Peer:
    id: str
    session_id: Optional[str] = None


def validate_session_id(session_id: object) -> str:
    if not isinstance(session_id, str):
        raise InvalidSessionId(
            "sessionId must be a string",
            details={"received": type(session_id).__name__},
        )
    if not session_id:
        raise InvalidSessionId("sessionId must not be empty")
    return session_id


class SessionRegistry:
    def __init__(self, max_peers_per_session: int | None = None):
        self.max_peers_per_session = max_peers_per_session
        self._peers: dict[str, Peer] = {}
        self._sessions: dict[str, set[str]] = {}

    def __len__(self) -> int:
        return len(self._peers)

    def __contains__(self, peer_id: object) -> bool:
        return peer_id in self._peers

    def connect(self, peer_id: str) -> Peer:
        if peer_id in self._peers:
            raise DuplicatePeer(f"peer already connected: {peer_id}")
        peer = Peer(id=peer_id)
        self._peers[peer_id] = peer
        return peer

    def join(self, peer_id: str, session_id: object) -> Optional[str]:
        """Move ``peer_id`` into ``session_id`` and return the session it left."""
        session_id = validate_session_id(session_id)
        peer = self._get(peer_id)
        previous = peer.session_id
        if previous == session_id:
            return None

        members = self._sessions.get(session_id, set())
        if self.max_peers_per_session is not None and len(members) >= self.max_peers_per_session:
            raise SessionFull(
                f"session is full: {session_id}",
                details={"maxPeers": self.max_peers_per_session},
            )

        if previous is not None:
            self._discard(peer_id, previous)
        self._sessions.setdefault(session_id, set()).add(peer_id)
        peer.session_id = session_id
        return previous

    def disconnect(self, peer_id: str) -> Optional[Peer]:
        peer = self._peers.pop(peer_id, None)
        if peer is not None and peer.session_id is not None:
            self._discard(peer_id, peer.session_id)
        return peer

    def recipients(self, session_id: str, sender_id: str) -> list[str]:
        # Sender membership is not checked; peers are trusted to name their own session.
        return [peer_id for peer_id in self._sessions.get(session_id, ()) if peer_id != sender_id]

    def members(self, session_id: str) -> frozenset[str]:
        return frozenset(self._sessions.get(session_id, ()))

    def session_of(self, peer_id: str) -> Optional[str]:
        return self._get(peer_id).session_id

    def sessions(self) -> dict[str, int]:
        return {session_id: len(members) for session_id, members in self._sessions.items()}

    def clear(self) -> None:
        self._peers.clear()
        self._sessions.clear()

    def _get(self, peer_id: str) -> Peer:
        try:
            return self._peers[peer_id]
        except KeyError:
            raise UnknownPeer(f"unknown peer: {peer_id}") from None

    def _discard(self, peer_id: str, session_id: str) -> None:
        members = self._sessions.get(session_id)
        if members is None:
            return
        members.discard(peer_id)
        if not members:
            del self._sessions[session_id]
            logger.debug("session %s has no members left", session_id)
