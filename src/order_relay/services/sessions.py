"""Server-side session storage keyed by an opaque session id."""

import secrets
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from order_relay.domain.identity import SessionIdentity


class SessionStore(Protocol):
    """Storage interface for session identities."""

    def get(self, session_id: str) -> SessionIdentity | None:
        """Return the identity for a session if present and not expired."""

    def set(self, session_id: str, identity: SessionIdentity, ttl_seconds: int) -> None:
        """Store an identity under a session id with a TTL in seconds."""

    def delete(self, session_id: str) -> None:
        """Remove a session. Missing sessions are ignored."""


@dataclass
class _SessionEntry:
    identity: SessionIdentity
    expires_at: datetime


@dataclass
class InMemorySessionStore(SessionStore):
    """Process-local session store with a fixed expiry per entry."""

    _entries: dict[str, _SessionEntry]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, session_id: str) -> SessionIdentity | None:
        """Return the identity if the session hasn't expired."""
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(session_id, None)
            return None
        return entry.identity

    def set(self, session_id: str, identity: SessionIdentity, ttl_seconds: int) -> None:
        """Store the identity with a TTL, dropping entries that have expired."""
        now = datetime.now(tz=UTC)
        self.purge_expired(now)
        expires_at = now + timedelta(seconds=ttl_seconds)
        self._entries[session_id] = _SessionEntry(
            identity=identity, expires_at=expires_at
        )

    def delete(self, session_id: str) -> None:
        """Drop the session if it exists."""
        self._entries.pop(session_id, None)

    def purge_expired(self, now: datetime | None = None) -> int:
        """Remove expired entries and return how many were dropped."""
        now = now or datetime.now(tz=UTC)
        expired = [
            sid for sid, entry in self._entries.items() if now >= entry.expires_at
        ]
        for sid in expired:
            del self._entries[sid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


def new_session_id() -> str:
    """Return a fresh unguessable session id."""
    return secrets.token_urlsafe(32)


@dataclass
class SessionHandle:
    """Per-request view of a session.

    Handlers read and replace the identity through the handle; nothing is
    written to the store until :meth:`save` runs, either explicitly from a
    handler or from the session middleware once the response is ready.
    """

    store: SessionStore
    ttl_seconds: int
    session_id: str | None = None
    identity: SessionIdentity | None = None
    dirty: bool = field(default=False, init=False)
    destroyed: bool = field(default=False, init=False)

    @property
    def logged_in(self) -> bool:
        return self.identity is not None

    def login(self, identity: SessionIdentity) -> None:
        """Attach an identity, rotating the session id."""
        if self.session_id is not None:
            self.store.delete(self.session_id)
        self.session_id = new_session_id()
        self.identity = identity
        self.dirty = True
        self.destroyed = False

    def save(self) -> None:
        """Persist the identity once. Raises whatever the store raises."""
        if self.session_id is None or self.identity is None:
            return
        self.dirty = False
        self.store.set(self.session_id, self.identity, self.ttl_seconds)

    def destroy(self) -> None:
        """Remove the session from the store. Safe to call when logged out."""
        if self.session_id is not None:
            self.store.delete(self.session_id)
        self.session_id = None
        self.identity = None
        self.dirty = False
        self.destroyed = True
