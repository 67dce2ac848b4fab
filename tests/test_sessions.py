"""Tests for session storage and cookie signing."""

from order_relay.api.session_middleware import sign_session_id, unsign_session_id
from order_relay.domain.identity import SessionIdentity
from order_relay.services.sessions import InMemorySessionStore, SessionHandle


def test_store_returns_identity_until_expiry(identity: SessionIdentity) -> None:
    store = InMemorySessionStore()

    store.set("live", identity, ttl_seconds=60)
    store.set("expired", identity, ttl_seconds=0)

    assert store.get("live") == identity
    assert store.get("expired") is None
    assert len(store) == 1


def test_store_purges_expired_entries_on_write(identity: SessionIdentity) -> None:
    store = InMemorySessionStore()
    for index in range(50):
        store.set(f"abandoned-{index}", identity, ttl_seconds=0)

    store.set("live", identity, ttl_seconds=60)

    assert len(store) == 1
    assert store.get("live") == identity


def test_purge_expired_reports_dropped_count(identity: SessionIdentity) -> None:
    store = InMemorySessionStore()
    store.set("live", identity, ttl_seconds=60)
    store.set("stale", identity, ttl_seconds=0)

    assert store.purge_expired() == 1
    assert len(store) == 1


def test_store_delete_is_idempotent(identity: SessionIdentity) -> None:
    store = InMemorySessionStore()
    store.set("sid", identity, ttl_seconds=60)

    store.delete("sid")
    store.delete("sid")

    assert store.get("sid") is None


def test_handle_login_rotates_id_and_saves(identity: SessionIdentity) -> None:
    store = InMemorySessionStore()
    store.set("old", identity, ttl_seconds=60)
    handle = SessionHandle(
        store=store, ttl_seconds=60, session_id="old", identity=identity
    )

    handle.login(identity)

    assert handle.session_id not in {None, "old"}
    assert handle.dirty
    assert store.get("old") is None

    handle.save()

    assert not handle.dirty
    assert store.get(handle.session_id) == identity


def test_handle_destroy_without_session_is_noop() -> None:
    store = InMemorySessionStore()
    handle = SessionHandle(store=store, ttl_seconds=60)

    handle.destroy()
    handle.destroy()

    assert handle.identity is None
    assert handle.destroyed
    assert len(store) == 0


def test_signed_session_id_round_trip() -> None:
    cookie = sign_session_id("abc123", "secret")

    assert unsign_session_id(cookie, "secret") == "abc123"


def test_unsign_rejects_tampering() -> None:
    cookie = sign_session_id("abc123", "secret")
    session_id, _, signature = cookie.rpartition(".")

    assert unsign_session_id(cookie, "other-secret") is None
    assert unsign_session_id(f"abc124.{signature}", "secret") is None
    assert unsign_session_id(session_id, "secret") is None
    assert unsign_session_id("", "secret") is None
