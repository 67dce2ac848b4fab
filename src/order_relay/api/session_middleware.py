"""Cookie-backed session middleware over a server-side session store."""

import hashlib
import hmac
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from order_relay.services.sessions import SessionHandle, SessionStore

logger = logging.getLogger(__name__)


def sign_session_id(session_id: str, secret: str) -> str:
    """Return ``<session_id>.<signature>`` for use as a cookie value."""
    digest = hmac.new(
        secret.encode("utf-8"), session_id.encode("utf-8"), hashlib.sha256
    ).hexdigest()
    return f"{session_id}.{digest}"


def unsign_session_id(cookie_value: str, secret: str) -> str | None:
    """Return the session id when the cookie signature is valid."""
    session_id, _, signature = cookie_value.rpartition(".")
    if not session_id or not signature:
        return None
    expected = sign_session_id(session_id, secret).rpartition(".")[2]
    if not hmac.compare_digest(signature, expected):
        return None
    return session_id


def get_session(request: Request) -> SessionHandle:
    """Return the session handle attached by :class:`SessionMiddleware`."""
    return request.state.session


class SessionMiddleware(BaseHTTPMiddleware):
    """Attach a ``SessionHandle`` to each request and maintain the cookie."""

    def __init__(  # noqa: PLR0913
        self,
        app: ASGIApp,
        *,
        store: SessionStore,
        secret: str,
        ttl_seconds: int,
        cookie_name: str = "relay_session",
        secure: bool = False,
    ) -> None:
        super().__init__(app)
        self.store = store
        self.secret = secret
        self.ttl_seconds = ttl_seconds
        self.cookie_name = cookie_name
        self.secure = secure

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        session = self._load(request.cookies.get(self.cookie_name))
        loaded_id = session.session_id
        request.state.session = session
        response = await call_next(request)

        if session.dirty:
            try:
                session.save()
            except Exception:
                logger.exception("Failed to save session")
        if session.destroyed:
            response.delete_cookie(
                self.cookie_name,
                httponly=True,
                secure=self.secure,
                samesite="lax",
            )
        elif session.logged_in and session.session_id != loaded_id:
            response.set_cookie(
                self.cookie_name,
                sign_session_id(session.session_id, self.secret),
                max_age=self.ttl_seconds,
                httponly=True,
                secure=self.secure,
                samesite="lax",
            )
        return response

    def _load(self, cookie_value: str | None) -> SessionHandle:
        session = SessionHandle(store=self.store, ttl_seconds=self.ttl_seconds)
        if not cookie_value:
            return session
        session_id = unsign_session_id(cookie_value, self.secret)
        if session_id is None:
            logger.warning("Ignoring session cookie with a bad signature")
            return session
        identity = self.store.get(session_id)
        if identity is not None:
            session.session_id = session_id
            session.identity = identity
        return session
