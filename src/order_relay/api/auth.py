"""Discord login, session query and logout endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

from order_relay.api.session_middleware import get_session
from order_relay.services.auth import AuthError

if TYPE_CHECKING:
    from order_relay.config import Settings
    from order_relay.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def client_redirect(settings: Settings, **params: str) -> RedirectResponse:
    """Redirect back to the client application root with query flags."""
    url = settings.client_root_url or "/"
    if params:
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}{urlencode(params)}"
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)


@router.get("/login")
async def login(request: Request) -> RedirectResponse:
    """Send the browser to Discord's consent screen."""
    container: AppContainer = request.app.state.container
    return RedirectResponse(
        url=container.auth_service.authorization_url(),
        status_code=status.HTTP_302_FOUND,
    )


@router.get("/callback")
async def callback(request: Request, code: str | None = None) -> RedirectResponse:
    """Complete the login and store the identity in the session."""
    container: AppContainer = request.app.state.container
    settings = container.settings
    try:
        identity = await container.auth_service.complete_login(code)
    except AuthError as exc:
        return client_redirect(settings, error=exc.reason)

    session = get_session(request)
    session.login(identity)
    try:
        session.save()
    except Exception:
        logger.exception(
            "Failed to save session after login",
            extra={"discord_id": identity.external_id},
        )
        if settings.session_save_blocking:
            session.destroy()
            return client_redirect(settings, error="session_failed")
    return client_redirect(settings, login="success")


@router.get("/user")
async def current_user(request: Request) -> dict[str, object]:
    """Report whether the caller is logged in and who they are."""
    session = get_session(request)
    if session.identity is None:
        return {"loggedIn": False}
    return {"loggedIn": True, "user": session.identity.to_public_dict()}


@router.get("/logout")
async def logout(request: Request) -> RedirectResponse:
    """Destroy the session and return to the client root."""
    container: AppContainer = request.app.state.container
    get_session(request).destroy()
    return client_redirect(container.settings)
