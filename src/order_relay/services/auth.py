"""Discord login flow."""

import logging
from dataclasses import dataclass

import httpx

from order_relay.adapters.discord_client import DiscordClient
from order_relay.domain.identity import DiscordProfile, SessionIdentity

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Login failed; ``reason`` is the flag reported back to the client."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass
class AuthService:
    """Runs the authorization-code exchange against Discord."""

    client: DiscordClient

    def authorization_url(self) -> str:
        """Return the provider URL the browser should be sent to."""
        return self.client.authorization_url()

    async def complete_login(self, code: str | None) -> SessionIdentity:
        """Exchange the code, fetch the profile and map it to an identity.

        Raises ``AuthError`` with ``no_code``, ``no_token`` or ``auth_failed``.
        Provider details are logged, never returned.
        """
        if not code:
            raise AuthError("no_code")

        try:
            token_payload = await self.client.exchange_code(code)
        except (httpx.HTTPError, ValueError) as exc:
            logger.exception("Token exchange failed")
            raise AuthError("auth_failed") from exc

        access_token = (
            token_payload.get("access_token")
            if isinstance(token_payload, dict)
            else None
        )
        if not access_token:
            logger.warning(
                "Token exchange returned no access token",
                extra={"provider_error": _provider_error(token_payload)},
            )
            raise AuthError("no_token")

        try:
            profile_payload = await self.client.fetch_current_user(str(access_token))
            profile = DiscordProfile.model_validate(profile_payload)
        except (httpx.HTTPError, ValueError) as exc:
            logger.exception("Profile fetch failed")
            raise AuthError("auth_failed") from exc

        identity = profile.to_identity()
        logger.info("Discord login completed", extra={"discord_id": identity.external_id})
        return identity


def _provider_error(payload: object) -> str | None:
    if isinstance(payload, dict):
        error = payload.get("error")
        return str(error) if error is not None else None
    return None
