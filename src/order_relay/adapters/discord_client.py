"""Discord OAuth2 API client adapter."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote, urlencode

import httpx

OAUTH_SCOPES = ("identify", "email")


class DiscordClient(Protocol):
    """Interface for the Discord OAuth2 endpoints used by the login flow."""

    def authorization_url(self) -> str:
        """Return the URL that starts the authorization-code flow."""

    async def exchange_code(self, code: str) -> dict[str, object]:
        """Exchange an authorization code and return the raw token payload."""

    async def fetch_current_user(self, access_token: str) -> dict[str, object]:
        """Return the raw profile of the user owning the access token."""


@dataclass
class HttpxDiscordClient(DiscordClient):
    """Discord client implemented with httpx."""

    client_id: str
    client_secret: str
    redirect_uri: str
    api_base: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        api_base: str = "https://discord.com/api",
    ) -> "HttpxDiscordClient":
        """Create a Discord client with a managed httpx session."""
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            api_base=api_base.rstrip("/"),
            http_client=httpx.AsyncClient(),
        )

    def authorization_url(self) -> str:
        """Build the authorize URL with the identify and email scopes."""
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": " ".join(OAUTH_SCOPES),
            },
            quote_via=quote,
        )
        return f"{self.api_base}/oauth2/authorize?{query}"

    async def exchange_code(self, code: str) -> dict[str, object]:
        """Exchange the code using a form-encoded POST signed with the secret."""
        url = f"{self.api_base}/oauth2/token"
        response = await self.http_client.post(
            url,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_uri,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=10,
        )
        # Discord reports a rejected code as a 4xx JSON body without a token.
        if response.status_code >= 500:
            response.raise_for_status()
        return response.json()

    async def fetch_current_user(self, access_token: str) -> dict[str, object]:
        """Fetch the profile behind the bearer token."""
        url = f"{self.api_base}/users/@me"
        response = await self.http_client.get(
            url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=10,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
