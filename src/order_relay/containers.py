"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from order_relay.adapters.discord_client import DiscordClient, HttpxDiscordClient
from order_relay.adapters.smtp_mailer import AiosmtplibMailer, Mailer
from order_relay.config import Settings
from order_relay.services.auth import AuthService
from order_relay.services.orders import OrderService
from order_relay.services.sessions import InMemorySessionStore, SessionStore


@dataclass(frozen=True)
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    discord_client: DiscordClient
    mailer: Mailer
    session_store: SessionStore
    auth_service: AuthService
    order_service: OrderService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    discord_client = HttpxDiscordClient.create(
        client_id=resolved_settings.discord_client_id,
        client_secret=resolved_settings.discord_client_secret,
        redirect_uri=resolved_settings.discord_redirect_uri,
        api_base=resolved_settings.discord_api_base,
    )
    mailer = AiosmtplibMailer.create(
        hostname=resolved_settings.smtp_host,
        port=resolved_settings.smtp_port,
        username=resolved_settings.email_user,
        password=resolved_settings.email_pass,
    )
    auth_service = AuthService(discord_client)
    order_service = OrderService(
        mailer=mailer,
        form_kind=resolved_settings.order_form,
        sender=resolved_settings.email_user,
        recipient=resolved_settings.email_to,
        price=resolved_settings.order_price or None,
        max_attachment_bytes=resolved_settings.max_attachment_bytes,
    )

    async def close_resources() -> None:
        await discord_client.close()

    return AppContainer(
        settings=resolved_settings,
        discord_client=discord_client,
        mailer=mailer,
        session_store=InMemorySessionStore(),
        auth_service=auth_service,
        order_service=order_service,
        close_resources=close_resources,
    )
