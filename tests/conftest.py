"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import httpx
import pytest

from order_relay.adapters.discord_client import DiscordClient
from order_relay.adapters.smtp_mailer import Mailer
from order_relay.config import Settings
from order_relay.containers import AppContainer
from order_relay.domain.identity import SessionIdentity
from order_relay.domain.orders import OutgoingMail
from order_relay.services.auth import AuthService
from order_relay.services.orders import OrderService
from order_relay.services.sessions import InMemorySessionStore

FIXED_NOW = datetime(2025, 3, 1, 12, 30, tzinfo=UTC)


@dataclass
class FakeDiscordClient(DiscordClient):
    """Fake Discord client returning canned payloads."""

    token_payload: dict[str, object] = field(
        default_factory=lambda: {"access_token": "access-123", "token_type": "Bearer"}
    )
    profile_payload: dict[str, object] = field(
        default_factory=lambda: {
            "id": "80351110224678912",
            "username": "nelly",
            "discriminator": "1337",
            "avatar": "8342729096ea3675442027381ff50dfe",
            "email": "nelly@example.com",
        }
    )
    token_error: Exception | None = None
    profile_error: Exception | None = None
    exchanged_codes: list[str] = field(default_factory=list)
    profile_tokens: list[str] = field(default_factory=list)

    def authorization_url(self) -> str:
        return "https://discord.test/oauth2/authorize?response_type=code"

    async def exchange_code(self, code: str) -> dict[str, object]:
        self.exchanged_codes.append(code)
        if self.token_error:
            raise self.token_error
        return self.token_payload

    async def fetch_current_user(self, access_token: str) -> dict[str, object]:
        self.profile_tokens.append(access_token)
        if self.profile_error:
            raise self.profile_error
        return self.profile_payload


@dataclass
class FakeMailer(Mailer):
    """Fake mailer that records messages instead of sending them."""

    sent: list[OutgoingMail] = field(default_factory=list)
    error: Exception | None = None

    async def send(self, mail: OutgoingMail) -> None:
        if self.error:
            raise self.error
        self.sent.append(mail)


class FailingSessionStore(InMemorySessionStore):
    """Session store whose writes always fail."""

    def __init__(self) -> None:
        super().__init__()
        self.attempts = 0

    def set(self, session_id, identity, ttl_seconds) -> None:  # type: ignore[no-untyped-def]
        self.attempts += 1
        raise RuntimeError("store unavailable")


def make_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "discord_client_id": "client-id",
        "discord_client_secret": "client-secret",
        "discord_redirect_uri": "https://relay.test/api/auth/callback",
        "email_user": "relay@example.com",
        "email_pass": "app-password",
        "email_to": "orders@example.com",
        "session_secret": "test-session-secret",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_container(
    settings: Settings,
    discord_client: FakeDiscordClient,
    mailer: FakeMailer,
    session_store: InMemorySessionStore | None = None,
) -> AppContainer:
    order_service = OrderService(
        mailer=mailer,
        form_kind=settings.order_form,
        sender=settings.email_user,
        recipient=settings.email_to,
        price=settings.order_price or None,
        max_attachment_bytes=settings.max_attachment_bytes,
        clock=lambda: FIXED_NOW,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        discord_client=discord_client,
        mailer=mailer,
        session_store=(
            session_store if session_store is not None else InMemorySessionStore()
        ),
        auth_service=AuthService(discord_client),
        order_service=order_service,
        close_resources=close_resources,
    )


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def discord_client() -> FakeDiscordClient:
    return FakeDiscordClient()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def container(
    settings: Settings, discord_client: FakeDiscordClient, mailer: FakeMailer
) -> AppContainer:
    return make_container(settings, discord_client, mailer)


@pytest.fixture
def identity() -> SessionIdentity:
    return SessionIdentity(
        external_id="80351110224678912",
        display_name="nelly",
        discriminator="1337",
        avatar_url="https://cdn.discordapp.com/embed/avatars/0.png",
        email="nelly@example.com",
    )


@pytest.fixture
def connect_error() -> httpx.ConnectError:
    return httpx.ConnectError("connection refused")
