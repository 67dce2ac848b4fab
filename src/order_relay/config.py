"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    discord_client_id: str
    discord_client_secret: str
    discord_redirect_uri: str
    discord_api_base: str = "https://discord.com/api"
    email_user: str
    email_pass: str
    email_to: str
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    session_secret: str
    session_ttl_seconds: int = 24 * 60 * 60
    session_cookie_name: str = "relay_session"
    session_save_blocking: bool = False
    order_form: Literal["bot", "features"] = "bot"
    order_price: str = "15€"
    max_attachment_bytes: int = 8 * 1024 * 1024
    client_root_url: str = "/"
    cors_allow_origins: str = "*"
    port: int = 3000
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
        frozen=True,
    )

    @property
    def secure_cookies(self) -> bool:
        """Return true when session cookies must only travel over HTTPS."""
        return self.environment == "production"


def parse_cors_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env."""
    if raw is None:
        return ["*"]
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    origins: list[str] = []
    for chunk in cleaned.split(","):
        value = chunk.strip().rstrip("/")
        if value:
            origins.append(value)
    return origins or ["*"]
