"""Domain models for the logged-in identity kept in a session."""

from dataclasses import dataclass

from pydantic import BaseModel


@dataclass(frozen=True)
class SessionIdentity:
    """Represents the Discord identity attached to a session."""

    external_id: str
    display_name: str
    discriminator: str
    avatar_url: str
    email: str | None = None

    @property
    def tag(self) -> str:
        return f"{self.display_name}#{self.discriminator}"

    def to_public_dict(self) -> dict[str, str | None]:
        """Return the identity using the field names the front-end expects."""
        return {
            "id": self.external_id,
            "username": self.display_name,
            "discriminator": self.discriminator,
            "avatar": self.avatar_url,
            "email": self.email,
        }


DEFAULT_AVATAR_URL = "https://cdn.discordapp.com/embed/avatars/0.png"
DEFAULT_DISCRIMINATOR = "0"


class DiscordProfile(BaseModel):
    """Subset of the Discord ``/users/@me`` payload."""

    id: str
    username: str
    discriminator: str | None = None
    avatar: str | None = None
    email: str | None = None

    def to_identity(self) -> SessionIdentity:
        """Map the profile onto a session identity with Discord's fallbacks."""
        if self.avatar:
            avatar_url = f"https://cdn.discordapp.com/avatars/{self.id}/{self.avatar}.png"
        else:
            avatar_url = DEFAULT_AVATAR_URL
        return SessionIdentity(
            external_id=self.id,
            display_name=self.username,
            discriminator=self.discriminator or DEFAULT_DISCRIMINATOR,
            avatar_url=avatar_url,
            email=self.email,
        )
