"""Models for order submissions and the mail they become."""

import base64
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

OrderFormKind = Literal["bot", "features"]


def _require_text(value: object) -> str:
    if value is None:
        raise ValueError("field is required")
    if isinstance(value, bool):
        raise ValueError("expected text")
    text = str(value).strip()
    if not text:
        raise ValueError("field must not be empty")
    return text


class BotOrderForm(BaseModel):
    """Order form for a custom Discord bot."""

    model_config = ConfigDict(populate_by_name=True)

    age: str
    bot_description: str = Field(
        validation_alias=AliasChoices("botDescription", "description", "bot_description")
    )
    rules_accepted: bool = Field(
        validation_alias=AliasChoices("rulesAccepted", "rules_accepted")
    )

    @field_validator("age", "bot_description", mode="before")
    @classmethod
    def _strip_required(cls, value: object) -> str:
        return _require_text(value)

    @field_validator("rules_accepted")
    @classmethod
    def _must_accept_rules(cls, value: bool) -> bool:
        if not value:
            raise ValueError("rules must be accepted")
        return value


class FeaturesOrderForm(BaseModel):
    """Order form listing requested features with an optional image."""

    model_config = ConfigDict(populate_by_name=True)

    features: str
    optional_message: str | None = Field(
        default=None,
        validation_alias=AliasChoices("optionalMessage", "optional_message"),
    )
    optional_image_data_uri: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "optionalImageDataUri", "optional_image_data_uri"
        ),
    )

    @field_validator("features", mode="before")
    @classmethod
    def _strip_required(cls, value: object) -> str:
        return _require_text(value)

    @field_validator("optional_message", "optional_image_data_uri", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


OrderForm = BotOrderForm | FeaturesOrderForm


@dataclass(frozen=True)
class ImageAttachment:
    """Image decoded from a base64 data URI."""

    mime_type: str
    subtype: str
    payload_base64: str

    @property
    def filename(self) -> str:
        return f"attachment.{self.subtype}"

    @property
    def maintype(self) -> str:
        return self.mime_type.split("/", maxsplit=1)[0]

    @property
    def content(self) -> bytes:
        return base64.b64decode(self.payload_base64)


@dataclass(frozen=True)
class OrderRecord:
    """An order enriched with the submitting identity, ready to be mailed."""

    discord_tag: str
    discord_id: str
    email: str
    form: OrderForm
    submitted_at: datetime
    attachment: ImageAttachment | None = None


@dataclass(frozen=True)
class OutgoingMail:
    """A composed message handed to the mail transport."""

    sender: str
    recipient: str
    subject: str
    html: str
    attachments: list[ImageAttachment] = field(default_factory=list)
