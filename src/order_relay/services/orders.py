"""Order validation and relay to the mail transport."""

import base64
import binascii
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import ValidationError

from order_relay.adapters.smtp_mailer import Mailer
from order_relay.domain.identity import SessionIdentity
from order_relay.domain.orders import (
    BotOrderForm,
    FeaturesOrderForm,
    ImageAttachment,
    OrderForm,
    OrderFormKind,
    OrderRecord,
)
from order_relay.services.order_mail import compose_order_mail

logger = logging.getLogger(__name__)

NO_EMAIL = "No email"

_DATA_URI_RE = re.compile(
    r"^data:(?P<maintype>[\w.+-]+)/(?P<subtype>[\w.+-]+)"
    r"(?:;[\w.+-]+=[^;,]*)*;base64,(?P<payload>.*)$",
    re.DOTALL,
)


class NotLoggedInError(Exception):
    """The request carries no session identity."""


class OrderValidationError(Exception):
    """The submitted form does not satisfy the configured schema."""


class MailDeliveryError(Exception):
    """The mail transport rejected or failed to deliver the order."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class OrderService:
    """Validates order forms and relays them as email."""

    mailer: Mailer
    form_kind: OrderFormKind
    sender: str
    recipient: str
    price: str | None = None
    max_attachment_bytes: int = 8 * 1024 * 1024
    clock: Callable[[], datetime] = _utc_now

    def parse_form(self, payload: object) -> OrderForm:
        """Validate a raw payload against the configured form variant."""
        model = BotOrderForm if self.form_kind == "bot" else FeaturesOrderForm
        if not isinstance(payload, dict):
            raise OrderValidationError("All fields are required")
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            fields = sorted({".".join(map(str, err["loc"])) for err in exc.errors()})
            logger.info("Rejected order form", extra={"fields": fields})
            raise OrderValidationError("All fields are required") from exc

    async def submit(
        self, identity: SessionIdentity | None, payload: object
    ) -> OrderRecord:
        """Validate, compose and send an order.

        Raises ``NotLoggedInError`` before looking at the payload, then
        ``OrderValidationError``; nothing is sent in either case. Transport
        failures surface as ``MailDeliveryError``.
        """
        if identity is None:
            raise NotLoggedInError
        form = self.parse_form(payload)
        attachment = None
        if isinstance(form, FeaturesOrderForm) and form.optional_image_data_uri:
            attachment = parse_image_data_uri(
                form.optional_image_data_uri, self.max_attachment_bytes
            )

        order = OrderRecord(
            discord_tag=identity.tag,
            discord_id=identity.external_id,
            email=identity.email or NO_EMAIL,
            form=form,
            submitted_at=self.clock(),
            attachment=attachment,
        )
        mail = compose_order_mail(
            order, sender=self.sender, recipient=self.recipient, price=self.price
        )
        try:
            await self.mailer.send(mail)
        except Exception as exc:
            logger.exception(
                "Failed to send order mail", extra={"discord_id": order.discord_id}
            )
            raise MailDeliveryError(str(exc)) from exc
        logger.info("Order relayed", extra={"discord_id": order.discord_id})
        return order


def parse_image_data_uri(value: str, max_bytes: int | None = None) -> ImageAttachment:
    """Split a base64 image data URI into MIME type and payload."""
    match = _DATA_URI_RE.match(value.strip())
    if match is None or match.group("maintype").lower() != "image":
        raise OrderValidationError("Image must be a base64 image data URI")
    payload = re.sub(r"\s+", "", match.group("payload"))
    try:
        decoded = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise OrderValidationError("Image data is not valid base64") from exc
    if not decoded:
        raise OrderValidationError("Image data is empty")
    if max_bytes is not None and len(decoded) > max_bytes:
        raise OrderValidationError("Image is too large")
    maintype = match.group("maintype").lower()
    subtype = match.group("subtype").lower()
    return ImageAttachment(
        mime_type=f"{maintype}/{subtype}",
        subtype=subtype,
        payload_base64=payload,
    )
