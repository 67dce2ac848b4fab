"""SMTP mail transport adapter."""

from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formatdate, make_msgid
from typing import Protocol

import aiosmtplib

from order_relay.domain.orders import OutgoingMail

IMPLICIT_TLS_PORT = 465


class Mailer(Protocol):
    """Interface for delivering composed mail."""

    async def send(self, mail: OutgoingMail) -> None:
        """Deliver the message or raise on transport failure."""


@dataclass
class AiosmtplibMailer(Mailer):
    """Mailer that submits messages to an SMTP server with aiosmtplib."""

    hostname: str
    port: int
    username: str
    password: str
    timeout: float = 30

    @classmethod
    def create(
        cls, hostname: str, port: int, username: str, password: str
    ) -> "AiosmtplibMailer":
        """Create a mailer for an authenticated submission server."""
        return cls(hostname=hostname, port=port, username=username, password=password)

    async def send(self, mail: OutgoingMail) -> None:
        """Connect, authenticate and send a single message."""
        message = build_message(mail)
        implicit_tls = self.port == IMPLICIT_TLS_PORT
        smtp = aiosmtplib.SMTP(
            hostname=self.hostname,
            port=self.port,
            timeout=self.timeout,
            use_tls=implicit_tls,
            start_tls=False if implicit_tls else None,
        )
        async with smtp:
            if self.username and self.password:
                await smtp.login(self.username, self.password)
            await smtp.send_message(message)


def build_message(mail: OutgoingMail) -> EmailMessage:
    """Build a MIME message with an HTML body and optional attachments."""
    message = EmailMessage()
    message["From"] = mail.sender
    message["To"] = mail.recipient
    message["Subject"] = mail.subject
    message["Date"] = formatdate(localtime=True)
    message["Message-ID"] = make_msgid()
    message.set_content("This message requires an HTML capable mail client.")
    message.add_alternative(mail.html, subtype="html")
    for attachment in mail.attachments:
        message.add_attachment(
            attachment.content,
            maintype=attachment.maintype,
            subtype=attachment.subtype,
            filename=attachment.filename,
        )
    return message
