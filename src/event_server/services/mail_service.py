"""Outgoing email.

This module builds the payment confirmation email and delivers it either
through an SMTP relay or, in development, to the log.
"""

import smtplib
import time
from dataclasses import dataclass
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape
from typing import Protocol

from ..config import Settings
from ..logging_config import get_logger, log_external_api_call
from ..models.event import Event

logger = get_logger("mail_service")

TICKET_CONTENT_ID = "ticket"


class MailDeliveryError(Exception):
    """Raised when a message cannot be handed to the mail relay."""

    def __init__(self, message: str, status_code: int = 503) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class Mailer(Protocol):
    """Anything that can deliver a MIME message."""

    def send(self, message: MIMEMultipart) -> None:
        ...


@dataclass
class SmtpMailer:
    """Delivers mail through an SMTP relay, optionally with STARTTLS and login."""

    host: str
    port: int = 587
    username: str | None = None
    password: str | None = None
    use_tls: bool = True
    timeout: float = 10.0

    def send(self, message: MIMEMultipart) -> None:
        """Send one message.

        Raises:
            MailDeliveryError: If the relay cannot be reached or refuses the message
        """
        start_time = time.time()
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            log_external_api_call(
                service="smtp",
                endpoint=f"{self.host}:{self.port}",
                method="SEND",
                duration=time.time() - start_time,
                success=False,
                error=type(e).__name__,
            )
            raise MailDeliveryError("Email delivery failed") from e

        log_external_api_call(
            service="smtp",
            endpoint=f"{self.host}:{self.port}",
            method="SEND",
            duration=time.time() - start_time,
            success=True,
            recipient=message["To"],
        )


class ConsoleMailer:
    """Writes messages to the log instead of sending them."""

    def send(self, message: MIMEMultipart) -> None:
        logger.info(
            f"Email to {message['To']}: {message['Subject']}",
            extra={"recipient": message["To"], "subject": message["Subject"]},
        )


def create_mailer(settings: Settings) -> Mailer:
    """Build the mailer selected by ``settings.mail_backend``."""
    if settings.mail_backend == "console":
        return ConsoleMailer()

    return SmtpMailer(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        timeout=settings.smtp_timeout,
    )


def build_payment_confirmation(
    event: Event,
    recipient: str,
    ticket_png: bytes,
    sender_address: str,
    sender_name: str,
) -> MIMEMultipart:
    """Build the payment confirmation email.

    The QR ticket is attached inline and referenced from the HTML body as
    ``cid:ticket``.

    Args:
        event: Event that was paid for
        recipient: Destination address
        ticket_png: Rendered QR ticket
        sender_address: From address
        sender_name: From display name

    Returns:
        MIMEMultipart: Message ready to be sent
    """
    message = MIMEMultipart("related")
    message["Subject"] = f"Your ticket for {event.title}"
    message["From"] = formataddr((sender_name, sender_address))
    message["To"] = recipient

    html = (
        "<html><body>"
        f"<h1>Thank you for your payment!</h1>"
        f"<p>You are attending <strong>{escape(event.title)}</strong> "
        f"on {event.event_date.isoformat()} at {escape(event.location)}.</p>"
        "<p>Show this QR code at the entrance:</p>"
        f'<img src="cid:{TICKET_CONTENT_ID}" alt="Ticket QR code">'
        "</body></html>"
    )
    message.attach(MIMEText(html, "html"))

    image = MIMEImage(ticket_png, _subtype="png")
    image.add_header("Content-ID", f"<{TICKET_CONTENT_ID}>")
    image.add_header("Content-Disposition", "inline", filename=f"ticket-{event.id}.png")
    message.attach(image)

    return message
