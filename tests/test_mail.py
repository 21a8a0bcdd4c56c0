"""Unit tests for outgoing mail."""

import smtplib
from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from event_server.config import Settings
from event_server.models.event import Event
from event_server.services.mail_service import (
    ConsoleMailer,
    MailDeliveryError,
    SmtpMailer,
    build_payment_confirmation,
    create_mailer,
)

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 8


@pytest.fixture
def event() -> Event:
    return Event(
        id=3,
        title="Jazz <Night>",
        description="Live music",
        event_date=date(2030, 6, 1),
        location="Blue Room",
        poster_url="https://cdn.example.com/p.png",
    )


@pytest.fixture
def message(event: Event):
    return build_payment_confirmation(
        event=event,
        recipient="alice@example.com",
        ticket_png=PNG,
        sender_address="no-reply@example.com",
        sender_name="Event Server",
    )


class TestPaymentConfirmation:
    """Test cases for the confirmation email."""

    def test_headers(self, message):
        assert message["To"] == "alice@example.com"
        assert message["From"] == "Event Server <no-reply@example.com>"
        assert message["Subject"] == "Your ticket for Jazz <Night>"
        assert message.get_content_subtype() == "related"

    def test_html_references_inline_image(self, message):
        html_part, image_part = message.get_payload()
        html = html_part.get_payload(decode=True).decode()

        assert 'src="cid:ticket"' in html
        assert "Jazz &lt;Night&gt;" in html
        assert "2030-06-01" in html
        assert image_part["Content-ID"] == "<ticket>"
        assert image_part.get_content_disposition() == "inline"
        assert image_part.get_payload(decode=True) == PNG


class TestSmtpMailer:
    """Test cases for SMTP delivery."""

    @pytest.fixture
    def mock_smtp(self):
        with patch("event_server.services.mail_service.smtplib.SMTP") as mock_smtp_class:
            server = MagicMock()
            mock_smtp_class.return_value.__enter__.return_value = server
            yield mock_smtp_class, server

    def test_send_with_tls_and_login(self, mock_smtp, message):
        mock_smtp_class, server = mock_smtp
        mailer = SmtpMailer(host="smtp.example.com", port=587, username="user", password="pass")

        mailer.send(message)

        mock_smtp_class.assert_called_once_with("smtp.example.com", 587, timeout=10.0)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("user", "pass")
        server.send_message.assert_called_once_with(message)

    def test_send_without_tls_or_credentials(self, mock_smtp, message):
        _, server = mock_smtp
        mailer = SmtpMailer(host="localhost", port=25, use_tls=False)

        mailer.send(message)

        server.starttls.assert_not_called()
        server.login.assert_not_called()
        server.send_message.assert_called_once_with(message)

    def test_send_smtp_error(self, mock_smtp, message):
        _, server = mock_smtp
        server.send_message.side_effect = smtplib.SMTPRecipientsRefused({})
        mailer = SmtpMailer(host="smtp.example.com")

        with pytest.raises(MailDeliveryError) as exc_info:
            mailer.send(message)

        assert exc_info.value.status_code == 503
        assert exc_info.value.message == "Email delivery failed"

    def test_send_connection_refused(self, mock_smtp, message):
        mock_smtp_class, _ = mock_smtp
        mock_smtp_class.side_effect = ConnectionRefusedError()
        mailer = SmtpMailer(host="smtp.example.com")

        with pytest.raises(MailDeliveryError):
            mailer.send(message)


class TestCreateMailer:
    """Test cases for mailer selection."""

    def make_settings(self, **overrides) -> Settings:
        return Settings(database_url="sqlite:///:memory:", jwt_secret="secret", **overrides)

    def test_console_backend(self, message):
        mailer = create_mailer(self.make_settings(mail_backend="console"))

        assert isinstance(mailer, ConsoleMailer)
        mailer.send(message)

    def test_smtp_backend(self):
        mailer = create_mailer(
            self.make_settings(mail_backend="smtp", smtp_host="relay.example.com", smtp_port=2525)
        )

        assert isinstance(mailer, SmtpMailer)
        assert mailer.host == "relay.example.com"
        assert mailer.port == 2525
