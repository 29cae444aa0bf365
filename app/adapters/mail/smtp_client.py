"""SMTP mail adapter."""

import smtplib
from email.message import EmailMessage
from email.utils import formatdate, make_msgid

from app.adapters.mail.base import AbstractMailer, OutgoingEmail
from app.core.errors import MailDeliveryAppError


class SMTPMailer(AbstractMailer):
    """Deliver HTML notifications through an SMTP relay.

    Opens one short-lived connection per message; registration volume is low
    enough that pooling is not worth the state.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int,
        from_address: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = False,
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize the SMTP mailer.

        Args:
            host: SMTP server host.
            port: SMTP server port.
            from_address: Sender and Reply-To address.
            username: Optional login user.
            password: Optional login password.
            use_tls: Whether to upgrade the connection with STARTTLS.
            timeout_seconds: Connection timeout in seconds.
        """
        self.host = host
        self.port = port
        self.from_address = from_address
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout_seconds = timeout_seconds

    def build_message(self, message: OutgoingEmail) -> EmailMessage:
        """Build the MIME message for an outgoing notification."""
        email = EmailMessage()
        email["From"] = self.from_address
        email["Reply-To"] = self.from_address
        email["To"] = message.to
        email["Subject"] = message.subject
        email["Date"] = formatdate(localtime=True)
        email["Message-ID"] = make_msgid()
        email.set_content(message.html_body, subtype="html", charset="utf-8")
        return email

    def send(self, message: OutgoingEmail) -> None:
        email = self.build_message(message)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryAppError(
                code="mail_delivery_failed",
                message="Notification email could not be delivered",
                details={"hint": type(e).__name__},
            ) from e
