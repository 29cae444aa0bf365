"""Factory pattern for creating mailer instances."""

from app.adapters.mail.base import AbstractMailer
from app.adapters.mail.console import ConsoleMailer
from app.adapters.mail.smtp_client import SMTPMailer
from app.core.config import settings
from app.core.errors import ValidationAppError


def create_mailer() -> AbstractMailer:
    """Factory function to instantiate mailers based on the configured backend.

    Reads configuration from app.core.config.settings (Pydantic Settings).
    Validates backend-specific requirements and routes to the matching mailer.

    Returns:
        AbstractMailer: Configured mailer instance.

    Raises:
        ValidationAppError: If the backend is unknown or misconfigured.
    """
    backend = settings.mail.backend.lower()

    if backend == "smtp":
        if settings.mail.username and not settings.mail.password:
            raise ValidationAppError(
                code="mail_missing_password",
                message="SMTP login requires MAIL_PASSWORD when MAIL_USERNAME is set",
            )
        return SMTPMailer(
            host=settings.mail.host,
            port=settings.mail.port,
            from_address=str(settings.mail.from_address),
            username=settings.mail.username,
            password=settings.mail.password,
            use_tls=settings.mail.use_tls,
            timeout_seconds=settings.mail.timeout_seconds,
        )

    if backend == "console":
        return ConsoleMailer(from_address=str(settings.mail.from_address))

    raise ValidationAppError(
        code="mail_unknown_backend",
        message=(
            f"Unknown mail backend: '{backend}'. Supported backends: smtp, console"
        ),
    )
