"""Registration service orchestrating validation, rate limiting and side effects.

This service is the core business logic behind the registration endpoint.
It handles:
- Required-field and email validation (before any rate limit budget is used)
- Input sanitization and total computation
- Per-email rolling-window rate limiting
- Durable record append
- Best-effort notification emails to the registrant and the administrator

Blocking work (file locks, CSV writes, SMTP) runs in the default executor so
the event loop stays responsive.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from datetime import datetime
from typing import Any, Callable, Mapping

from pydantic import EmailStr, TypeAdapter, ValidationError

from app.adapters.mail.base import AbstractMailer, OutgoingEmail
from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.records.base import AbstractRegistrationStore
from app.core.config import EventSettings, MailSettings, settings
from app.core.errors import MailDeliveryAppError, ValidationAppError
from app.core.logging import hash_for_logs
from app.core.rate_limit import enforce_rate_limit
from app.schemas.registration import Registration, RegistrationResponse, RegistrationSummary
from app.utils.email_templates import render_admin_email, render_registrant_email
from app.utils.form_sanitizers import (
    clamp_attendees,
    clean_text,
    find_missing_fields,
    normalize_phone,
)

logger = logging.getLogger(__name__)

# Form field names as posted by the registration page.
REQUIRED_FIELDS = ["fullName", "email", "phone", "attendees", "paymentMethod"]

_email_adapter = TypeAdapter(EmailStr)


def validate_email_address(raw: str) -> str:
    """Validate and normalize an email address.

    Raises:
        ValidationAppError: If the address is not a valid email.
    """
    try:
        return _email_adapter.validate_python(raw)
    except ValidationError as exc:
        raise ValidationAppError(
            code="invalid_email",
            message="Invalid email address",
            details={"field": "email"},
        ) from exc


class RegistrationService:
    """Accept registration submissions end to end."""

    def __init__(
        self,
        *,
        limiter: AbstractRateLimiter,
        records: AbstractRegistrationStore,
        mailer: AbstractMailer,
        event: EventSettings | None = None,
        mail: MailSettings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._limiter = limiter
        self._records = records
        self._mailer = mailer
        self._event = event or settings.event
        self._mail = mail or settings.mail
        self._clock = clock

    def build_registration(
        self,
        form: Mapping[str, str | None],
        *,
        client_ip: str | None,
        now: float,
    ) -> Registration:
        """Validate and sanitize raw form values.

        Args:
            form: Raw form values keyed by the posted field names.
            client_ip: Submitter network address, if known.
            now: UNIX time the submission is accepted at.

        Returns:
            Registration ready to be rate-limited and recorded.

        Raises:
            ValidationAppError: If required fields are missing or the email is invalid.
        """
        missing = find_missing_fields(form, REQUIRED_FIELDS)
        if missing:
            raise ValidationAppError(
                code="missing_fields",
                message=f"Missing fields: {', '.join(missing)}",
                details={"missing_fields": missing},
            )

        email = validate_email_address(clean_text(form.get("email")))
        attendees = clamp_attendees(
            form.get("attendees"),
            minimum=self._event.min_attendees,
            maximum=self._event.max_attendees,
        )

        return Registration(
            full_name=clean_text(form.get("fullName")),
            email=email,
            phone=normalize_phone(form.get("phone")),
            organization=clean_text(form.get("organization")) or self._event.default_organization,
            attendees=attendees,
            payment_method=clean_text(form.get("paymentMethod")),
            total_amount=attendees * self._event.fee_per_attendee,
            client_ip=client_ip or "unknown",
            submitted_at=datetime.fromtimestamp(now),
        )

    def build_notifications(self, registration: Registration) -> list[OutgoingEmail]:
        return [
            OutgoingEmail(
                to=str(registration.email),
                subject=self._mail.user_subject,
                html_body=render_registrant_email(registration, self._event),
            ),
            OutgoingEmail(
                to=str(self._mail.admin_address),
                subject=self._mail.admin_subject,
                html_body=render_admin_email(registration, self._event),
            ),
        ]

    async def _run_blocking(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))

    async def _notify(self, registration: Registration) -> int:
        """Send all notifications, returning how many were delivered."""
        delivered = 0
        for message in self.build_notifications(registration):
            recipient_hash = hash_for_logs(message.to)
            try:
                await self._run_blocking(self._mailer.send, message)
            except MailDeliveryAppError as exc:
                logger.warning(
                    "mail.send_failed",
                    extra={
                        "recipient_hash": recipient_hash,
                        "error_code": exc.code,
                        "subject": message.subject,
                    },
                )
                continue
            except Exception as exc:
                logger.error(
                    "mail.unexpected_error",
                    extra={
                        "recipient_hash": recipient_hash,
                        "error_type": type(exc).__name__,
                        "subject": message.subject,
                    },
                )
                continue
            delivered += 1
        return delivered

    async def submit(
        self,
        form: Mapping[str, str | None],
        *,
        client_ip: str | None = None,
    ) -> RegistrationResponse:
        """Process one registration submission.

        Args:
            form: Raw form values keyed by the posted field names.
            client_ip: Submitter network address, if known.

        Returns:
            RegistrationResponse echoing the accepted registration.

        Raises:
            ValidationAppError: For missing or invalid fields.
            RateLimitAppError: When the submitter exceeded the rate limit.
            RecordPersistenceAppError: When the record could not be written.
        """
        now = self._clock()
        registration = self.build_registration(form, client_ip=client_ip, now=now)

        await self._run_blocking(
            enforce_rate_limit,
            str(registration.email),
            limiter=self._limiter,
            now=now,
        )

        await self._run_blocking(self._records.append, registration)
        logger.info(
            "registration.saved",
            extra={
                "attendees": registration.attendees,
                "total_amount": registration.total_amount,
                "payment_method": registration.payment_method,
            },
        )

        delivered = await self._notify(registration)
        logger.info("registration.notified", extra={"emails_delivered": delivered})

        return RegistrationResponse(data=RegistrationSummary.from_registration(registration))
