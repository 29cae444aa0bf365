from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Request

from app.adapters.mail.base import AbstractMailer
from app.adapters.mail.factory import create_mailer
from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.records.base import AbstractRegistrationStore
from app.adapters.records.csv_store import CsvRegistrationStore
from app.core.config import settings
from app.core.rate_limit import get_rate_limiter
from app.schemas.registration import RegistrationResponse
from app.services.registration_service import RegistrationService

router = APIRouter(tags=["Registration"])

_records: AbstractRegistrationStore | None = None
_mailer: AbstractMailer | None = None


def get_registration_service(
    limiter: AbstractRateLimiter = Depends(get_rate_limiter),
) -> RegistrationService:
    """Build the registration service for a request.

    The limiter is resolved per request so configuration changes picked up
    by ``get_rate_limiter`` apply immediately. The record store and mailer
    are process-wide and built on first use.
    """
    global _records, _mailer

    if _records is None:
        _records = CsvRegistrationStore(
            settings.app.records_csv_path,
            settings.app.records_backup_dir,
        )
    if _mailer is None:
        _mailer = create_mailer()
    return RegistrationService(limiter=limiter, records=_records, mailer=_mailer)


@router.post("/registrations", response_model=RegistrationResponse)
async def submit_registration(
    request: Request,
    full_name: str | None = Form(None, alias="fullName"),
    email: str | None = Form(None),
    phone: str | None = Form(None),
    organization: str | None = Form(None),
    attendees: str | None = Form(None),
    payment_method: str | None = Form(None, alias="paymentMethod"),
    service: RegistrationService = Depends(get_registration_service),
) -> RegistrationResponse:
    """Submit an event registration.

    Validates the form, enforces the per-email hourly and daily limits, appends
    the registration to the record and emails the registrant and the
    administrator. Email delivery is best effort.

    Returns:
        RegistrationResponse: Confirmation with the accepted registration summary.

    Raises:
        ValidationAppError: 400 for missing fields or an invalid email.
        RateLimitAppError: 429 with retry guidance when the limit is exceeded.
        RecordPersistenceAppError: 500 when the record cannot be written.
    """
    form = {
        "fullName": full_name,
        "email": email,
        "phone": phone,
        "organization": organization,
        "attendees": attendees,
        "paymentMethod": payment_method,
    }
    client_ip = request.client.host if request.client else None
    return await service.submit(form, client_ip=client_ip)
