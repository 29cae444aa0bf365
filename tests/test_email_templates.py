"""Tests for notification email bodies."""

from datetime import datetime

import pytest

from app.core.config import EventSettings
from app.schemas.registration import Registration
from app.utils.email_templates import format_amount, render_admin_email, render_registrant_email


@pytest.fixture
def event() -> EventSettings:
    return EventSettings(
        name="Governance & Compliance Seminar",
        date_text="Thursday, 6th November 2025",
        venue="Nairobi",
        fee_per_attendee=20000,
        currency="KES",
        payment_instructions="Use Paybill 488488.",
        contact_text=None,
        organizer_name="Advisory LLP",
    )


@pytest.fixture
def registration() -> Registration:
    return Registration(
        full_name="<script>alert(1)</script>",
        email="jane@example.com",
        phone="+254705874715",
        organization="O'Brien & Sons",
        attendees=3,
        payment_method="M-Pesa",
        total_amount=60000,
        client_ip="10.0.0.1",
        submitted_at=datetime(2025, 11, 6, 9, 0, 0),
    )


def test_format_amount_uses_thousands_separator() -> None:
    assert format_amount(60000, "KES") == "KES 60,000"


def test_registrant_email_escapes_and_includes_details(event, registration) -> None:
    body = render_registrant_email(registration, event)

    assert "<script>" not in body
    assert "&lt;script&gt;" in body
    assert "Governance &amp; Compliance Seminar" in body
    assert "Thursday, 6th November 2025" in body
    assert "KES 20,000 per person" in body
    assert "KES 60,000" in body
    assert "Use Paybill 488488." in body
    assert "Advisory LLP" in body


def test_admin_email_lists_every_field(event, registration) -> None:
    body = render_admin_email(registration, event)

    for expected in (
        "jane@example.com",
        "+254705874715",
        "O&#x27;Brien &amp; Sons",
        "<strong>Attendees:</strong> 3",
        "M-Pesa",
        "KES 60,000",
        "10.0.0.1",
    ):
        assert expected in body
    assert "<script>" not in body
