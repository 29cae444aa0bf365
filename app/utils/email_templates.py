"""HTML bodies for registration notification emails.

Every interpolated value is HTML-escaped; amounts are rendered with thousands
separators.
"""

from __future__ import annotations

from html import escape

from app.core.config import EventSettings
from app.schemas.registration import Registration

_BODY_STYLE = "font-family:Arial,sans-serif;line-height:1.6;"
_HEADING_STYLE = "color:#0056A6;"


def format_amount(amount: int, currency: str) -> str:
    return f"{escape(currency)} {amount:,}"


def _wrap(heading: str, inner: str) -> str:
    return (
        f"<html><body style='{_BODY_STYLE}'>\n"
        f"<h2 style='{_HEADING_STYLE}'>{escape(heading)}</h2>\n"
        f"{inner}\n"
        "</body></html>\n"
    )


def render_registrant_email(registration: Registration, event: EventSettings) -> str:
    """Render the confirmation sent to the registrant."""

    lines = [
        f"<p>Dear <strong>{escape(registration.full_name)}</strong>,</p>",
        (
            f"<p>Your registration for the <strong>{escape(event.name)}</strong> "
            "has been received.</p>"
        ),
        "<p><strong>Details:</strong></p>",
        "<ul>",
        f"  <li>Date: {escape(event.date_text)}</li>",
        f"  <li>Venue: {escape(event.venue)}</li>",
        f"  <li>Fee: {format_amount(event.fee_per_attendee, event.currency)} per person</li>",
        f"  <li>Attendees: {registration.attendees}</li>",
        f"  <li>Payment Method: {escape(registration.payment_method)}</li>",
        f"  <li>Total Amount: {format_amount(registration.total_amount, event.currency)}</li>",
        "</ul>",
    ]
    if event.payment_instructions:
        lines.append(f"<p>{escape(event.payment_instructions)}</p>")
    if event.contact_text:
        lines.append(f"<p>{escape(event.contact_text)}</p>")
    lines.append(f"<p>- {escape(event.organizer_name)}</p>")

    return _wrap("Thank you for registering!", "\n".join(lines))


def render_admin_email(registration: Registration, event: EventSettings) -> str:
    """Render the new-registration notice sent to the administrator."""

    fields = [
        ("Name", escape(registration.full_name)),
        ("Email", escape(str(registration.email))),
        ("Phone", escape(registration.phone)),
        ("Organization", escape(registration.organization)),
        ("Attendees", str(registration.attendees)),
        ("Payment Method", escape(registration.payment_method)),
        ("Total", format_amount(registration.total_amount, event.currency)),
        ("IP", escape(registration.client_ip)),
    ]
    rows = "<br>\n".join(f"<strong>{label}:</strong> {value}" for label, value in fields)

    return _wrap(f"New Registration: {event.name}", f"<p>{rows}</p>")
