"""Pydantic schemas for registration submissions and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Registration(BaseModel):
    """A validated, sanitized registration ready to be recorded."""

    full_name: str = Field(..., min_length=1, description="Registrant full name.")
    email: EmailStr = Field(..., description="Registrant email; also the rate-limit identity.")
    phone: str = Field(..., description="Phone number reduced to digits and '+'.")
    organization: str = Field(..., description="Organization, or the configured default.")
    attendees: int = Field(..., ge=1, description="Clamped number of attendees.")
    payment_method: str = Field(..., min_length=1, description="Chosen payment method.")
    total_amount: int = Field(..., ge=0, description="attendees x fee per attendee.")
    client_ip: str = Field("unknown", description="Submitter network address.")
    submitted_at: datetime = Field(..., description="Local time the submission was accepted.")


class RegistrationSummary(BaseModel):
    """Subset of a registration echoed back to the client."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: EmailStr
    attendees: int
    payment_method: str = Field(..., alias="paymentMethod")
    total_amount: int = Field(..., alias="totalAmount")

    @classmethod
    def from_registration(cls, registration: Registration) -> "RegistrationSummary":
        return cls(
            name=registration.full_name,
            email=registration.email,
            attendees=registration.attendees,
            payment_method=registration.payment_method,
            total_amount=registration.total_amount,
        )


class RegistrationResponse(BaseModel):
    """Successful submission response."""

    success: bool = Field(True, description="Always true for accepted submissions.")
    message: str = Field(
        "Registration saved successfully!",
        description="Human-readable confirmation.",
    )
    data: RegistrationSummary
