"""Mail adapter layer - abstracts over notification transports."""

from app.adapters.mail.base import AbstractMailer, OutgoingEmail
from app.adapters.mail.factory import create_mailer

__all__ = ["AbstractMailer", "OutgoingEmail", "create_mailer"]
