"""Mailer that only logs messages (development and tests)."""

from __future__ import annotations

import logging

from app.adapters.mail.base import AbstractMailer, OutgoingEmail
from app.core.logging import hash_for_logs

logger = logging.getLogger(__name__)


class ConsoleMailer(AbstractMailer):
    """Log outgoing messages instead of delivering them."""

    def __init__(self, *, from_address: str) -> None:
        self.from_address = from_address
        self.sent: list[OutgoingEmail] = []

    def send(self, message: OutgoingEmail) -> None:
        self.sent.append(message)
        logger.info(
            "mail.console_delivery",
            extra={
                "recipient_hash": hash_for_logs(message.to),
                "subject": message.subject,
                "body_chars": len(message.html_body),
            },
        )
