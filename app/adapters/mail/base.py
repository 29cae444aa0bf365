from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OutgoingEmail:
	"""A single HTML notification ready for delivery."""

	to: str
	subject: str
	html_body: str


class AbstractMailer(ABC):
	"""Interface for notification mail transports."""

	@abstractmethod
	def send(self, message: OutgoingEmail) -> None:
		"""Deliver one message.

		Args:
			message: Recipient, subject and HTML body.

		Raises:
			MailDeliveryAppError: If the transport rejects or fails to send it.
		"""
		...
