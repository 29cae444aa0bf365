"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep backward compatibility while encouraging
    consistent shapes across the codebase.
    """

    code: str
    message: str
    hint: str
    http_status: int
    retry_after_seconds: int
    retry_text: str
    missing_fields: list[str]
    field: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class RateLimitAppError(AppError):
    """Raised when a submission exceeds the per-email rate limit."""

    @property
    def retry_after_seconds(self) -> int | None:
        if not self.details:
            return None
        return self.details.get("retry_after_seconds")


class StorageAppError(AppError):
    """Raised when a rate record cannot be persisted."""


class RecordPersistenceAppError(AppError):
    """Raised when an accepted registration cannot be written to the record."""


class MailDeliveryAppError(AppError):
    """Raised when a notification email cannot be delivered."""
