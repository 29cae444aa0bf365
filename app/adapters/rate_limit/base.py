"""Rate limiter interfaces.

The service layer depends on these abstractions (not the concrete
implementations) so storage backends can be swapped with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Literal

RateLimitReason = Literal["hourly_limit", "daily_limit"]


@dataclass(frozen=True)
class RateWindowResult:
    """Decision returned by a check-and-record operation.

    Attributes:
        allowed: Whether the submission may proceed.
        reason: Which window was violated (None when allowed).
        retry_after_seconds: Positive wait time in seconds (None when allowed).
    """

    allowed: bool
    reason: RateLimitReason | None = None
    retry_after_seconds: int | None = None


class AbstractRateRecordStore(ABC):
    """Key-value storage for serialized rate records."""

    @abstractmethod
    def load(self, key: str) -> bytes | None:
        """Return the stored bytes for key, or None when absent.

        Raises:
            OSError: If the backing storage cannot be read.
        """
        raise NotImplementedError

    @abstractmethod
    def store_atomic(self, key: str, data: bytes) -> None:
        """Replace the stored bytes for key so readers never see a partial write.

        Raises:
            StorageAppError: If the data could not be persisted.
        """
        raise NotImplementedError

    @abstractmethod
    def lock(self, key: str) -> AbstractContextManager[None]:
        """Return a context manager holding an exclusive lock scoped to key."""
        raise NotImplementedError


class AbstractRateLimiter(ABC):
    """Interface for per-identity rate limiters."""

    @abstractmethod
    def check_and_record(self, identity: str, now: float | None = None) -> RateWindowResult:
        """Decide whether identity may submit now and record the event if so.

        Args:
            identity: Validated, non-empty identity string (an email address).
            now: UNIX time in seconds; defaults to the limiter's clock.

        Returns:
            RateWindowResult describing whether it was allowed.
        """
        raise NotImplementedError
