"""Rolling-window rate limiter with durable per-identity records.

Each identity (an email address) maps to one record holding the timestamps of
its accepted submissions. A check prunes everything older than the daily
window, counts what is left against the hourly and daily caps and, when
allowed, appends the current time and persists the record.

Failure policy (fail-open):
- Missing, unreadable or malformed records are treated as empty.
- A failed write is logged but the already-allowed submission proceeds.
"""

from __future__ import annotations

import hashlib
import json
import logging
import math
import time
from typing import Callable

from app.adapters.rate_limit.base import (
    AbstractRateLimiter,
    AbstractRateRecordStore,
    RateLimitReason,
    RateWindowResult,
)
from app.core.errors import StorageAppError

logger = logging.getLogger(__name__)

HOUR_WINDOW_SECONDS = 3600
DAY_WINDOW_SECONDS = 86400
DEFAULT_MAX_RECORDS = 500

# Used when a zero cap denies with no event in the window to measure from.
ZERO_CAP_RETRY_AFTER_SECONDS = 1


def build_identity_key(identity: str) -> str:
    """Derive the storage key for an identity.

    The key is the SHA-256 hex digest of the lowercased identity, so it is
    safe as a file name and does not expose the address in storage paths.
    """
    return hashlib.sha256(identity.lower().encode("utf-8")).hexdigest()


def decode_record(raw: bytes) -> list[int]:
    """Parse a persisted record into its list of timestamps.

    Raises:
        ValueError: If the payload is not a valid record.
    """
    payload = json.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("record must be a JSON object")

    timestamps = payload.get("timestamps")
    if not isinstance(timestamps, list):
        raise ValueError("record must contain a timestamps list")

    events: list[int] = []
    for value in timestamps:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("timestamps must be numbers")
        if not math.isfinite(value):
            raise ValueError("timestamps must be finite")
        events.append(int(value))
    return events


def encode_record(events: list[int]) -> bytes:
    return json.dumps({"timestamps": events}, separators=(",", ":")).encode("utf-8")


class RollingWindowRateLimiter(AbstractRateLimiter):
    """Per-identity limiter enforcing rolling hourly and daily caps.

    The whole load/decide/append/persist cycle runs under the store's
    per-key lock, so concurrent submissions for the same identity cannot
    both observe the pre-append state.
    """

    def __init__(
        self,
        *,
        store: AbstractRateRecordStore,
        max_per_hour: int = 3,
        max_per_day: int = 10,
        max_records: int = DEFAULT_MAX_RECORDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            store: Storage backend for serialized records.
            max_per_hour: Maximum events in any trailing 60 minutes.
            max_per_day: Maximum events in any trailing 24 hours.
            max_records: Maximum timestamps kept per record.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If a cap is negative or max_records is invalid.
        """
        if max_per_hour < 0:
            raise ValueError("max_per_hour must be >= 0")
        if max_per_day < 0:
            raise ValueError("max_per_day must be >= 0")
        if max_records < 1:
            raise ValueError("max_records must be >= 1")

        if max_per_hour == 0 or max_per_day == 0:
            logger.warning(
                "rate_limit.zero_cap_configured",
                extra={"max_per_hour": max_per_hour, "max_per_day": max_per_day},
            )

        self._store = store
        self._max_per_hour = max_per_hour
        self._max_per_day = max_per_day
        self._max_records = max_records
        self._clock = clock

    @property
    def max_per_hour(self) -> int:
        return self._max_per_hour

    @property
    def max_per_day(self) -> int:
        return self._max_per_day

    def _load_events(self, key: str) -> list[int]:
        """Load the timestamps for key, treating any failure as empty."""
        try:
            raw = self._store.load(key)
        except OSError as exc:
            logger.warning(
                "rate_limit.record_unreadable",
                extra={"key_hash": key[:16], "error_type": type(exc).__name__},
            )
            return []

        if raw is None:
            return []

        try:
            return decode_record(raw)
        except (ValueError, UnicodeDecodeError, OverflowError, RecursionError) as exc:
            logger.warning(
                "rate_limit.record_corrupt",
                extra={"key_hash": key[:16], "error_type": type(exc).__name__},
            )
            return []

    def _persist_events(self, key: str, events: list[int]) -> None:
        try:
            self._store.store_atomic(key, encode_record(events))
        except (StorageAppError, OSError) as exc:
            # Enforcement for this identity's next check is degraded.
            logger.error(
                "rate_limit.persist_failed",
                extra={"key_hash": key[:16], "error_type": type(exc).__name__},
            )

    def _deny(
        self,
        *,
        reason: RateLimitReason,
        window_events: list[int],
        window_seconds: int,
        now: int,
    ) -> RateWindowResult:
        if window_events:
            retry_after = max(1, (min(window_events) + window_seconds) - now)
        else:
            retry_after = ZERO_CAP_RETRY_AFTER_SECONDS
        return RateWindowResult(allowed=False, reason=reason, retry_after_seconds=retry_after)

    def check_and_record(self, identity: str, now: float | None = None) -> RateWindowResult:
        """Check the caps for identity and record the event when allowed.

        Args:
            identity: Validated, non-empty identity string (an email address).
            now: UNIX time in seconds; defaults to the limiter's clock.

        Returns:
            RateWindowResult with the decision and retry guidance.

        Raises:
            ValueError: If identity is empty.
        """
        if not identity:
            raise ValueError("identity must be a non-empty string")

        current = int(math.floor(self._clock() if now is None else now))
        key = build_identity_key(identity)

        with self._store.lock(key):
            day_events = [ts for ts in self._load_events(key) if ts >= current - DAY_WINDOW_SECONDS]
            hour_events = [ts for ts in day_events if ts >= current - HOUR_WINDOW_SECONDS]

            if len(hour_events) >= self._max_per_hour:
                return self._deny(
                    reason="hourly_limit",
                    window_events=hour_events,
                    window_seconds=HOUR_WINDOW_SECONDS,
                    now=current,
                )
            if len(day_events) >= self._max_per_day:
                return self._deny(
                    reason="daily_limit",
                    window_events=day_events,
                    window_seconds=DAY_WINDOW_SECONDS,
                    now=current,
                )

            day_events.append(current)
            if len(day_events) > self._max_records:
                day_events = day_events[-self._max_records:]
            self._persist_events(key, day_events)

        return RateWindowResult(allowed=True)
