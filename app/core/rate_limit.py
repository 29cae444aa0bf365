"""Rate limiting wiring for the registration flow.

This module builds the configured limiter and translates its decisions into
application errors the HTTP layer understands.

Design goals:
- Minimal coupling: the service depends on ``enforce_rate_limit`` only.
- Swap-friendly: storage backend can be replaced behind an abstract interface.
- Observable fail-open: storage problems are logged by the limiter itself.

Rate limiting strategy:
- Rolling hourly and daily caps per submitter email.
- One JSON record per hashed email in ``APP_RATE_LIMIT_DIR``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.filesystem import FileRateRecordStore
from app.adapters.rate_limit.rolling_window import RollingWindowRateLimiter
from app.core.config import settings
from app.core.errors import RateLimitAppError
from app.core.logging import hash_for_logs
from app.utils.time_format import build_retry_text

logger = logging.getLogger(__name__)


_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple[int, int, int, Path] | None = None

_REASON_MESSAGES = {
    "hourly_limit": "Hourly limit exceeded",
    "daily_limit": "Daily limit exceeded",
}


def get_rate_limiter() -> AbstractRateLimiter:
    """Return a process-wide rate limiter instance.

    The limiter holds no per-request state, but building it creates the
    storage directory, so it is cached. If configuration changes (primarily
    in tests), the limiter is rebuilt.

    Returns:
        AbstractRateLimiter: Configured limiter instance.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.rate_limit_max_per_hour,
        settings.app.rate_limit_max_per_day,
        settings.app.rate_limit_max_records,
        Path(settings.app.rate_limit_dir),
    )

    if _limiter is None or _limiter_config != config:
        _limiter = RollingWindowRateLimiter(
            store=FileRateRecordStore(config[3]),
            max_per_hour=config[0],
            max_per_day=config[1],
            max_records=config[2],
        )
        _limiter_config = config

    return _limiter


def enforce_rate_limit(
    identity: str,
    *,
    limiter: AbstractRateLimiter,
    now: float | None = None,
) -> None:
    """Consume one submission from the identity's budget.

    Args:
        identity: Validated submitter email.
        limiter: Limiter to consult.
        now: Optional UNIX time override.

    Raises:
        RateLimitAppError: When the hourly or daily cap is exceeded.
    """

    if not settings.app.rate_limit_enabled:
        logger.debug("rate_limit.skipped", extra={"reason": "rate_limit_disabled"})
        return

    key_hash = hash_for_logs(identity)
    result = limiter.check_and_record(identity, now)
    if result.allowed:
        logger.info("rate_limit.allowed", extra={"key_hash": key_hash})
        return

    reason = result.reason or "rate_limited"
    retry_after = result.retry_after_seconds or 1
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": key_hash,
            "reason": reason,
            "retry_after_s": retry_after,
        },
    )

    raise RateLimitAppError(
        code=reason,
        message=_REASON_MESSAGES.get(reason, "Rate limit exceeded"),
        details={
            "retry_after_seconds": retry_after,
            "retry_text": build_retry_text(retry_after),
        },
    )
