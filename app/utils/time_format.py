"""Human-readable formatting of retry delays."""

from __future__ import annotations


def format_hms(seconds: int) -> str:
    """Format a non-negative duration as ``HH:MM:SS``.

    Hours are not wrapped at 24, so a full day renders as ``24:00:00``.
    """
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def build_retry_text(retry_after_seconds: int | None) -> str:
    """Build the client-facing retry hint, or an empty string without a delay."""
    if not retry_after_seconds:
        return ""
    return f"Try again in {format_hms(retry_after_seconds)} (HH:MM:SS)"
