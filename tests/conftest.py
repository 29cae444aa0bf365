"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It points every writable path at a throwaway directory and selects the
console mailer before the settings module is imported.
"""

import os
import tempfile
from pathlib import Path

import pytest

# CRITICAL: Set these before any imports that might load settings
_TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="registration-tests-"))

os.environ["APP_ENV"] = "testing"
os.environ.setdefault("APP_RATE_LIMIT_DIR", str(_TEST_DATA_DIR / "ratelimit"))
os.environ.setdefault("APP_RECORDS_CSV_PATH", str(_TEST_DATA_DIR / "registrations.csv"))
os.environ.setdefault("APP_RECORDS_BACKUP_DIR", str(_TEST_DATA_DIR / "backups"))
os.environ.setdefault("MAIL_BACKEND", "console")
os.environ.setdefault("MAIL_ADMIN_ADDRESS", "admin@example.com")
os.environ.setdefault("LOG_LEVEL", "WARNING")


class FakeClock:
    """Deterministic clock for rate limiter tests."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
