"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import EmailStr, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment.

    Pydantic Settings (v2) can populate values from environment variables.
    However, static type checkers often treat required fields as required
    constructor arguments, which is not how BaseSettings is intended to be used.
    """

    return AppSettings()  # type: ignore[call-arg]


def _build_event_settings() -> "EventSettings":
    """Build event settings from environment (see _build_app_settings)."""

    return EventSettings()  # type: ignore[call-arg]


def _build_mail_settings() -> "MailSettings":
    """Build mail settings from environment (see _build_app_settings)."""

    return MailSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    """Build logging settings from environment (see _build_app_settings)."""

    return LogSettings()  # type: ignore[call-arg]


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-email submission rate limiting",
    )
    rate_limit_max_per_hour: int = Field(
        3,
        description="Maximum submissions per email in any rolling 60-minute window",
        ge=0,
    )
    rate_limit_max_per_day: int = Field(
        10,
        description="Maximum submissions per email in any rolling 24-hour window",
        ge=0,
    )
    rate_limit_max_records: int = Field(
        500,
        description="Maximum number of timestamps kept per email record",
        ge=1,
    )
    rate_limit_dir: Path = Field(
        Path("data/ratelimit"),
        description="Directory holding one JSON rate record per hashed email",
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include a Retry-After header when throttling",
    )

    records_csv_path: Path = Field(
        Path("data/registrations.csv"),
        description="CSV file receiving one row per accepted registration",
    )
    records_backup_dir: Path = Field(
        Path("data/backups"),
        description="Directory receiving one daily copy of the registrations CSV",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class EventSettings(BaseSettings):
    """Details of the event registrations are taken for."""

    name: str = Field(
        "Governance & Compliance Seminar",
        description="Event title used in notification emails",
    )
    date_text: str = Field(
        "To be announced",
        description="Human-readable event date",
    )
    venue: str = Field(
        "To be announced",
        description="Human-readable event venue",
    )
    fee_per_attendee: int = Field(
        20000,
        description="Fixed fee charged per attendee",
        ge=0,
    )
    currency: str = Field(
        "KES",
        description="Currency code shown next to amounts",
    )
    min_attendees: int = Field(
        1,
        description="Lower clamp applied to the submitted attendee count",
        ge=1,
    )
    max_attendees: int = Field(
        20,
        description="Upper clamp applied to the submitted attendee count",
        ge=1,
    )
    default_organization: str = Field(
        "Not specified",
        description="Organization stored when the field is left empty",
    )
    payment_instructions: str | None = Field(
        None,
        description="Payment instructions included in the registrant email",
    )
    contact_text: str | None = Field(
        None,
        description="Contact line included in the registrant email",
    )
    organizer_name: str = Field(
        "The Organizers",
        description="Signature used in the registrant email",
    )

    model_config = SettingsConfigDict(
        env_prefix="EVENT_",
        case_sensitive=False,
    )


class MailSettings(BaseSettings):
    """Outgoing notification mail configuration.

    The ``console`` backend only logs messages and is meant for development
    and tests. Validation of backend-specific requirements happens in the
    mailer factory.
    """

    backend: str = Field(
        "smtp",
        description="Mail backend name (smtp, console)",
    )
    host: str = Field(
        "localhost",
        description="SMTP server host",
    )
    port: int = Field(
        25,
        description="SMTP server port",
    )
    username: str | None = Field(
        None,
        description="SMTP login user (login is skipped when unset)",
    )
    password: str | None = Field(
        None,
        description="SMTP login password",
    )
    use_tls: bool = Field(
        False,
        description="Upgrade the SMTP connection with STARTTLS",
    )
    timeout_seconds: float = Field(
        10.0,
        description="SMTP connection timeout in seconds",
    )
    from_address: EmailStr = Field(
        "registrations@example.com",
        description="Sender and Reply-To address for all notifications",
    )
    admin_address: EmailStr = Field(
        "admin@example.com",
        description="Fixed administrative recipient of new-registration notices",
    )
    user_subject: str = Field(
        "Registration Confirmation",
        description="Subject of the registrant confirmation email",
    )
    admin_subject: str = Field(
        "New Registration",
        description="Subject of the administrator notification email",
    )

    model_config = SettingsConfigDict(
        env_prefix="MAIL_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field(
        "INFO",
        description="Root log level name",
    )
    format: str = Field(
        "json",
        description="Log format: json or plain",
    )
    output: str = Field(
        "stdout",
        description="Log destination: stdout or file",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output=file (default logs/app.log)",
    )
    max_bytes: int = Field(
        0,
        description="Rotate the log file at this size (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(
        5,
        description="Number of rotated log files to keep",
        ge=0,
    )
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are invalid.

    Environments:
    - development: Local development (DEBUG=true)
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=_build_app_settings)
    event: EventSettings = Field(default_factory=_build_event_settings)
    mail: MailSettings = Field(default_factory=_build_mail_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
