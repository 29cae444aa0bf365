"""CSV registration store with a daily backup copy.

Rows are appended under a process-wide lock; the header row is written only
when the file is created. After each append, the first write of a calendar day
copies the whole file to ``<backup_dir>/registrations_YYYY-MM-DD.csv``.
"""

from __future__ import annotations

import csv
import logging
import shutil
import threading
from pathlib import Path

from app.adapters.records.base import AbstractRegistrationStore
from app.core.errors import RecordPersistenceAppError
from app.schemas.registration import Registration

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "Timestamp",
    "Full Name",
    "Email",
    "Phone",
    "Organization",
    "Attendees",
    "Payment Method",
    "Total Amount",
    "IP Address",
]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def registration_to_row(registration: Registration) -> list[str | int]:
    """Convert a registration to a CSV row matching CSV_HEADER."""
    return [
        registration.submitted_at.strftime(TIMESTAMP_FORMAT),
        registration.full_name,
        str(registration.email),
        registration.phone,
        registration.organization,
        registration.attendees,
        registration.payment_method,
        registration.total_amount,
        registration.client_ip,
    ]


class CsvRegistrationStore(AbstractRegistrationStore):
    """Append registrations to a CSV file."""

    def __init__(self, csv_path: Path | str, backup_dir: Path | str | None = None) -> None:
        self._csv_path = Path(csv_path)
        self._backup_dir = Path(backup_dir) if backup_dir is not None else None
        self._lock = threading.Lock()

    @property
    def csv_path(self) -> Path:
        return self._csv_path

    def backup_path_for(self, registration: Registration) -> Path | None:
        if self._backup_dir is None:
            return None
        day = registration.submitted_at.strftime("%Y-%m-%d")
        return self._backup_dir / f"registrations_{day}.csv"

    def append(self, registration: Registration) -> None:
        row = registration_to_row(registration)

        with self._lock:
            try:
                self._csv_path.parent.mkdir(parents=True, exist_ok=True)
                is_new = not self._csv_path.exists()
                with self._csv_path.open("a", newline="", encoding="utf-8") as handle:
                    writer = csv.writer(handle)
                    if is_new:
                        writer.writerow(CSV_HEADER)
                    writer.writerow(row)
            except OSError as exc:
                logger.error(
                    "records.append_failed",
                    extra={"error_type": type(exc).__name__, "csv_path": str(self._csv_path)},
                )
                raise RecordPersistenceAppError(
                    code="record_persistence_failed",
                    message="Unable to save registration",
                ) from exc

            self._backup_daily(registration)

    def _backup_daily(self, registration: Registration) -> None:
        backup_path = self.backup_path_for(registration)
        if backup_path is None or backup_path.exists():
            return

        try:
            backup_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(self._csv_path, backup_path)
        except OSError as exc:
            # The row itself is already written; a missing backup is not fatal.
            logger.warning(
                "records.backup_failed",
                extra={"error_type": type(exc).__name__, "backup_path": str(backup_path)},
            )
            return

        logger.info("records.backup_created", extra={"backup_path": str(backup_path)})
