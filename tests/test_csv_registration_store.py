"""Tests for the CSV registration store."""

from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from app.adapters.records.csv_store import CSV_HEADER, CsvRegistrationStore, registration_to_row
from app.core.errors import RecordPersistenceAppError
from app.schemas.registration import Registration


def _registration(**overrides) -> Registration:
    data = {
        "full_name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "+254705874715",
        "organization": "Not specified",
        "attendees": 2,
        "payment_method": "M-Pesa",
        "total_amount": 40000,
        "client_ip": "10.0.0.1",
        "submitted_at": datetime(2025, 11, 6, 9, 30, 0),
    }
    data.update(overrides)
    return Registration(**data)


def _read_rows(path: Path) -> list[list[str]]:
    with path.open(newline="", encoding="utf-8") as handle:
        return list(csv.reader(handle))


def test_row_matches_header_order() -> None:
    row = registration_to_row(_registration())

    assert len(row) == len(CSV_HEADER)
    assert row == [
        "2025-11-06 09:30:00",
        "Jane Doe",
        "jane@example.com",
        "+254705874715",
        "Not specified",
        2,
        "M-Pesa",
        40000,
        "10.0.0.1",
    ]


def test_header_is_written_once(tmp_path: Path) -> None:
    store = CsvRegistrationStore(tmp_path / "data" / "registrations.csv")

    store.append(_registration())
    store.append(_registration(full_name="John, Jr."))

    rows = _read_rows(tmp_path / "data" / "registrations.csv")
    assert rows[0] == CSV_HEADER
    assert len(rows) == 3
    assert rows[2][1] == "John, Jr."


def test_daily_backup_is_created_once_per_day(tmp_path: Path) -> None:
    csv_path = tmp_path / "registrations.csv"
    backup_dir = tmp_path / "backups"
    store = CsvRegistrationStore(csv_path, backup_dir)

    store.append(_registration())
    store.append(_registration(full_name="Second"))

    backup = backup_dir / "registrations_2025-11-06.csv"
    assert backup.is_file()
    # The backup is the snapshot taken after the first write of the day.
    assert len(_read_rows(backup)) == 2
    assert len(_read_rows(csv_path)) == 3

    store.append(_registration(submitted_at=datetime(2025, 11, 7, 8, 0, 0)))
    assert (backup_dir / "registrations_2025-11-07.csv").is_file()


def test_open_failure_raises_record_persistence_error(tmp_path: Path) -> None:
    store = CsvRegistrationStore(tmp_path / "registrations.csv")

    with patch.object(Path, "open", side_effect=PermissionError("read-only")):
        with pytest.raises(RecordPersistenceAppError) as exc_info:
            store.append(_registration())

    assert exc_info.value.code == "record_persistence_failed"


def test_backup_failure_is_not_fatal(tmp_path: Path) -> None:
    store = CsvRegistrationStore(tmp_path / "registrations.csv", tmp_path / "backups")

    with patch("app.adapters.records.csv_store.shutil.copy2", side_effect=OSError("full")):
        store.append(_registration())

    assert len(_read_rows(tmp_path / "registrations.csv")) == 2
