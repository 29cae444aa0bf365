"""Filesystem rate record store.

One ``<key>.json`` file per identity inside a single directory. Writes go to a
temporary file in the same directory which is fsynced and then moved over the
record with ``os.replace``, so readers see either the old or the new record.

Per-key locking uses an advisory ``flock`` on a sibling ``<key>.lock`` file.
Each ``lock()`` call opens its own descriptor, so the lock serializes threads
of one worker as well as separate worker processes.
"""

from __future__ import annotations

import fcntl
import logging
import os
import re
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from app.adapters.rate_limit.base import AbstractRateRecordStore
from app.core.errors import StorageAppError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[0-9a-f]{16,128}$")


class FileRateRecordStore(AbstractRateRecordStore):
    """Rate record store keeping one JSON file per hashed identity."""

    def __init__(self, directory: Path | str) -> None:
        """Initialize the store, creating the directory if needed.

        Args:
            directory: Directory holding record and lock files.
        """
        self._directory = Path(directory)
        self._directory.mkdir(mode=0o755, parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str, suffix: str) -> Path:
        # Keys become file names; only hex digests are accepted.
        if not _KEY_PATTERN.match(key):
            raise ValueError("key must be a lowercase hex digest")
        return self._directory / f"{key}{suffix}"

    def load(self, key: str) -> bytes | None:
        path = self._path_for(key, ".json")
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def store_atomic(self, key: str, data: bytes) -> None:
        path = self._path_for(key, ".json")
        temp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="wb",
                dir=self._directory,
                prefix=f".{key}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_name = handle.name
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_name, path)
            temp_name = None
        except OSError as exc:
            raise StorageAppError(
                code="rate_record_write_failed",
                message="Unable to persist rate record",
                details={"hint": type(exc).__name__},
            ) from exc
        finally:
            if temp_name is not None:
                try:
                    os.unlink(temp_name)
                except OSError:
                    logger.debug("rate_store.temp_cleanup_failed", extra={"key_hash": key[:16]})

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        lock_path = self._path_for(key, ".lock")
        with open(lock_path, "a+b") as handle:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
