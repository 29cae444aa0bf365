"""In-memory rate record store.

Notes:
- Per-process only: meant for tests and single-worker development.
- Thread-safe: every key gets its own lock; the lock registry and the data
  map are guarded by a shared lock.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from app.adapters.rate_limit.base import AbstractRateRecordStore


class InMemoryRateRecordStore(AbstractRateRecordStore):
    """Rate record store backed by a plain dict."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._data: dict[str, bytes] = {}
        self._key_locks: dict[str, threading.Lock] = {}

    def load(self, key: str) -> bytes | None:
        with self._guard:
            return self._data.get(key)

    def store_atomic(self, key: str, data: bytes) -> None:
        with self._guard:
            self._data[key] = bytes(data)

    def _get_key_lock(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._key_locks[key] = lock
            return lock

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        key_lock = self._get_key_lock(key)
        with key_lock:
            yield
