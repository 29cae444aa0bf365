"""Tests for rate record storage backends."""

from __future__ import annotations

import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest.mock import patch

import pytest

from app.adapters.rate_limit.filesystem import FileRateRecordStore
from app.adapters.rate_limit.in_memory import InMemoryRateRecordStore
from app.adapters.rate_limit.rolling_window import RollingWindowRateLimiter, build_identity_key
from app.core.errors import StorageAppError

KEY = build_identity_key("jane@example.com")


class TestFileRateRecordStore:
    def test_creates_directory(self, tmp_path: Path) -> None:
        directory = tmp_path / "nested" / "ratelimit"
        FileRateRecordStore(directory)
        assert directory.is_dir()

    def test_load_missing_returns_none(self, tmp_path: Path) -> None:
        store = FileRateRecordStore(tmp_path)
        assert store.load(KEY) is None

    def test_store_then_load(self, tmp_path: Path) -> None:
        store = FileRateRecordStore(tmp_path)
        store.store_atomic(KEY, b'{"timestamps":[1,2]}')

        assert store.load(KEY) == b'{"timestamps":[1,2]}'
        assert (tmp_path / f"{KEY}.json").is_file()

    def test_store_replaces_and_leaves_no_temp_files(self, tmp_path: Path) -> None:
        store = FileRateRecordStore(tmp_path)
        store.store_atomic(KEY, b"first")
        store.store_atomic(KEY, b"second")

        assert store.load(KEY) == b"second"
        assert list(tmp_path.glob("*.tmp")) == []

    def test_failed_replace_raises_and_keeps_previous_record(self, tmp_path: Path) -> None:
        store = FileRateRecordStore(tmp_path)
        store.store_atomic(KEY, b"original")

        with patch("app.adapters.rate_limit.filesystem.os.replace", side_effect=OSError("boom")):
            with pytest.raises(StorageAppError) as exc_info:
                store.store_atomic(KEY, b"updated")

        assert exc_info.value.code == "rate_record_write_failed"
        assert store.load(KEY) == b"original"
        assert list(tmp_path.glob("*.tmp")) == []

    @pytest.mark.parametrize("key", ["../escape", "UPPERCASE0000000000", "short", "a/b"])
    def test_rejects_keys_that_are_not_hex_digests(self, tmp_path: Path, key: str) -> None:
        store = FileRateRecordStore(tmp_path)
        with pytest.raises(ValueError):
            store.load(key)

    def test_lock_is_exclusive_across_threads(self, tmp_path: Path) -> None:
        store = FileRateRecordStore(tmp_path)
        inside = 0
        max_inside = 0
        guard = threading.Lock()

        def critical_section() -> None:
            nonlocal inside, max_inside
            with store.lock(KEY):
                with guard:
                    inside += 1
                    max_inside = max(max_inside, inside)
                time.sleep(0.01)
                with guard:
                    inside -= 1

        with ThreadPoolExecutor(max_workers=8) as pool:
            for future in [pool.submit(critical_section) for _ in range(16)]:
                future.result()

        assert max_inside == 1


class TestInMemoryRateRecordStore:
    def test_round_trip(self) -> None:
        store = InMemoryRateRecordStore()
        assert store.load(KEY) is None

        store.store_atomic(KEY, b"data")

        assert store.load(KEY) == b"data"
        assert store.load("0" * 64) is None

    def test_same_key_returns_same_lock(self) -> None:
        store = InMemoryRateRecordStore()
        assert store._get_key_lock(KEY) is store._get_key_lock(KEY)
        assert store._get_key_lock(KEY) is not store._get_key_lock("0" * 64)


@pytest.mark.parametrize("store_factory", ["memory", "file"])
def test_concurrent_submissions_never_exceed_cap(tmp_path: Path, store_factory: str) -> None:
    store = InMemoryRateRecordStore() if store_factory == "memory" else FileRateRecordStore(tmp_path)
    limiter = RollingWindowRateLimiter(store=store, max_per_hour=3, max_per_day=10)

    with ThreadPoolExecutor(max_workers=10) as pool:
        results = list(
            pool.map(lambda _: limiter.check_and_record("jane@example.com", 1_000), range(20))
        )

    assert sum(result.allowed for result in results) == 3
    denied = [result for result in results if not result.allowed]
    assert all(result.reason == "hourly_limit" for result in denied)

    stored = json.loads(store.load(KEY) or b"{}")
    assert stored == {"timestamps": [1_000, 1_000, 1_000]}
