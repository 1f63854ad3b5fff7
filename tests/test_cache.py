"""Tests for the per-run source cache."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from snips.cache import SourceCache
from snips.errors import SourceFileUnreadable


class TestSourceCache:
    """Tests for SourceCache."""

    def test_reads_once(self, cache, tmp_path):
        """Test repeated lookups reuse the first read."""
        source = tmp_path / "a.rs"
        source.write_text("fn a() {}\n")

        first = cache.get(source)
        source.write_text("fn b() {}\n")
        second = cache.get(tmp_path / "." / "a.rs")

        assert first is second
        assert second.lines == ["fn a() {}"]
        assert cache.get_stats() == {"hits": 1, "misses": 1}
        assert source in cache
        assert len(cache) == 1

    def test_missing_file_error_is_cached(self, cache, tmp_path):
        """Test a missing source fails the same way on every lookup."""
        missing = tmp_path / "missing.rs"

        with pytest.raises(SourceFileUnreadable, match="file not found"):
            cache.get(missing)

        missing.write_text("created later\n")
        with pytest.raises(SourceFileUnreadable):
            cache.get(missing)

        assert cache.get_stats()["misses"] == 1

    def test_directory_is_unreadable(self, cache, tmp_path):
        """Test a directory path is reported as unreadable."""
        with pytest.raises(SourceFileUnreadable):
            cache.get(tmp_path)

    def test_put_text_seeds_entry(self, cache, tmp_path):
        """Test in-memory contents can stand in for a file."""
        path = tmp_path / "virtual.py"
        cache.put_text(path, "# snips-start: x\nvalue = 1\n# snips-end: x\n")

        assert cache.get(path).extract("x") == ["value = 1"]

    def test_slow_read_does_not_block_other_paths(self, cache, tmp_path, monkeypatch):
        """Test a source still being read does not hold up readers of another source."""
        slow = tmp_path / "slow.rs"
        fast = tmp_path / "fast.rs"
        slow.write_text("fn slow() {}\n")
        fast.write_text("fn fast() {}\n")

        slow_started = threading.Event()
        fast_done = threading.Event()
        original_read = SourceCache._read

        def read(self, key):
            if key.name == "slow.rs":
                slow_started.set()
                if not fast_done.wait(timeout=5):
                    raise AssertionError("fast.rs was blocked behind slow.rs")
            return original_read(self, key)

        monkeypatch.setattr(SourceCache, "_read", read)

        with ThreadPoolExecutor(max_workers=1) as executor:
            pending = executor.submit(cache.get, slow)
            assert slow_started.wait(timeout=5)
            assert cache.get(fast).lines == ["fn fast() {}"]
            fast_done.set()
            assert pending.result().lines == ["fn slow() {}"]

    def test_concurrent_readers_share_snapshot(self, cache, tmp_path):
        """Test concurrent lookups of one path return the same object."""
        source = tmp_path / "shared.rs"
        source.write_text("fn shared() {}\n")

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: cache.get(source), range(32)))

        assert all(result is results[0] for result in results)
        assert cache.get_stats() == {"hits": 31, "misses": 1}
