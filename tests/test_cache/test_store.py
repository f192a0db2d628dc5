"""Tests for the fingerprint-keyed TTL file cache."""

from __future__ import annotations

import hashlib
import os
import stat
from pathlib import Path

import pytest

from uptimerobot.cache import ResponseCache, fingerprint
from uptimerobot.exceptions import CacheError

BODY = b'{"stat":"ok","monitors":[{"id":777749809,"status":2}]}'


class Clock:
    """Settable wall clock."""

    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture()
def cache(cache_dir: Path) -> ResponseCache:
    return ResponseCache(300, cache_dir=cache_dir)


# ------------------------------------------------------------------ #
# Fingerprinting
# ------------------------------------------------------------------ #


class TestFingerprint:
    def test_is_sha512_of_endpoint_then_params(self) -> None:
        expected = hashlib.sha512(b"getMonitorsmonitors=1-2").hexdigest()
        assert fingerprint("getMonitors", "monitors=1-2") == expected
        assert len(expected) == 128

    def test_deterministic(self, cache: ResponseCache) -> None:
        path1 = cache.fingerprint_path("getMonitors", "monitors=1")
        path2 = cache.fingerprint_path("getMonitors", "monitors=1")
        assert path1 == path2

    def test_varies_with_params(self, cache: ResponseCache) -> None:
        path1 = cache.fingerprint_path("getMonitors", "monitors=1")
        path2 = cache.fingerprint_path("getMonitors", "monitors=2")
        assert path1 != path2

    def test_varies_with_endpoint(self, cache: ResponseCache) -> None:
        path1 = cache.fingerprint_path("getMonitors", "")
        path2 = cache.fingerprint_path("getAlertContacts", "")
        assert path1 != path2

    def test_unseparated_fields_collide(self, cache: ResponseCache) -> None:
        """Endpoint and params are hashed back to back with no separator."""
        assert cache.fingerprint_path("ab", "c") == cache.fingerprint_path("a", "bc")

    def test_path_is_under_cache_dir(self, cache: ResponseCache, cache_dir: Path) -> None:
        path = cache.fingerprint_path("getMonitors", "")
        assert path.parent == cache_dir
        assert path.name == fingerprint("getMonitors", "")


# ------------------------------------------------------------------ #
# Cache directory
# ------------------------------------------------------------------ #


class TestDirectory:
    def test_created_with_parents(self, tmp_path: Path) -> None:
        nested = tmp_path / "a" / "b" / "c"
        ResponseCache(300, cache_dir=nested).fingerprint_path("getMonitors", "")
        assert nested.is_dir()

    def test_mode_0750(self, cache: ResponseCache, cache_dir: Path, umask_022) -> None:
        cache.fingerprint_path("getMonitors", "")
        assert stat.S_IMODE(cache_dir.stat().st_mode) == 0o750

    def test_missing_parents_get_mode_0750(self, tmp_path: Path, umask_022) -> None:
        before = stat.S_IMODE(tmp_path.stat().st_mode)
        leaf = tmp_path / "a" / "b"
        ResponseCache(60, cache_dir=leaf).fingerprint_path("getMonitors", "")
        assert stat.S_IMODE((tmp_path / "a").stat().st_mode) == 0o750
        assert stat.S_IMODE(leaf.stat().st_mode) == 0o750
        assert stat.S_IMODE(tmp_path.stat().st_mode) == before

    def test_defaults_to_user_cache_dir(self, isolated_cache: Path) -> None:
        path = ResponseCache(300).fingerprint_path("getMonitors", "")
        assert path.parent == isolated_cache
        assert isolated_cache.name == "terraform-uptimerobot"
        assert isolated_cache.is_dir()

    def test_unusable_directory_raises_cache_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        cache = ResponseCache(300, cache_dir=blocker / "sub")
        with pytest.raises(CacheError):
            cache.fingerprint_path("getMonitors", "")

    def test_unresolvable_user_cache_dir_raises_cache_error(self, monkeypatch) -> None:
        from uptimerobot.exceptions import ConfigError

        def _fail():
            raise ConfigError("%LOCALAPPDATA% is not defined")

        monkeypatch.setattr("uptimerobot.config.user_cache_dir", _fail)
        with pytest.raises(CacheError, match="LOCALAPPDATA"):
            ResponseCache(300).fingerprint_path("getMonitors", "")


# ------------------------------------------------------------------ #
# Read / write
# ------------------------------------------------------------------ #


class TestReadWrite:
    def test_round_trip(self, cache: ResponseCache) -> None:
        path = cache.fingerprint_path("getMonitors", "monitors=1")
        cache.write(path, BODY)
        assert cache.read_fresh(path) == BODY

    def test_bytes_are_stored_verbatim(self, cache: ResponseCache) -> None:
        path = cache.fingerprint_path("getMonitors", "")
        raw = b'{ "stat" : "ok",\n  "note": "caf\xc3\xa9" }'
        cache.write(path, raw)
        assert path.read_bytes() == raw

    def test_file_mode_0640(self, cache: ResponseCache) -> None:
        path = cache.fingerprint_path("getMonitors", "")
        cache.write(path, BODY)
        assert stat.S_IMODE(path.stat().st_mode) == 0o640

    def test_write_replaces_existing_content(self, cache: ResponseCache) -> None:
        path = cache.fingerprint_path("getMonitors", "")
        cache.write(path, b'{"stat":"ok","old":true}')
        cache.write(path, BODY)
        assert cache.read_fresh(path) == BODY

    def test_no_temp_files_left_behind(self, cache: ResponseCache, cache_dir: Path) -> None:
        path = cache.fingerprint_path("getMonitors", "")
        cache.write(path, BODY)
        assert sorted(os.listdir(cache_dir)) == [path.name]

    def test_missing_entry_returns_none(self, cache: ResponseCache) -> None:
        path = cache.fingerprint_path("getMonitors", "never-written")
        assert cache.read_fresh(path) is None

    def test_unreadable_entry_returns_none(self, cache: ResponseCache) -> None:
        path = cache.fingerprint_path("getMonitors", "")
        path.mkdir()
        assert cache.read_fresh(path) is None

    def test_write_failure_is_swallowed(self, cache: ResponseCache, tmp_path: Path) -> None:
        path = tmp_path / "does-not-exist" / "entry"
        cache.write(path, BODY)
        assert not path.exists()


# ------------------------------------------------------------------ #
# TTL
# ------------------------------------------------------------------ #


class TestTTL:
    def test_fresh_just_inside_ttl(self, cache_dir: Path) -> None:
        clock = Clock(0)
        cache = ResponseCache(60, cache_dir=cache_dir, clock=clock)
        path = cache.fingerprint_path("getMonitors", "")
        cache.write(path, BODY)
        written_at = path.stat().st_mtime

        clock.now = written_at + 60 - 1
        assert cache.read_fresh(path) == BODY

    def test_stale_just_outside_ttl(self, cache_dir: Path) -> None:
        clock = Clock(0)
        cache = ResponseCache(60, cache_dir=cache_dir, clock=clock)
        path = cache.fingerprint_path("getMonitors", "")
        cache.write(path, BODY)
        written_at = path.stat().st_mtime

        clock.now = written_at + 60 + 1
        assert cache.read_fresh(path) is None

    def test_stale_entry_is_left_in_place(self, cache: ResponseCache) -> None:
        path = cache.fingerprint_path("getMonitors", "")
        cache.write(path, BODY)
        old = path.stat().st_mtime - 3600
        os.utime(path, (old, old))

        assert cache.read_fresh(path) is None
        assert path.read_bytes() == BODY

    def test_stale_entry_is_refreshed_by_write(self, cache: ResponseCache) -> None:
        path = cache.fingerprint_path("getMonitors", "")
        cache.write(path, b'{"stat":"ok","old":true}')
        old = path.stat().st_mtime - 3600
        os.utime(path, (old, old))

        cache.write(path, BODY)
        assert cache.read_fresh(path) == BODY


# ------------------------------------------------------------------ #
# Disabled cache
# ------------------------------------------------------------------ #


class TestDisabled:
    @pytest.mark.parametrize("ttl", [0, -1])
    def test_read_always_misses(self, cache_dir: Path, ttl: int) -> None:
        enabled = ResponseCache(300, cache_dir=cache_dir)
        path = enabled.fingerprint_path("getMonitors", "")
        enabled.write(path, BODY)

        disabled = ResponseCache(ttl, cache_dir=cache_dir)
        assert disabled.enabled is False
        assert disabled.read_fresh(path) is None

    def test_write_is_noop(self, cache_dir: Path) -> None:
        cache = ResponseCache(0, cache_dir=cache_dir)
        path = cache.fingerprint_path("getMonitors", "")
        cache.write(path, BODY)
        assert not path.exists()

    def test_enabled_flag(self, cache: ResponseCache) -> None:
        assert cache.enabled is True
        assert cache.ttl_seconds == 300
