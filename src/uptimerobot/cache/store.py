"""Disk-based response caching keyed by request fingerprint.

Each entry is one file named after the hex SHA-512 of the endpoint followed
directly by the form parameters, holding the raw response bytes exactly as
the API returned them.  The file's modification time is the freshness
clock: an entry is fresh while its mtime lies strictly after
``now - ttl_seconds``.

The layout matches the Terraform UptimeRobot provider, so both tools share
entries under ``<user cache dir>/terraform-uptimerobot/``.  Because the two
fields are hashed without a separator, ``("ab", "c")`` and ``("a", "bc")``
resolve to the same entry.

Stale entries are never deleted here; the next successful write replaces
them.
"""

from __future__ import annotations

import hashlib
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, Optional

from uptimerobot.config import get_cache_dir, make_dirs
from uptimerobot.exceptions import CacheError, ConfigError
from uptimerobot.output import debug

CACHE_FILE_MODE = 0o640


def fingerprint(endpoint: str, params: str) -> str:
    """Return the hex SHA-512 of ``endpoint`` immediately followed by ``params``."""
    hasher = hashlib.sha512()
    hasher.update(endpoint.encode("utf-8"))
    hasher.update(params.encode("utf-8"))
    return hasher.hexdigest()


class ResponseCache:
    """TTL file cache for raw API response bodies.

    Args:
        ttl_seconds: Entry lifetime.  Zero or less disables the cache:
            :meth:`read_fresh` always misses and :meth:`write` does nothing.
        cache_dir: Directory holding the entries.  Defaults to
            :func:`~uptimerobot.config.get_cache_dir`, resolved on first use.
        clock: Wall-clock source compared against file mtimes.

    Example::

        cache = ResponseCache(3600)
        path = cache.fingerprint_path("getMonitors", "monitors=123")
        body = cache.read_fresh(path)
        if body is None:
            body = fetch()
            cache.write(path, body)
    """

    def __init__(
        self,
        ttl_seconds: int,
        cache_dir: str | Path | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl = ttl_seconds
        self._cache_dir = Path(cache_dir) if cache_dir is not None else None
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def directory(self) -> Path:
        """Return the cache directory, creating it (mode ``0750``) if absent.

        Raises:
            CacheError: If the directory cannot be resolved or created.
        """
        try:
            if self._cache_dir is None:
                return get_cache_dir()
            make_dirs(self._cache_dir)
            return self._cache_dir
        except (OSError, RuntimeError, ConfigError) as exc:
            raise CacheError(f"Cannot prepare cache directory: {exc}") from exc

    def fingerprint_path(self, endpoint: str, params: str) -> Path:
        """Return the entry path for a request.

        Raises:
            CacheError: If the cache directory cannot be prepared.
        """
        return self.directory() / fingerprint(endpoint, params)

    def read_fresh(self, path: Path) -> Optional[bytes]:
        """Return the entry's bytes if it exists and is within the TTL window.

        Missing, stale and unreadable entries all return ``None``.
        """
        if not self.enabled:
            return None
        try:
            mtime = path.stat().st_mtime
        except OSError:
            return None

        if mtime <= self._clock() - self._ttl:
            return None

        try:
            body = path.read_bytes()
        except OSError:
            return None
        debug(f"Cache hit: {path}")
        return body

    def write(self, path: Path, data: bytes) -> None:
        """Replace the entry at *path* with *data*; failures are ignored.

        The bytes go to a temp file in the same directory which is then
        renamed over *path*, so concurrent readers never see a partial entry.
        """
        if not self.enabled:
            return
        try:
            _atomic_write_bytes(path, data)
        except OSError as exc:
            debug(f"Cache write failed for {path}: {exc}")


def _atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write *data* to *path* via temp file + rename, with mode ``0640``."""
    tmp_path: Optional[str] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.name[:16]}.",
            suffix=".tmp",
            delete=False,
        ) as fd:
            tmp_path = fd.name
            fd.write(data)
            fd.flush()
            os.fsync(fd.fileno())
        os.chmod(tmp_path, CACHE_FILE_MODE)
        os.replace(tmp_path, path)
        tmp_path = None
    finally:
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
