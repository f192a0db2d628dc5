"""Shared test fixtures for uptimerobot.

Provides an isolated cache directory, output-state resets, and helpers for
building clients wired to :class:`httpx.MockTransport` so that no test ever
touches the network, the real user cache, or sleeps for real.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import httpx
import pytest

from uptimerobot.cache import ResponseCache
from uptimerobot.client import UptimeRobotClient
from uptimerobot.models import ClientConfig, RequestConfig
from uptimerobot.output import OutputFormat, OutputManager, reset_output, set_output

API_KEY = "u123456-0123456789abcdef"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which go stale once a capture fixture or CliRunner
    swaps the streams.
    """
    yield
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN output manager for tests that ignore output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def umask_022():
    """Pin the process umask so directory modes are predictable."""
    old = os.umask(0o022)
    yield
    os.umask(old)


@pytest.fixture
def isolated_cache(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the user cache root at tmp_path and clear UPTIMEROBOT_* env vars.

    Returns:
        The directory entries will be written to
        (``<tmp>/cache/terraform-uptimerobot``).
    """
    root = tmp_path / "cache"
    monkeypatch.setattr("uptimerobot.config.user_cache_dir", lambda: root)
    for var in ["UPTIMEROBOT_API_KEY", "UPTIMEROBOT_CACHE_TTL"]:
        monkeypatch.delenv(var, raising=False)
    return root / "terraform-uptimerobot"


# ---------------------------------------------------------------------------
# Client helpers
# ---------------------------------------------------------------------------


class SleepRecorder:
    """Stand-in for time.sleep that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_client(
    tmp_path: Path, sleeps: SleepRecorder
) -> Callable[..., UptimeRobotClient]:
    """Factory for clients backed by a MockTransport handler.

    Keyword arguments other than ``ttl`` are forwarded to
    :class:`~uptimerobot.models.RequestConfig`.
    """
    clients: list[UptimeRobotClient] = []

    def _make(handler, ttl: int = 3600, cache_dir: Path | None = None, **request):
        request.setdefault("max_retries", 3)
        config = ClientConfig(
            api_key=API_KEY,
            cache_ttl=ttl,
            request=RequestConfig(**request),
        )
        client = UptimeRobotClient(
            config,
            http_transport=httpx.MockTransport(handler),
            sleep=sleeps,
            cache=ResponseCache(ttl, cache_dir=cache_dir or tmp_path / "cache"),
        )
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()
