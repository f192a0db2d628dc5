"""The UptimeRobot API client handle.

:class:`UptimeRobotClient` is created once per configuration and shared by
every caller.  It exposes two call modes:

- :meth:`~UptimeRobotClient.call` -- live request, then envelope decoding.
- :meth:`~UptimeRobotClient.call_cachable` -- serves a fresh disk entry when
  one exists, otherwise goes live and stores the body once it decoded
  successfully.

All network traffic from one handle is serialized through a single lock held
for the whole retry sequence, so a handle never has more than one request in
flight.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from uptimerobot.cache import ResponseCache
from uptimerobot.client.envelope import Envelope, decode_envelope
from uptimerobot.client.transport import Transport
from uptimerobot.config import resolve_client_config
from uptimerobot.exceptions import CacheError, ConfigError
from uptimerobot.models import DEFAULT_CACHE_TTL, ClientConfig
from uptimerobot.output import debug


class UptimeRobotClient:
    """Shared client for the UptimeRobot v2 API.

    Args:
        config: Immutable client configuration.
        http_transport: Optional :class:`httpx.BaseTransport` for the
            underlying HTTP client (tests pass :class:`httpx.MockTransport`).
        sleep: Blocking sleep used for backoff and rate-limit waits.
        cache: Optional pre-built cache; defaults to a
            :class:`~uptimerobot.cache.ResponseCache` with ``config.cache_ttl``
            in the user cache directory.

    Example::

        with UptimeRobotClient(ClientConfig(api_key="u123-abc")) as client:
            envelope = client.call_cachable("getMonitors", "monitors=779783")
            monitors = envelope.get_list("monitors")
    """

    def __init__(
        self,
        config: ClientConfig,
        http_transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
        cache: Optional[ResponseCache] = None,
    ) -> None:
        self._config = config
        self._lock = threading.Lock()
        self._transport = Transport(
            config.api_key,
            config.request,
            http_transport=http_transport,
            sleep=sleep,
        )
        self._cache = cache if cache is not None else ResponseCache(config.cache_ttl)

    @classmethod
    def from_api_key(
        cls, api_key: str, cache_ttl: int = DEFAULT_CACHE_TTL, **kwargs
    ) -> UptimeRobotClient:
        """Build a client from an API key and cache TTL with default request settings.

        Raises:
            ConfigError: If the key is empty or the TTL is not an integer.
        """
        try:
            config = ClientConfig(api_key=api_key, cache_ttl=cache_ttl)
        except ValidationError as exc:
            raise ConfigError(f"Invalid client configuration: {exc}") from exc
        return cls(config, **kwargs)

    @classmethod
    def from_env(cls, **kwargs) -> UptimeRobotClient:
        """Build a client from ``UPTIMEROBOT_API_KEY`` / ``UPTIMEROBOT_CACHE_TTL``.

        Raises:
            ConfigError: If no API key is set.
        """
        return cls(resolve_client_config(), **kwargs)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> UptimeRobotClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        with self._lock:
            self._transport.close()

    # ------------------------------------------------------------------ #
    # Call modes
    # ------------------------------------------------------------------ #

    def call(self, endpoint: str, params: str = "") -> Envelope:
        """Make a live call and decode the response envelope.

        Args:
            endpoint: API method name, e.g. ``"getMonitors"``.
            params: Form parameters, already url-encoded.

        Raises:
            ConnectionError_: On network failure after all retries.
            StatusError: On a final non-200 response.
            DecodeError: If the body is not a JSON object.
            APIError: If the envelope's ``stat`` is not ``"ok"``.
        """
        return decode_envelope(self._post(endpoint, params))

    def call_cachable(self, endpoint: str, params: str = "") -> Envelope:
        """Like :meth:`call`, but served from the disk cache while fresh.

        Cache failures never surface: without a usable cache path the call
        simply goes live.  Only bodies that decoded successfully are written.
        """
        try:
            path = self._cache.fingerprint_path(endpoint, params)
        except CacheError as exc:
            debug(f"Cache unavailable, calling {endpoint!r} live: {exc}")
            path = None

        if path is not None:
            body = self._cache.read_fresh(path)
            if body is not None:
                return decode_envelope(body)

        body = self._post(endpoint, params)
        envelope = decode_envelope(body)

        if path is not None:
            self._cache.write(path, body)
        return envelope

    def _post(self, endpoint: str, params: str) -> bytes:
        with self._lock:
            return self._transport.post(endpoint, params)
