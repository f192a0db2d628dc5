"""Retrying form-POST transport for the UptimeRobot v2 API.

:class:`Transport` builds the outgoing request, sends it through
:class:`httpx.Client`, and layers on:

- **Auth** -- the API key travels in the form body with ``format=json``.
- **Rate-limit backoff** -- after every response the ``retry-after`` header
  is honoured via :func:`~uptimerobot.client.ratelimit.wait_on_rate_limit`.
- **Retry with backoff** -- retries on network errors, 429 and 5xx
  (except 501) with exponential delay (1 s, 2 s, 4 s, ... capped at
  ``backoff_max``) whenever the server did not ask for a specific wait.
  A malformed URL or unsupported scheme is not retried.
- **Status mapping** -- anything but a final 200 raises
  :class:`~uptimerobot.exceptions.StatusError`.

The transport returns raw body bytes and never decodes them; envelope
handling lives in :mod:`uptimerobot.client.envelope`.  It is not
thread-safe on its own: :class:`~uptimerobot.client.UptimeRobotClient`
serializes every call through its lock.
"""

from __future__ import annotations

import time
from typing import Callable, Optional
from urllib.parse import quote

import httpx

from uptimerobot.client.ratelimit import wait_on_rate_limit
from uptimerobot.exceptions import ConnectionError_, RateLimitError, StatusError
from uptimerobot.models import RequestConfig
from uptimerobot.output import debug, info

REQUEST_HEADERS = {
    "cache-control": "no-cache",
    "content-type": "application/x-www-form-urlencoded",
}


def is_retryable_status(status_code: int) -> bool:
    """Return True for statuses worth another attempt (429 and 5xx except 501)."""
    if status_code == 429:
        return True
    return status_code >= 500 and status_code != 501


class Transport:
    """Send authenticated form POSTs and return raw response bytes.

    Args:
        api_key: The account's main API key.
        config: URL, timeout and retry-policy settings.
        http_transport: Optional :class:`httpx.BaseTransport` passed to the
            underlying client, e.g. :class:`httpx.MockTransport` in tests.
        sleep: Blocking sleep used for backoff and rate-limit waits.

    Example::

        transport = Transport("u123-abc", RequestConfig())
        raw = transport.post("getAccountDetails", "")
    """

    def __init__(
        self,
        api_key: str,
        config: RequestConfig,
        http_transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._api_key = api_key
        self._config = config
        self._http_transport = http_transport
        self._sleep = sleep
        self._client: Optional[httpx.Client] = None

    @property
    def config(self) -> RequestConfig:
        return self._config

    def close(self) -> None:
        """Close the underlying :class:`httpx.Client` if one was opened."""
        if self._client is not None:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Request construction
    # ------------------------------------------------------------------ #

    def build_url(self, endpoint: str) -> str:
        return f"{self._config.base_url}{endpoint}"

    def build_body(self, params: str) -> str:
        """Return ``api_key=<key>&format=json&<params>``.

        *params* is already form-encoded by the caller and appended verbatim;
        the key itself is percent-encoded.
        """
        body = f"api_key={quote(self._api_key, safe='')}&format=json"
        if params:
            body = f"{body}&{params}"
        return body

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def post(self, endpoint: str, params: str) -> bytes:
        """POST to *endpoint* and return the raw body of a 200 response.

        Raises:
            ConnectionError_: On network / timeout errors after all retries,
                or at once when the request URL itself is unusable.
            RateLimitError: When still rate limited (429) after all retries.
            StatusError: On any other final status than 200.
        """
        debug(f"Making request to: {endpoint!r}")

        response = self._execute_with_retry(
            self.build_url(endpoint),
            self.build_body(params).encode("utf-8"),
        )

        debug(f"Got response: {response!r}")
        if response.status_code != 200:
            if response.status_code == 429:
                raise RateLimitError(response.status_code, response.text)
            raise StatusError(response.status_code, response.text)

        debug(f"Got body: {response.text!r}")
        return response.content

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
                transport=self._http_transport,
            )
        return self._client

    def _backoff(self, attempt: int) -> float:
        return min(self._config.backoff_max, self._config.backoff_min * 2 ** attempt)

    def _execute_with_retry(self, url: str, content: bytes) -> httpx.Response:
        """Execute the POST, retrying network errors and retryable statuses.

        A ``retry-after`` wait replaces the exponential delay for that attempt.
        A malformed URL or unsupported scheme fails on the first attempt.
        """
        client = self._get_client()
        max_retries = self._config.max_retries

        for attempt in range(max_retries + 1):
            try:
                response = client.post(url, content=content, headers=REQUEST_HEADERS)
            except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
                raise ConnectionError_(f"Invalid request URL {url!r}: {exc}") from exc
            except httpx.TransportError as exc:
                if attempt < max_retries:
                    delay = self._backoff(attempt)
                    info(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    self._sleep(delay)
                    continue
                raise ConnectionError_(
                    f"Connection failed after {max_retries + 1} attempts: {exc}"
                ) from exc

            waited = wait_on_rate_limit(response, self._sleep)

            if is_retryable_status(response.status_code) and attempt < max_retries:
                delay = 0 if waited else self._backoff(attempt)
                info(
                    f"Got {response.status_code}, retrying in {delay or waited}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                if delay:
                    self._sleep(delay)
                continue

            return response

        raise AssertionError("retry loop exited without a response")  # pragma: no cover
