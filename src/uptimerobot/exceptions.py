"""Exception hierarchy for uptimerobot.

All exceptions inherit from :class:`UptimeRobotError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`uptimerobot.exit_codes`.
The CLI entry point in :func:`uptimerobot.app.main` catches
``UptimeRobotError`` and exits with the appropriate code.

Subclass hierarchy::

    UptimeRobotError (exit 1)
    +-- ConfigError          (exit 1)
    +-- CacheError           (exit 1)
    +-- ConnectionError_     (exit 6)
    +-- StatusError          (exit 5)
    |   +-- RateLimitError   (exit 5)
    +-- DecodeError          (exit 7)
    +-- EnvelopeFieldError   (exit 7)
    +-- APIError             (exit 8)
"""

from __future__ import annotations

from typing import Any

from uptimerobot.exit_codes import (
    EXIT_API_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_SERVER_ERROR,
)


class UptimeRobotError(Exception):
    """Base exception for all uptimerobot errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(UptimeRobotError):
    """Raised for configuration problems (missing API key, bad TTL, bad credential source)."""

    exit_code = EXIT_GENERIC_FAILURE


class CacheError(UptimeRobotError):
    """Raised when the cache directory or an entry path cannot be resolved.

    The cacheable call path recovers from this by going live, so it never
    reaches callers of :meth:`~uptimerobot.client.UptimeRobotClient.call_cachable`.
    """

    exit_code = EXIT_GENERIC_FAILURE


class ConnectionError_(UptimeRobotError):
    """Raised on network-level failures once all retries are exhausted.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class StatusError(UptimeRobotError):
    """Raised when the final response carries an HTTP status other than 200.

    Attributes:
        status_code: The HTTP status of the last response.
        body: The raw response body decoded as text.
    """

    exit_code = EXIT_SERVER_ERROR

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Got {status_code} response from UptimeRobot: {body}")
        self.status_code = status_code
        self.body = body


class RateLimitError(StatusError):
    """Raised when the API was still answering 429 after the last retry."""


class DecodeError(UptimeRobotError):
    """Raised when a response body is not a JSON object.

    Attributes:
        body: The raw response body, kept for diagnostics.
    """

    exit_code = EXIT_DECODE_ERROR

    def __init__(self, reason: str, body: str):
        super().__init__(
            f"Got decoding json from UptimeRobot: {reason}. Response body: {body}"
        )
        self.body = body


class EnvelopeFieldError(UptimeRobotError):
    """Raised when a typed envelope accessor finds a missing key or a wrong type."""

    exit_code = EXIT_DECODE_ERROR


class APIError(UptimeRobotError):
    """Raised when the envelope's ``stat`` is anything other than ``"ok"``.

    Attributes:
        payload: The envelope's ``error`` value, exactly as decoded.
    """

    exit_code = EXIT_API_ERROR

    def __init__(self, message: str, payload: Any = None):
        super().__init__(f"Got error from UptimeRobot: {message}")
        self.payload = payload
