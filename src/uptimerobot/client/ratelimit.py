"""Rate-limit waiter honouring the ``retry-after`` response header.

UptimeRobot signals throttling with HTTP 429 and a ``retry-after`` header
holding a whole number of seconds.  :func:`wait_on_rate_limit` is called by
the transport after every response, before it decides whether to retry.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

import httpx

from uptimerobot.output import info, warning

RETRY_AFTER_HEADER = "retry-after"


def parse_retry_after(value: Optional[str]) -> int:
    """Return the ``retry-after`` value in seconds, or ``0`` when unusable.

    A missing header means no wait.  Anything but plain ASCII digits (signs,
    fractions, underscores and HTTP-date forms included) is reported as a
    warning and also resolves to ``0`` seconds.
    """
    if value is None or value == "":
        return 0
    digits = value.strip()
    if not (digits.isascii() and digits.isdigit()):
        warning(f"Error parsing Retry-After header {value!r}, not waiting")
        return 0
    return int(digits)


def wait_on_rate_limit(
    response: Optional[httpx.Response],
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Block the caller for the duration the server asked for.

    Args:
        response: The response just received, or ``None`` when the attempt
            failed before a response arrived (no-op).
        sleep: Blocking sleep function; injectable so tests run instantly.

    Returns:
        The number of seconds slept.
    """
    if response is None:
        return 0

    seconds = parse_retry_after(response.headers.get(RETRY_AFTER_HEADER))
    if seconds:
        info(f"Got rate limit, sleep {seconds} seconds")
        sleep(seconds)
    return seconds
