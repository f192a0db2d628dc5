"""HTTP client for the UptimeRobot v2 API.

Layers, leaf first:

:mod:`~uptimerobot.client.ratelimit`
    ``retry-after`` handling between attempts.
:mod:`~uptimerobot.client.transport`
    :class:`Transport` -- retrying authenticated form POST returning raw bytes.
:mod:`~uptimerobot.client.envelope`
    :class:`Envelope` and :func:`decode_envelope` -- ``stat`` checking.
:mod:`~uptimerobot.client.client`
    :class:`UptimeRobotClient` -- the shared handle combining the above with
    :class:`~uptimerobot.cache.ResponseCache`.

Example::

    from uptimerobot.client import UptimeRobotClient

    client = UptimeRobotClient.from_env()
    account = client.call("getAccountDetails").get_object("account")
"""

from uptimerobot.client.client import UptimeRobotClient
from uptimerobot.client.envelope import Envelope, decode_envelope
from uptimerobot.client.ratelimit import wait_on_rate_limit
from uptimerobot.client.transport import Transport

__all__ = [
    "Envelope",
    "Transport",
    "UptimeRobotClient",
    "decode_envelope",
    "wait_on_rate_limit",
]
