"""uptimerobot -- Client for the UptimeRobot v2 monitoring API.

This package wraps the UptimeRobot API's authenticated form-POST calls with
rate-limit backoff, ``stat`` envelope checking, and an optional on-disk
response cache shared with the Terraform UptimeRobot provider.

Typical usage::

    from uptimerobot import ClientConfig, UptimeRobotClient

    client = UptimeRobotClient(ClientConfig(api_key="u123-abc", cache_ttl=600))
    envelope = client.call_cachable("getMonitors", "monitors=779783")

Modules:
    client: Transport, envelope decoding and the shared client handle.
    cache: TTL file cache keyed by request fingerprint.
    models: Pydantic configuration models.
    config: Cache directory and environment configuration.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    app: Typer command-line entry point.
"""

__version__ = "0.1.0"

from uptimerobot.client import Envelope, UptimeRobotClient  # noqa: E402
from uptimerobot.models import ClientConfig, RequestConfig  # noqa: E402

__all__ = [
    "ClientConfig",
    "Envelope",
    "RequestConfig",
    "UptimeRobotClient",
    "__version__",
]
