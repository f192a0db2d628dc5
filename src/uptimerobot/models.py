"""Pydantic configuration models for the UptimeRobot client.

:class:`RequestConfig` holds the transport and retry-policy settings, and
:class:`ClientConfig` bundles it with the API key and cache TTL.  Both are
frozen: a client is configured once and the configuration is shared, never
mutated, for the lifetime of the process.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL = "https://api.uptimerobot.com/v2/"
DEFAULT_CACHE_TTL = 3600


class RequestConfig(BaseModel):
    """HTTP request and retry settings for :class:`~uptimerobot.client.transport.Transport`."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Prefix joined with the endpoint name to form the request URL",
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    max_retries: int = Field(default=10, ge=0, description="Max retry attempts")
    backoff_min: float = Field(
        default=1.0, ge=0, description="First retry delay in seconds"
    )
    backoff_max: float = Field(
        default=30.0, ge=0, description="Upper bound for a single retry delay"
    )


class ClientConfig(BaseModel):
    """Immutable configuration for :class:`~uptimerobot.client.UptimeRobotClient`.

    A ``cache_ttl`` of zero or less disables the response cache.

    Example::

        ClientConfig(api_key="u123-abc", cache_ttl=600)
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1, repr=False, description="Main API key")
    cache_ttl: int = Field(
        default=DEFAULT_CACHE_TTL, description="Cache TTL in seconds"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
