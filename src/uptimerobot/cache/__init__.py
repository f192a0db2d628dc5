"""Disk-based response caching for uptimerobot.

This package provides :class:`ResponseCache`, which stores raw response
bodies as one file per request fingerprint and serves them back while the
file's mtime is within the configured TTL.

The cache is consumed by
:meth:`~uptimerobot.client.UptimeRobotClient.call_cachable` and controlled
by :attr:`~uptimerobot.models.ClientConfig.cache_ttl`.
"""

from uptimerobot.cache.store import ResponseCache, fingerprint

__all__ = ["ResponseCache", "fingerprint"]
