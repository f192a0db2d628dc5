"""Configuration resolution: cache directory, environment, and credential sources.

* **Cache directory** -- :func:`get_cache_dir` resolves the platform's user
  cache location (XDG on Linux/BSD, ``~/Library/Caches`` on macOS,
  ``%LOCALAPPDATA%`` on Windows) and namespaces it under
  ``terraform-uptimerobot`` so entries are shared with the Terraform
  provider that uses the same layout.
* **Client configuration** -- :func:`resolve_client_config` merges explicit
  arguments with ``UPTIMEROBOT_*`` environment variables and defaults.
* **Credential resolution** -- :func:`resolve_credential` reads the API key
  from an env var, a file, or an interactive prompt.
"""

from __future__ import annotations

import getpass
import os
import platform
import sys
from pathlib import Path
from typing import Optional

from uptimerobot.exceptions import ConfigError
from uptimerobot.models import DEFAULT_CACHE_TTL, ClientConfig, RequestConfig

CACHE_DIR_NAME = "terraform-uptimerobot"
CACHE_DIR_MODE = 0o750

ENV_API_KEY = "UPTIMEROBOT_API_KEY"
ENV_CACHE_TTL = "UPTIMEROBOT_CACHE_TTL"


# --- Cache directory ---


def user_cache_dir() -> Path:
    """Return the platform's per-user cache root (without the app namespace).

    Raises:
        ConfigError: On Windows when ``%LOCALAPPDATA%`` is not set.
    """
    system = platform.system()
    if system == "Windows":
        local = os.environ.get("LOCALAPPDATA", "")
        if not local:
            raise ConfigError("%LOCALAPPDATA% is not defined")
        return Path(local)
    if system == "Darwin":
        return Path.home() / "Library" / "Caches"
    env_value = os.environ.get("XDG_CACHE_HOME", "")
    if env_value:
        return Path(env_value)
    return Path.home() / ".cache"


def make_dirs(path: Path, mode: int = CACHE_DIR_MODE) -> None:
    """Create *path* and every missing ancestor with *mode* (subject to umask).

    Unlike ``Path.mkdir(parents=True)``, intermediate directories get *mode*
    too rather than the process default.
    """
    for parent in reversed(path.parents):
        if not parent.exists():
            parent.mkdir(mode=mode, exist_ok=True)
    path.mkdir(mode=mode, exist_ok=True)


def get_cache_dir() -> Path:
    """Return the response cache directory, creating it if necessary.

    The directory and any missing parents are created with mode ``0750``.

    Returns:
        Absolute path to ``<user cache dir>/terraform-uptimerobot``.
    """
    path = user_cache_dir() / CACHE_DIR_NAME
    make_dirs(path)
    return path


# --- Client configuration ---


def resolve_client_config(
    api_key: Optional[str] = None,
    cache_ttl: Optional[int] = None,
    request: Optional[RequestConfig] = None,
) -> ClientConfig:
    """Resolve the client configuration with full precedence chain.

    Precedence (high to low):
        1. Explicit arguments
        2. Environment variables (``UPTIMEROBOT_API_KEY``, ``UPTIMEROBOT_CACHE_TTL``)
        3. Defaults (``cache_ttl=3600``)

    Raises:
        ConfigError: If no API key is available or the TTL is not an integer.
    """
    key = api_key or os.environ.get(ENV_API_KEY, "")
    if not key:
        raise ConfigError(
            f"No API key configured. Pass one explicitly or set {ENV_API_KEY}."
        )

    return ClientConfig(
        api_key=key,
        cache_ttl=resolve_cache_ttl(cache_ttl),
        request=request or RequestConfig(),
    )


def resolve_cache_ttl(cache_ttl: Optional[int] = None) -> int:
    """Return *cache_ttl*, else ``UPTIMEROBOT_CACHE_TTL``, else the default.

    Raises:
        ConfigError: If the environment value is not an integer.
    """
    if cache_ttl is not None:
        return cache_ttl
    raw_ttl = os.environ.get(ENV_CACHE_TTL, "")
    if not raw_ttl:
        return DEFAULT_CACHE_TTL
    try:
        return int(raw_ttl)
    except ValueError:
        raise ConfigError(
            f"{ENV_CACHE_TTL} must be an integer number of seconds, got: {raw_ttl!r}"
        ) from None


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve an API key from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)

    Args:
        source: The source descriptor string.

    Returns:
        The resolved credential string.

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("UptimeRobot API key: ")

    raise ConfigError(f"Unknown credential source format: {source}")
