"""Typer application and CLI entry point for uptimerobot.

The root callback installs the global
:class:`~uptimerobot.output.OutputManager` and stores the connection options
(API key, key source, cache TTL) in ``ctx.obj``.  Commands build their
:class:`~uptimerobot.client.UptimeRobotClient` through :func:`make_client`.

:func:`main` is the console-script entry point declared in
``pyproject.toml``.
"""

from __future__ import annotations

import signal
import sys
from typing import Any, Optional

import typer

from uptimerobot import __version__
from uptimerobot.cache import ResponseCache
from uptimerobot.client import UptimeRobotClient
from uptimerobot.commands.call import cache_path_command, call_command
from uptimerobot.config import (
    resolve_cache_ttl,
    resolve_client_config,
    resolve_credential,
)
from uptimerobot.exit_codes import EXIT_GENERIC_FAILURE, EXIT_SUCCESS


app = typer.Typer(
    name="uptimerobot",
    help="Call the UptimeRobot v2 API with rate-limit backoff and response caching.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("call")(call_command)
app.command("cache-path")(cache_path_command)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"uptimerobot {__version__}")
        raise typer.Exit(code=EXIT_SUCCESS)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="Main API key (default: $UPTIMEROBOT_API_KEY)."
    ),
    api_key_source: Optional[str] = typer.Option(
        None,
        "--api-key-source",
        help="Read the API key from env:VAR, file:/path or prompt.",
    ),
    cache_ttl: Optional[int] = typer.Option(
        None,
        "--cache-ttl",
        help="Cache TTL in seconds (default: $UPTIMEROBOT_CACHE_TTL or 3600).",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global output manager from CLI flags and stores the
    connection options in ``ctx.obj`` for :func:`make_client`.
    """
    from uptimerobot.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    )

    ctx.ensure_object(dict)
    ctx.obj["api_key"] = api_key
    ctx.obj["api_key_source"] = api_key_source
    ctx.obj["cache_ttl"] = cache_ttl


def make_client(ctx: typer.Context) -> UptimeRobotClient:
    """Build a client from the options stored by :func:`main_callback`.

    Raises:
        ConfigError: If no API key can be resolved.
    """
    obj: dict[str, Any] = ctx.obj or {}
    api_key = obj.get("api_key")
    source = obj.get("api_key_source")
    if source:
        api_key = resolve_credential(source)
    return UptimeRobotClient(resolve_client_config(api_key, obj.get("cache_ttl")))


def make_cache(ctx: typer.Context) -> ResponseCache:
    """Build the response cache alone; no API key is needed to locate entries."""
    obj: dict[str, Any] = ctx.obj or {}
    return ResponseCache(resolve_cache_ttl(obj.get("cache_ttl")))


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``uptimerobot`` console script.

    Unhandled :class:`~uptimerobot.exceptions.UptimeRobotError` instances
    cause a clean exit with the error's ``exit_code``.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from uptimerobot.exceptions import UptimeRobotError
        from uptimerobot.output import error

        if isinstance(exc, UptimeRobotError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
