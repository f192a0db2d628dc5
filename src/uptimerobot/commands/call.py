"""API commands -- issue a call or locate its cache entry.

Provides ``uptimerobot call`` and ``uptimerobot cache-path``.  Both accept
request parameters either as ``KEY=VALUE`` arguments, which are form-encoded
in order, or as a pre-encoded ``--raw`` string used verbatim.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode

import typer

from uptimerobot.exceptions import UptimeRobotError
from uptimerobot.output import error, format_response, print_data


def encode_params(pairs: Optional[list[str]], raw: Optional[str] = None) -> str:
    """Turn ``KEY=VALUE`` arguments (or a raw string) into a form-encoded string.

    Raises:
        typer.BadParameter: If an argument has no ``=`` or both forms are given.
    """
    if raw is not None:
        if pairs:
            raise typer.BadParameter("Use either KEY=VALUE arguments or --raw, not both.")
        return raw

    items: list[tuple[str, str]] = []
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got: {pair}")
        items.append((key, value))
    return urlencode(items)


def call_command(
    ctx: typer.Context,
    endpoint: str = typer.Argument(help="API method, e.g. 'getMonitors'."),
    params: Optional[list[str]] = typer.Argument(
        None, help="Request parameters as KEY=VALUE."
    ),
    raw: Optional[str] = typer.Option(
        None, "--raw", help="Pre-encoded form parameters, sent verbatim."
    ),
    cached: bool = typer.Option(
        False, "--cached", help="Serve from the disk cache while fresh."
    ),
) -> None:
    """Call an UptimeRobot API method and print the decoded response.

    Example::

        uptimerobot call getMonitors monitors=779783 logs=1
        uptimerobot call getAccountDetails --cached --json
    """
    from uptimerobot.app import make_client

    form = encode_params(params, raw)
    try:
        with make_client(ctx) as client:
            if cached:
                envelope = client.call_cachable(endpoint, form)
            else:
                envelope = client.call(endpoint, form)
    except UptimeRobotError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    format_response(envelope.to_dict())


def cache_path_command(
    ctx: typer.Context,
    endpoint: str = typer.Argument(help="API method, e.g. 'getMonitors'."),
    params: Optional[list[str]] = typer.Argument(
        None, help="Request parameters as KEY=VALUE."
    ),
    raw: Optional[str] = typer.Option(
        None, "--raw", help="Pre-encoded form parameters, sent verbatim."
    ),
) -> None:
    """Print the cache file path a cached call would use.

    Example::

        uptimerobot cache-path getMonitors monitors=779783
    """
    from uptimerobot.app import make_cache

    form = encode_params(params, raw)
    try:
        path = make_cache(ctx).fingerprint_path(endpoint, form)
    except UptimeRobotError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    print_data(str(path))
