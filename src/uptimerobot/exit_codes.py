"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~uptimerobot.exceptions.UptimeRobotError` subclass.
Shell wrappers can inspect the exit code to tell a rejected API key from an
unreachable API without parsing stderr.

Example::

    $ uptimerobot call getMonitors
    $ echo $?
    8   # EXIT_API_ERROR -- UptimeRobot answered with stat=fail
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_SERVER_ERROR = 5
"""The remote API answered with a non-200 HTTP status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DECODE_ERROR = 7
"""The response body was not the expected JSON envelope."""

EXIT_API_ERROR = 8
"""The API reported an error in the envelope (``stat`` other than ``ok``)."""
