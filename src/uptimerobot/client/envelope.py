"""Decoding of the ``{"stat": ..., ...}`` response envelope.

Every UptimeRobot v2 response is a JSON object whose ``stat`` field is
``"ok"`` on success.  On failure the object carries an ``error`` value of
loosely defined shape.  :func:`decode_envelope` turns raw bytes into an
:class:`Envelope` or raises the matching typed exception.

The envelope stays schema-free: callers pick out whichever keys they need
through the typed accessors, which raise
:class:`~uptimerobot.exceptions.EnvelopeFieldError` instead of returning a
value of the wrong type.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Iterator

from uptimerobot.exceptions import APIError, DecodeError, EnvelopeFieldError

STAT_OK = "ok"

_MISSING = object()


class Envelope(Mapping[str, Any]):
    """Read-only view of a decoded response object.

    Behaves like a ``dict`` for lookups and iteration.  The ``get_*``
    accessors check presence and type explicitly::

        envelope = decode_envelope(raw)
        monitors = envelope.get_list("monitors")
        total = envelope.get_object("pagination").get("total")
    """

    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Envelope({self._data!r})"

    @property
    def stat(self) -> Any:
        return self._data.get("stat")

    @property
    def ok(self) -> bool:
        return self.stat == STAT_OK

    def to_dict(self) -> dict[str, Any]:
        """Return the underlying decoded object."""
        return self._data

    # ------------------------------------------------------------------ #
    # Typed accessors
    # ------------------------------------------------------------------ #

    def require(self, key: str) -> Any:
        """Return ``self[key]``, raising :class:`EnvelopeFieldError` if absent."""
        value = self._data.get(key, _MISSING)
        if value is _MISSING:
            raise EnvelopeFieldError(f"Response has no '{key}' field")
        return value

    def get_str(self, key: str) -> str:
        return self._typed(key, str, "a string")

    def get_int(self, key: str) -> int:
        value = self.require(key)
        # JSON numbers decode to int or float; bool is an int subclass.
        if isinstance(value, bool):
            raise EnvelopeFieldError(f"Field '{key}' is not an integer: {value!r}")
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if not isinstance(value, int):
            raise EnvelopeFieldError(f"Field '{key}' is not an integer: {value!r}")
        return value

    def get_float(self, key: str) -> float:
        value = self.require(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise EnvelopeFieldError(f"Field '{key}' is not a number: {value!r}")
        return float(value)

    def get_bool(self, key: str) -> bool:
        return self._typed(key, bool, "a boolean")

    def get_list(self, key: str) -> list[Any]:
        return self._typed(key, list, "a list")

    def get_object(self, key: str) -> dict[str, Any]:
        return self._typed(key, dict, "an object")

    def _typed(self, key: str, kind: type, label: str) -> Any:
        value = self.require(key)
        if not isinstance(value, kind):
            raise EnvelopeFieldError(f"Field '{key}' is not {label}: {value!r}")
        return value


def _error_text(error: Any) -> str:
    """Serialize the envelope's ``error`` value; best effort, never raises."""
    try:
        return json.dumps(error)
    except (TypeError, ValueError):
        return ""


def decode_envelope(raw: bytes) -> Envelope:
    """Parse *raw* and verify the ``stat`` discriminator.

    Args:
        raw: Response body bytes, live or from the cache.

    Returns:
        The full envelope, unchanged, when ``stat`` is ``"ok"``.

    Raises:
        DecodeError: If *raw* is not valid JSON or not a JSON object.
        APIError: If ``stat`` is anything other than the string ``"ok"``.
    """
    text = raw.decode("utf-8", errors="replace")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(str(exc), text) from exc

    if not isinstance(data, dict):
        raise DecodeError(f"expected a JSON object, got {type(data).__name__}", text)

    envelope = Envelope(data)
    if not envelope.ok:
        raise APIError(_error_text(data.get("error")), payload=data.get("error"))

    return envelope
