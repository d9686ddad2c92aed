"""Timestamp and duration helpers.

The orchestrator speaks RFC3339 timestamps and Go-style durations (``672h``,
``1m30s``, ``250ms``). These helpers convert between those strings and
``datetime``/``timedelta`` values.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta

_RFC3339_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt]"
    r"(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h|d|w)")

_UNIT_NANOSECONDS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
    "d": 24 * 3600 * 1_000_000_000,
    "w": 7 * 24 * 3600 * 1_000_000_000,
}


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC3339 timestamp with optional (nanosecond) fractional seconds.

    Fractions finer than a microsecond are truncated. A timezone designator is
    required.
    """

    match = _RFC3339_RE.fullmatch(value)
    if not match:
        raise ValueError(f"{value!r} is not an RFC3339 timestamp")

    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    offset = match.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"
    return datetime.fromisoformat(
        f"{match.group('date')}T{match.group('time')}.{fraction}{offset}"
    )


def format_rfc3339(value: datetime) -> str:
    """Render an aware datetime as RFC3339, using ``Z`` for UTC."""

    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def parse_duration(value: str) -> timedelta:
    """Parse a Go-style duration string such as ``672h`` or ``1h15m30.5s``.

    Besides the Go units (``ns``, ``us``, ``ms``, ``s``, ``m``, ``h``) the
    ``d`` and ``w`` suffixes are accepted. A bare ``0`` is zero.
    """

    text = value.strip()
    if not text:
        raise ValueError("empty duration")

    sign = 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return timedelta(0)

    total = 0
    position = 0
    while position < len(text):
        match = _DURATION_PART_RE.match(text, position)
        if not match:
            raise ValueError(f"invalid duration {value!r}")
        number, unit = match.groups()
        whole, _, fraction = number.partition(".")
        scale = _UNIT_NANOSECONDS[unit]
        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        position = match.end()

    try:
        return timedelta(microseconds=sign * (total // 1_000))
    except OverflowError as exc:
        raise ValueError(f"invalid duration {value!r}: out of range") from exc


def duration_nanoseconds(value: timedelta) -> int:
    """Return the duration as an integer count of nanoseconds."""

    return (value // timedelta(microseconds=1)) * 1_000


def _format_fraction(value: int, precision: int) -> str:
    whole, fraction = divmod(value, 10 ** precision)
    text = str(whole)
    digits = str(fraction).rjust(precision, "0").rstrip("0")
    if digits:
        text += "." + digits
    return text


def format_duration(value: timedelta) -> str:
    """Render a duration the way Go prints one (``1s``, ``672h0m0s``, ``1.5ms``)."""

    nanos = duration_nanoseconds(value)
    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)

    if nanos == 0:
        return "0s"
    if nanos < 1_000:
        return f"{sign}{nanos}ns"
    if nanos < 1_000_000:
        return f"{sign}{_format_fraction(nanos, 3)}µs"
    if nanos < 1_000_000_000:
        return f"{sign}{_format_fraction(nanos, 6)}ms"

    hours, remainder = divmod(nanos, 3600 * 1_000_000_000)
    minutes, remainder = divmod(remainder, 60 * 1_000_000_000)
    seconds = _format_fraction(remainder, 9) + "s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return f"{sign}{seconds}"
