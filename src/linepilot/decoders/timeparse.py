"""Time zone loading and timestamp parsing for the JSON decoders."""
from __future__ import annotations

import re
from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import ConfigurationError, InvalidTimestamp

LOCAL = "Local"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# RFC 3339 without an offset, optional fraction: 2006-01-02T15:04:05.999999999
_RFC3339_LOCAL_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d{1,9}))?\Z",
    re.ASCII,
)


def load_location(name: str) -> tzinfo | None:
    """Return the tzinfo for ``name``; ``None`` stands for the process local zone."""
    if not name or name == LOCAL:
        return None
    if name == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"unknown time_location {name!r}: {exc}") from exc


def localize(naive: datetime, location: tzinfo | None) -> datetime:
    if location is None:
        return naive.astimezone()
    return naive.replace(tzinfo=location)


def to_unix_nanos(dt: datetime) -> int:
    """Exact nanoseconds since the epoch for an aware datetime."""
    delta = dt - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 10**9 + delta.microseconds * 1_000


def parse_layout(value: str, layout: str, location: tzinfo | None) -> int:
    """Parse ``value`` with a strptime ``layout`` and return epoch nanoseconds.

    A layout with ``%z`` carries its own offset; otherwise the value is read
    in ``location``. The zero time 0001-01-01T00:00:00 counts as unset.
    """
    try:
        parsed = datetime.strptime(value, layout)
    except ValueError as exc:
        raise InvalidTimestamp(f"Failed to parse timestamp {value!r}: {exc}") from exc
    if parsed.replace(tzinfo=None) == datetime.min:
        raise InvalidTimestamp(f"Timestamp is zero: {value!r}")
    try:
        if parsed.tzinfo is None:
            parsed = localize(parsed, location)
        return to_unix_nanos(parsed)
    except (OverflowError, ValueError) as exc:
        raise InvalidTimestamp(f"Timestamp out of range: {value!r}") from exc


def parse_rfc3339_local(value: str, location: tzinfo | None) -> int | None:
    """Parse ``YYYY-MM-DDTHH:MM:SS[.fraction]`` in ``location``.

    Returns epoch nanoseconds, or None when the string does not match.
    Up to nine fractional digits are kept.
    """
    m = _RFC3339_LOCAL_RE.match(value)
    if not m:
        return None
    try:
        parsed = datetime.strptime(m.group("date"), "%Y-%m-%dT%H:%M:%S")
        nanos = to_unix_nanos(localize(parsed, location))
    except (ValueError, OverflowError):
        return None
    frac = m.group("frac")
    if frac:
        nanos += int(frac.ljust(9, "0"))
    return nanos
