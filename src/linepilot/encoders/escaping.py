"""Escaping for the three InfluxDB line protocol contexts.

Reserved characters get a single backslash prefix; everything else,
unicode included, passes through untouched.
"""
from __future__ import annotations

_MEASURE_TABLE = str.maketrans({",": "\\,", " ": "\\ "})
_KEY_TABLE = str.maketrans({",": "\\,", " ": "\\ ", "=": "\\="})
_STRING_TABLE = str.maketrans({'"': '\\"'})


def escape_measure(s: str) -> str:
    """Escape a measurement name (commas and spaces)."""
    return s.translate(_MEASURE_TABLE)


def escape_key(s: str) -> str:
    """Escape a tag key, tag value or field key (commas, spaces, equals signs)."""
    return s.translate(_KEY_TABLE)


def escape_string_value(s: str) -> str:
    """Escape the contents of a quoted string field value.

    The surrounding double quotes are the caller's job.
    """
    return s.translate(_STRING_TABLE)
