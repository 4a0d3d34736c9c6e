"""Decoder Protocol and the JSON → Field mapping shared by the decoders."""
from __future__ import annotations

import json
import math
from typing import Any, Protocol, runtime_checkable

from ..errors import MalformedPayload, UnsupportedValueType
from ..record import Field, Record, fits_int64


@runtime_checkable
class RecordDecoder(Protocol):
    """Protocol for record decoders — duck-typed, no inheritance required."""

    @property
    def name(self) -> str:
        """Plugin name (e.g. 'JSONDecoder')."""
        ...

    def decode(self, logger_name: str, payload: str | bytes) -> Record:
        """Decode one payload into a Record. Raises a RecordError subclass on failure."""
        ...


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def load_object(payload: str | bytes) -> dict[str, Any]:
    """Parse a payload holding exactly one JSON object."""
    try:
        if isinstance(payload, (bytes, bytearray)):
            payload = payload.decode("utf-8")
        value = json.loads(payload, parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedPayload(f"Failed to decode JSON payload: {exc}") from exc
    if not isinstance(value, dict):
        raise MalformedPayload(f"JSON payload is not an object: {type(value).__name__}")
    return value


def require_key(key: str) -> None:
    """Field names must be non-empty; an empty JSON key cannot become a field."""
    if not key:
        raise MalformedPayload("JSON object has an empty key", key=key)


def number_field(key: str, value: int | float) -> Field:
    """INTEGER when the value fits int64, else a finite DOUBLE."""
    if isinstance(value, int) and fits_int64(value):
        return Field.integer(key, value)
    try:
        as_float = float(value)
    except OverflowError:
        raise UnsupportedValueType(key, value) from None
    if not math.isfinite(as_float):
        raise UnsupportedValueType(key, value)
    return Field.double(key, as_float)


def field_from_json(key: str, value: Any) -> Field:
    """Map a decoded JSON scalar to a Field.

    Objects, arrays and null have no field representation.
    """
    if isinstance(value, bool):
        return Field.boolean(key, value)
    if isinstance(value, (int, float)):
        return number_field(key, value)
    if isinstance(value, str):
        return Field.string(key, value)
    raise UnsupportedValueType(key, value)
