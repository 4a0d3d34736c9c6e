"""InfluxDB line protocol encoder.

Output, one line per record::

    <measurement>,Logger=<logger> <key>=<value>[,<key>=<value>...] <timestamp>\\n

The record type is the measurement and the logger name is the only tag.
"""
from __future__ import annotations

import enum
import logging
import math
from decimal import Decimal
from typing import Iterable

from ..config import EncoderConfig
from ..errors import (
    IncompleteRecord,
    InvalidPrecision,
    MultipleValuesForField,
    UnsupportedFieldType,
)
from ..record import Field, Record, ValueType
from .escaping import escape_key, escape_measure, escape_string_value

logger = logging.getLogger(__name__)


class Precision(enum.Enum):
    """Timestamp precision and the divisor applied to nanoseconds."""

    NS = ("ns", 1)
    US = ("us", 10**3)
    MS = ("ms", 10**6)
    S = ("s", 10**9)
    M = ("m", 60 * 10**9)
    H = ("h", 3600 * 10**9)

    def __init__(self, label: str, divisor: int) -> None:
        self.label = label
        self.divisor = divisor

    @classmethod
    def parse(cls, label: str) -> Precision:
        for p in cls:
            if p.label == label:
                return p
        raise InvalidPrecision(label, [p.label for p in cls])


def format_double(value: float) -> str:
    """Shortest round-trip digits in plain decimal notation.

    ``1.0`` -> ``1``, ``1e21`` -> ``1000000000000000000000``,
    ``1.5e-7`` -> ``0.00000015``.
    """
    return format(Decimal(repr(value)).normalize(), "f")


def scale_timestamp(nanos: int, divisor: int) -> int:
    """Integer division truncating toward zero, also for pre-epoch values."""
    q = abs(nanos) // divisor
    return -q if nanos < 0 else q


class InfluxdbEncoder:
    """Encode records as InfluxDB line protocol.

    The precision divisor is resolved once in the constructor; an encoder
    holds no other state, so one instance can serve any number of threads.
    """

    def __init__(self, timestamp_precision: str = "ns") -> None:
        self._precision = Precision.parse(timestamp_precision)
        logger.debug("InfluxdbEncoder configured: precision=%s", self._precision.label)

    @classmethod
    def from_config(cls, config: EncoderConfig) -> InfluxdbEncoder:
        return cls(timestamp_precision=config.timestamp_precision)

    @property
    def name(self) -> str:
        return "InfluxdbEncoder"

    @property
    def precision(self) -> Precision:
        return self._precision

    def encode(self, record: Record) -> bytes:
        if not record.type:
            raise IncompleteRecord("record type is not set")
        if not record.timestamp:
            raise IncompleteRecord("record timestamp is not set")
        if not record.fields:
            raise IncompleteRecord("record has no fields")

        parts: list[str] = []
        seen: set[str] = set()
        for f in record:
            if f.name in seen:
                raise MultipleValuesForField(f.name)
            seen.add(f.name)
            parts.append(f"{escape_key(f.name)}={self._format_value(f)}")

        line = (
            f"{escape_measure(record.type)},Logger={escape_key(record.logger)} "
            f"{','.join(parts)} "
            f"{scale_timestamp(record.timestamp, self._precision.divisor)}\n"
        )
        return line.encode("utf-8")

    def encode_many(self, records: Iterable[Record]) -> bytes:
        return b"".join([self.encode(r) for r in records])

    def _format_value(self, f: Field) -> str:
        if len(f.values) > 1:
            raise MultipleValuesForField(f.name)
        value = f.values[0]

        if f.value_type is ValueType.INTEGER:
            return f"{value}i"
        if f.value_type is ValueType.DOUBLE:
            if not math.isfinite(value):
                raise UnsupportedFieldType(f.name, f"non-finite DOUBLE {value!r}")
            return format_double(value)
        if f.value_type is ValueType.BOOL:
            return "true" if value else "false"
        if f.value_type is ValueType.STRING:
            return f'"{escape_string_value(value)}"'
        raise UnsupportedFieldType(f.name, f.value_type.name)
