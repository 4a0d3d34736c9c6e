"""Schema-less JSON decoder, written for ulogd's JSON output plugin.

String values are sniffed: an integer, then a float, then (for the
``timestamp`` and ``@Timestamp`` keys only) a local RFC 3339 time, and
finally a plain string.
"""
from __future__ import annotations

import logging
import math
import re
import time

from ..config import UlogdDecoderConfig
from ..errors import ConfigurationError, MissingTimeKey
from ..record import Field, Record, fits_int64
from .base import field_from_json, load_object, number_field, require_key
from .naming import TypeResolver
from .timeparse import LOCAL, load_location, parse_rfc3339_local

logger = logging.getLogger(__name__)

TIME_KEYS = ("timestamp", "@Timestamp")
TIME_FIELD = "@Timestamp"
TIMESTAMP_POLICIES = ("field", "primary")

_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def sniff_number(s: str) -> int | float | None:
    """Parse an int64 or a finite float out of ``s``, else return None."""
    if _INT_RE.fullmatch(s):
        n = int(s)
        if fits_int64(n):
            return n
    if _FLOAT_RE.fullmatch(s):
        f = float(s)
        if math.isfinite(f):
            return f
    return None


class UlogdDecoder:
    """Decode a JSON object into a Record by inferring field types.

    ``timestamp_policy`` decides what happens to a parsed time:

    * ``"field"``: it is stored as an integer ``@Timestamp`` field (nanoseconds)
      and the record timestamp is the receive time.
    * ``"primary"``: it becomes the record timestamp and no field is added;
      a payload without a parsable reserved time key is rejected.
    """

    def __init__(
        self,
        time_location: str = LOCAL,
        use_first_segment: bool = False,
        timestamp_policy: str = "field",
    ) -> None:
        if timestamp_policy not in TIMESTAMP_POLICIES:
            raise ConfigurationError(
                f"timestamp_policy has to be one of {list(TIMESTAMP_POLICIES)}, got {timestamp_policy!r}"
            )
        self.timestamp_policy = timestamp_policy
        self._location = load_location(time_location)
        self._resolver = TypeResolver(use_first_segment=use_first_segment)
        logger.debug(
            "UlogdDecoder configured: location=%s first_segment=%s policy=%s",
            time_location, use_first_segment, timestamp_policy,
        )

    @classmethod
    def from_config(cls, config: UlogdDecoderConfig) -> UlogdDecoder:
        return cls(
            time_location=config.time_location,
            use_first_segment=config.use_first_segment,
            timestamp_policy=config.timestamp_policy,
        )

    @property
    def name(self) -> str:
        return "UlogdDecoder"

    def decode(
        self, logger_name: str, payload: str | bytes, received_at: int | None = None
    ) -> Record:
        obj = load_object(payload)
        record_type = self._resolver.resolve(logger_name)

        timestamp: int | None = None
        fields: list[Field] = []
        for key, value in obj.items():
            require_key(key)
            if isinstance(value, str):
                parsed_time = self._sniff_time(key, value)
                if parsed_time is not None and self.timestamp_policy == "primary":
                    timestamp = parsed_time
                elif parsed_time is not None:
                    fields.append(Field.integer(TIME_FIELD, parsed_time))
                else:
                    fields.append(self._string_field(key, value))
            else:
                fields.append(field_from_json(key, value))

        if timestamp is None:
            if self.timestamp_policy == "primary":
                raise MissingTimeKey(TIME_KEYS[0])
            timestamp = received_at if received_at is not None else time.time_ns()
        return Record(type=record_type, logger=logger_name, timestamp=timestamp, fields=tuple(fields))

    def _sniff_time(self, key: str, value: str) -> int | None:
        if key not in TIME_KEYS or sniff_number(value) is not None:
            return None
        return parse_rfc3339_local(value, self._location)

    @staticmethod
    def _string_field(key: str, value: str) -> Field:
        number = sniff_number(value)
        if number is None:
            return Field.string(key, value)
        return number_field(key, number)
