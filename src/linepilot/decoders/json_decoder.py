"""JSON decoder driven by an explicit time key, layout and zone."""
from __future__ import annotations

import logging
from typing import Iterable

from ..config import JsonDecoderConfig
from ..errors import ConfigurationError, InvalidTimestamp, MissingTimeKey
from ..record import Field, Record
from .base import field_from_json, load_object, require_key
from .naming import TypeResolver
from .timeparse import LOCAL, load_location, parse_layout

logger = logging.getLogger(__name__)


class JsonDecoder:
    """Decode a JSON object into a Record using configured time handling.

    The value under ``time_key`` is parsed with ``time_layout`` (strptime
    directives) in ``time_location`` and becomes the record timestamp. Every
    other key, except those in ``keys_ignore``, becomes a field.

    Fields come out in document order, or sorted by key with ``sort_keys``.
    """

    def __init__(
        self,
        time_key: str = "",
        time_layout: str = "",
        time_location: str = LOCAL,
        keys_ignore: Iterable[str] = (),
        sort_keys: bool = False,
    ) -> None:
        if not time_key:
            raise ConfigurationError("time_key has to be defined")
        if not time_layout:
            raise ConfigurationError("time_layout has to be defined")
        self.time_key = time_key
        self.time_layout = time_layout
        self.keys_ignore = frozenset(keys_ignore)
        self.sort_keys = sort_keys
        self._location = load_location(time_location)
        self._resolver = TypeResolver()
        logger.debug(
            "JSONDecoder configured: time_key=%s layout=%s location=%s ignore=%s",
            time_key, time_layout, time_location, sorted(self.keys_ignore),
        )

    @classmethod
    def from_config(cls, config: JsonDecoderConfig) -> JsonDecoder:
        return cls(
            time_key=config.time_key,
            time_layout=config.time_layout,
            time_location=config.time_location,
            keys_ignore=config.keys_ignore,
            sort_keys=config.sort_keys,
        )

    @property
    def name(self) -> str:
        return "JSONDecoder"

    def decode(self, logger_name: str, payload: str | bytes) -> Record:
        obj = load_object(payload)
        record_type = self._resolver.resolve(logger_name)

        keys = sorted(obj) if self.sort_keys else list(obj)
        timestamp: int | None = None
        fields: list[Field] = []
        for key in keys:
            if key in self.keys_ignore:
                continue
            require_key(key)
            value = obj[key]
            if key == self.time_key:
                timestamp = self._parse_time(key, value)
            else:
                fields.append(field_from_json(key, value))

        if timestamp is None:
            raise MissingTimeKey(self.time_key)
        return Record(type=record_type, logger=logger_name, timestamp=timestamp, fields=tuple(fields))

    def _parse_time(self, key: str, value: object) -> int:
        if not isinstance(value, str):
            raise InvalidTimestamp(
                f"Timestamp is not a string ({type(value).__name__}) {key!r}: {value!r}", key=key
            )
        try:
            return parse_layout(value, self.time_layout, self._location)
        except InvalidTimestamp as exc:
            exc.key = key
            raise
