"""Error taxonomy for decoding and encoding records.

Configuration errors are raised while a plugin is being built; everything
else is a per-record error that aborts the current decode or encode.
"""
from __future__ import annotations


class TranscodeError(Exception):
    """Base class for every error raised by linepilot."""


class ConfigurationError(TranscodeError):
    """A plugin option is missing or invalid; the plugin cannot be used."""


class InvalidPrecision(ConfigurationError):
    def __init__(self, precision: str, allowed: list[str]) -> None:
        self.precision = precision
        super().__init__(
            f"timestamp_precision has to be one of [{', '.join(allowed)}], got {precision!r}"
        )


class RecordError(TranscodeError):
    """A single record could not be decoded or encoded.

    ``key`` names the offending JSON key or field when there is one.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)


class MalformedPayload(RecordError):
    pass


class MalformedLoggerName(RecordError):
    def __init__(self, logger_name: str, expected: str) -> None:
        self.logger_name = logger_name
        super().__init__(f"Logger has to be named {expected}, got {logger_name!r}")


class InvalidTimestamp(RecordError):
    pass


class MissingTimeKey(RecordError):
    def __init__(self, key: str) -> None:
        super().__init__(f"time key {key!r} was not found", key=key)


class UnsupportedValueType(RecordError):
    def __init__(self, key: str, value: object) -> None:
        super().__init__(
            f"Unsupported JSON value type for {key!r}: {type(value).__name__}", key=key
        )


class UnsupportedFieldType(RecordError):
    def __init__(self, name: str, kind: str) -> None:
        super().__init__(f"Unsupported field type: {name}: {kind}", key=name)


class MultipleValuesForField(RecordError):
    def __init__(self, name: str) -> None:
        super().__init__(f"More than one value for field: {name}", key=name)


class IncompleteRecord(RecordError):
    pass
