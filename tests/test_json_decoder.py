"""Tests for the configured JSON decoder."""
from __future__ import annotations

import json

import pytest

from linepilot.config import JsonDecoderConfig
from linepilot.decoders.base import RecordDecoder
from linepilot.decoders.json_decoder import JsonDecoder
from linepilot.errors import (
    ConfigurationError,
    InvalidTimestamp,
    MalformedLoggerName,
    MalformedPayload,
    MissingTimeKey,
    UnsupportedValueType,
)
from linepilot.record import Field, ValueType

from conftest import PING_NANOS

LAYOUT = "%Y-%m-%dT%H:%M:%S"


@pytest.fixture()
def decoder() -> JsonDecoder:
    return JsonDecoder(time_key="time", time_layout=LAYOUT, time_location="UTC")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class TestConfiguration:
    @pytest.mark.parametrize("kwargs", [
        {"time_key": "", "time_layout": LAYOUT},
        {"time_key": "time", "time_layout": ""},
    ])
    def test_required_options(self, kwargs) -> None:
        with pytest.raises(ConfigurationError, match="has to be defined"):
            JsonDecoder(**kwargs)

    def test_bad_zone(self) -> None:
        with pytest.raises(ConfigurationError):
            JsonDecoder(time_key="time", time_layout=LAYOUT, time_location="No/Where")

    def test_from_config(self) -> None:
        dec = JsonDecoder.from_config(JsonDecoderConfig(
            time_key="ts", time_layout=LAYOUT, time_location="UTC", keys_ignore=["pid"],
        ))
        assert dec.time_key == "ts"
        assert dec.keys_ignore == frozenset({"pid"})

    def test_from_default_config_fails(self) -> None:
        with pytest.raises(ConfigurationError):
            JsonDecoder.from_config(JsonDecoderConfig())

    def test_no_arguments_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError, match="time_key"):
            JsonDecoder()

    def test_implements_protocol(self, decoder: JsonDecoder) -> None:
        assert isinstance(decoder, RecordDecoder)
        assert decoder.name == "JSONDecoder"


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

class TestDecode:
    def test_ping_scenario(self, decoder: JsonDecoder) -> None:
        rec = decoder.decode(
            "svc.api.Ping", '{"time":"2020-01-02T03:04:05", "n":42, "ok":true}'
        )
        assert rec.type == "Ping"
        assert rec.logger == "svc.api.Ping"
        assert rec.timestamp == PING_NANOS
        assert rec.fields == (Field.integer("n", 42), Field.boolean("ok", True))

    def test_bytes_payload(self, decoder: JsonDecoder) -> None:
        rec = decoder.decode("svc.api.Ping", b'{"time":"2020-01-02T03:04:05","s":"\xc3\xa9"}')
        assert rec.as_dict() == {"s": "é"}

    @pytest.mark.parametrize("raw,value_type,value", [
        ("42", ValueType.INTEGER, 42),
        ("-7", ValueType.INTEGER, -7),
        ("1.5", ValueType.DOUBLE, 1.5),
        ("1e3", ValueType.DOUBLE, 1000.0),
        ("9223372036854775807", ValueType.INTEGER, 2**63 - 1),
        ("9223372036854775808", ValueType.DOUBLE, float(2**63)),
        ('"text"', ValueType.STRING, "text"),
        ('"42"', ValueType.STRING, "42"),
        ("false", ValueType.BOOL, False),
    ])
    def test_value_mapping(self, decoder: JsonDecoder, raw: str, value_type: ValueType, value) -> None:
        rec = decoder.decode("a.T", '{"time":"2020-01-02T03:04:05","v":%s}' % raw)
        f = rec.get("v")
        assert f is not None
        assert f.value_type is value_type
        assert f.value == value

    def test_document_order(self, decoder: JsonDecoder) -> None:
        payload = json.dumps({"z": 1, "time": "2020-01-02T03:04:05", "a": 2, "m": 3})
        rec = decoder.decode("a.T", payload)
        assert rec.field_names() == ["z", "a", "m"]
        assert decoder.decode("a.T", payload).field_names() == rec.field_names()

    def test_sort_keys(self) -> None:
        dec = JsonDecoder(time_key="time", time_layout=LAYOUT, time_location="UTC", sort_keys=True)
        payload = json.dumps({"z": 1, "time": "2020-01-02T03:04:05", "a": 2, "m": 3})
        assert dec.decode("a.T", payload).field_names() == ["a", "m", "z"]

    def test_keys_ignore(self) -> None:
        dec = JsonDecoder(time_key="time", time_layout=LAYOUT, time_location="UTC",
                          keys_ignore=["pid", "nested"])
        payload = json.dumps({"time": "2020-01-02T03:04:05", "pid": 12, "nested": {"a": 1}, "n": 1})
        assert dec.decode("a.T", payload).field_names() == ["n"]

    def test_ignored_time_key_is_missing(self) -> None:
        dec = JsonDecoder(time_key="time", time_layout=LAYOUT, time_location="UTC", keys_ignore=["time"])
        with pytest.raises(MissingTimeKey):
            dec.decode("a.T", '{"time":"2020-01-02T03:04:05","n":1}')

    def test_time_in_zone(self) -> None:
        dec = JsonDecoder(time_key="time", time_layout=LAYOUT, time_location="Asia/Tokyo")
        rec = dec.decode("a.T", '{"time":"2020-01-02T12:04:05","n":1}')
        assert rec.timestamp == PING_NANOS


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TestErrors:
    def test_missing_time_key(self, decoder: JsonDecoder) -> None:
        with pytest.raises(MissingTimeKey) as exc_info:
            decoder.decode("svc.api.Ping", '{"n": 42}')
        assert exc_info.value.key == "time"

    @pytest.mark.parametrize("payload", [
        "not json",
        "[1, 2]",
        '"string"',
        "42",
        "",
        '{"a": 1} {"b": 2}',
        '{"time": "2020-01-02T03:04:05", "x": NaN}',
        b'{"time": "\xff"}',
    ])
    def test_malformed_payload(self, decoder: JsonDecoder, payload) -> None:
        with pytest.raises(MalformedPayload):
            decoder.decode("svc.api.Ping", payload)

    def test_malformed_logger(self, decoder: JsonDecoder) -> None:
        with pytest.raises(MalformedLoggerName):
            decoder.decode("NoDots", '{"time":"2020-01-02T03:04:05"}')

    @pytest.mark.parametrize("raw", ['{"a": 1}', "[1]", "null"])
    def test_unsupported_value(self, decoder: JsonDecoder, raw: str) -> None:
        with pytest.raises(UnsupportedValueType) as exc_info:
            decoder.decode("a.T", '{"time":"2020-01-02T03:04:05","bad":%s}' % raw)
        assert exc_info.value.key == "bad"

    @pytest.mark.parametrize("raw", ["1577934245", '"02/01/2020"', "null", '"0001-01-01T00:00:00"'])
    def test_invalid_timestamp(self, decoder: JsonDecoder, raw: str) -> None:
        with pytest.raises(InvalidTimestamp) as exc_info:
            decoder.decode("a.T", '{"time":%s,"n":1}' % raw)
        assert exc_info.value.key == "time"

    def test_empty_key(self, decoder: JsonDecoder) -> None:
        with pytest.raises(MalformedPayload) as exc_info:
            decoder.decode("a.T", '{"time":"2020-01-02T03:04:05","":1}')
        assert exc_info.value.key == ""

    @pytest.mark.parametrize("raw", ["1" + "0" * 400, "1e400", "-1e400"])
    def test_number_out_of_range(self, decoder: JsonDecoder, raw: str) -> None:
        with pytest.raises(UnsupportedValueType) as exc_info:
            decoder.decode("a.T", '{"time":"2020-01-02T03:04:05","v":%s}' % raw)
        assert exc_info.value.key == "v"
