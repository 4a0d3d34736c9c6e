"""Shared pytest fixtures for linepilot tests."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from linepilot.record import Field, Record

# 2020-01-02T03:04:05 UTC
PING_NANOS = 1_577_934_245_000_000_000


@pytest.fixture()
def tmp_ndjson_file(tmp_path: Path):
    """Return a factory that creates temporary NDJSON files."""

    def _make(lines: list[str], name: str = "events.json") -> Path:
        p = tmp_path / name
        p.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return p

    return _make


@pytest.fixture()
def ping_payloads() -> list[str]:
    return [
        json.dumps({"time": "2020-01-02T03:04:05", "n": 42, "ok": True}),
        json.dumps({"time": "2020-01-02T03:04:06", "n": 43, "ok": False, "msg": "slow"}),
        json.dumps({"time": "2020-01-02T03:04:07", "latency": 1.25}),
    ]


@pytest.fixture()
def ulogd_payloads() -> list[str]:
    return [
        json.dumps({
            "timestamp": "2020-01-02T03:04:05.123456",
            "src_ip": "10.0.0.1",
            "src_port": "443",
            "ip.totlen": "52",
            "oob.prefix": "DROP IN",
        }),
        json.dumps({"timestamp": "2020-01-02T03:04:06", "raw.pktlen": 60, "ip.fragoff": 0}),
    ]


@pytest.fixture()
def simple_record() -> Record:
    return Record(
        type="Ping",
        logger="svc.api.Ping",
        timestamp=PING_NANOS,
        fields=(Field.integer("n", 42), Field.boolean("ok", True)),
    )
