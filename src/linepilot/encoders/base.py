"""Encoder Protocol — every record encoder implements this."""
from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from ..record import Record


@runtime_checkable
class RecordEncoder(Protocol):
    """Protocol for record encoders — duck-typed, no inheritance required."""

    @property
    def name(self) -> str:
        """Plugin name (e.g. 'InfluxdbEncoder')."""
        ...

    def encode(self, record: Record) -> bytes:
        """Serialize one record. Raises a RecordError subclass on failure."""
        ...

    def encode_many(self, records: Iterable[Record]) -> bytes:
        """Serialize several records back to back, all or nothing."""
        ...
