"""Typed Field Model — the in-memory shape shared by decoders and encoders."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterator, Union

from .errors import MultipleValuesForField

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

Scalar = Union[int, float, bool, str, bytes]


class ValueType(enum.Enum):
    """Field value kinds, numbered as in the Heka message schema."""

    STRING = 0
    BYTES = 1
    INTEGER = 2
    DOUBLE = 3
    BOOL = 4


def fits_int64(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


_PY_TYPES: dict[ValueType, tuple[type, ...]] = {
    ValueType.STRING: (str,),
    ValueType.BYTES: (bytes,),
    ValueType.INTEGER: (int,),
    ValueType.DOUBLE: (float,),
    ValueType.BOOL: (bool,),
}


@dataclass(frozen=True)
class Field:
    """One named, typed field.

    ``values`` is a tuple because the upstream message model allows a field
    to carry several values; the line protocol encoder refuses those.
    """

    name: str
    value_type: ValueType
    values: tuple[Scalar, ...]

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("field name must not be empty")
        if not self.values:
            raise ValueError(f"field {self.name!r} has no value")
        expected = _PY_TYPES[self.value_type]
        for v in self.values:
            # bool is an int subclass; keep BOOL and INTEGER apart
            if isinstance(v, bool) != (self.value_type is ValueType.BOOL) or not isinstance(v, expected):
                raise TypeError(
                    f"field {self.name!r}: {v!r} is not a {self.value_type.name} value"
                )
            if self.value_type is ValueType.INTEGER and not fits_int64(v):
                raise ValueError(f"field {self.name!r}: {v} does not fit in int64")

    @property
    def value(self) -> Scalar:
        """The single value of this field."""
        if len(self.values) != 1:
            raise MultipleValuesForField(self.name)
        return self.values[0]

    @classmethod
    def integer(cls, name: str, *values: int) -> Field:
        return cls(name, ValueType.INTEGER, values)

    @classmethod
    def double(cls, name: str, *values: float) -> Field:
        return cls(name, ValueType.DOUBLE, tuple(float(v) for v in values))

    @classmethod
    def boolean(cls, name: str, *values: bool) -> Field:
        return cls(name, ValueType.BOOL, values)

    @classmethod
    def string(cls, name: str, *values: str) -> Field:
        return cls(name, ValueType.STRING, values)


@dataclass(frozen=True)
class Record:
    """One telemetry event.

    Attributes:
        type:       Coarse category, usually derived from the logger name.
        logger:     Name of the originating source.
        timestamp:  Nanoseconds since the Unix epoch.
        fields:     Ordered fields; this order is the encoder's output order.
    """

    type: str
    logger: str
    timestamp: int
    fields: tuple[Field, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def get(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def as_dict(self) -> dict[str, Any]:
        """Map field names to their single values (last one wins on repeats)."""
        return {f.name: f.value for f in self.fields}
