"""Derive a record type from a dotted logger name."""
from __future__ import annotations

import re

from ..errors import MalformedLoggerName

# Greedy up to the final dot, then a non-empty tail: app.module.Type -> Type
_LAST_SEGMENT = r"(?s)^.*\.([^.]+)$"
# Everything before the first dot: ulogd.json -> ulogd
_FIRST_SEGMENT = r"^([^.]+)\."


class TypeResolver:
    """Resolve the record type from a logger name.

    By default the type is the last path segment. With
    ``use_first_segment=True`` it is the first one instead. The pattern is
    compiled once per instance and never changes afterwards.
    """

    def __init__(self, use_first_segment: bool = False) -> None:
        self.use_first_segment = use_first_segment
        if use_first_segment:
            self._pattern = re.compile(_FIRST_SEGMENT)
            self._expected = "Type.+"
        else:
            self._pattern = re.compile(_LAST_SEGMENT)
            self._expected = "+.Type"

    def resolve(self, logger_name: str) -> str:
        m = self._pattern.match(logger_name)
        if not m:
            raise MalformedLoggerName(logger_name, self._expected)
        return m.group(1)


_default_resolver = TypeResolver()


def resolve_type(logger_name: str) -> str:
    """Last-segment resolution: ``resolve_type("app.sub.Thing") == "Thing"``."""
    return _default_resolver.resolve(logger_name)
