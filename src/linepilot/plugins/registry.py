"""Plugin registry — name, discover, and build decoders and encoders.

Discovery order:
  1. Built-in plugins, registered under their pipeline names.
  2. Entry-points under the "linepilot.plugins" group (third-party packages).
  3. Plugins explicitly registered at runtime via PluginRegistry.register_*().

Third-party packages register a factory (usually the class itself)::

    [project.entry-points."linepilot.plugins"]
    MyDecoder = "my_package.decoders:MyDecoder"
"""
from __future__ import annotations

import importlib.metadata
import logging
from typing import Any, Callable

from ..decoders.base import RecordDecoder
from ..decoders.json_decoder import JsonDecoder
from ..decoders.ulogd import UlogdDecoder
from ..encoders.base import RecordEncoder
from ..encoders.influxdb import InfluxdbEncoder

logger = logging.getLogger(__name__)

Factory = Callable[..., Any]


class PluginRegistry:
    """Central registry for decoder and encoder factories.

    Usage::

        registry = PluginRegistry.with_builtins()
        decoder = registry.create_decoder("JSONDecoder", time_key="time", time_layout="%Y-%m-%d")
        encoder = registry.create_encoder("InfluxdbEncoder", timestamp_precision="ms")
    """

    def __init__(self) -> None:
        self._decoders: dict[str, Factory] = {}
        self._encoders: dict[str, Factory] = {}

    @classmethod
    def with_builtins(cls) -> PluginRegistry:
        registry = cls()
        registry.register_decoder("JSONDecoder", JsonDecoder)
        registry.register_decoder("UlogdDecoder", UlogdDecoder)
        registry.register_encoder("InfluxdbEncoder", InfluxdbEncoder)
        return registry

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_decoder(self, name: str, factory: Factory) -> None:
        if not callable(factory):
            raise TypeError(f"{factory!r} is not a decoder factory")
        self._decoders[name] = factory
        logger.debug("Registered decoder plugin: %s", name)

    def register_encoder(self, name: str, factory: Factory) -> None:
        if not callable(factory):
            raise TypeError(f"{factory!r} is not an encoder factory")
        self._encoders[name] = factory
        logger.debug("Registered encoder plugin: %s", name)

    # ------------------------------------------------------------------
    # Discovery via entry-points
    # ------------------------------------------------------------------

    def discover(self) -> int:
        """Load all plugins from the 'linepilot.plugins' entry-point group.

        Each entry point must resolve to a class whose instances implement
        RecordDecoder or RecordEncoder. Returns the number of plugins loaded.
        """
        loaded = 0
        try:
            eps = importlib.metadata.entry_points(group="linepilot.plugins")
        except Exception as exc:
            logger.warning("Entry-point discovery failed: %s", exc)
            return 0

        for ep in eps:
            try:
                factory = ep.load()
                self._auto_register(ep.name, factory)
                loaded += 1
            except Exception as exc:
                logger.warning("Failed to load plugin %r: %s", ep.name, exc)

        return loaded

    def _auto_register(self, name: str, factory: Factory) -> None:
        """Register a plugin class under the category its Protocol implies."""
        if isinstance(factory, type) and _has_members(factory, "name", "decode"):
            self.register_decoder(name, factory)
        elif isinstance(factory, type) and _has_members(factory, "name", "encode", "encode_many"):
            self.register_encoder(name, factory)
        else:
            raise TypeError(f"{factory!r} does not implement RecordDecoder or RecordEncoder")

    # ------------------------------------------------------------------
    # Construction & lookup
    # ------------------------------------------------------------------

    def create_decoder(self, name: str, **options: Any) -> RecordDecoder:
        """Build a decoder. Bad options raise ConfigurationError from the plugin."""
        try:
            factory = self._decoders[name]
        except KeyError:
            raise KeyError(f"unknown decoder {name!r}; known: {self.list_decoders()}") from None
        return factory(**options)

    def create_encoder(self, name: str, **options: Any) -> RecordEncoder:
        try:
            factory = self._encoders[name]
        except KeyError:
            raise KeyError(f"unknown encoder {name!r}; known: {self.list_encoders()}") from None
        return factory(**options)

    def list_decoders(self) -> list[str]:
        return sorted(self._decoders)

    def list_encoders(self) -> list[str]:
        return sorted(self._encoders)


def _has_members(cls: type, *members: str) -> bool:
    return all(hasattr(cls, m) for m in members)


# Module-level singleton — shared across the application
default_registry = PluginRegistry.with_builtins()
