"""Configuration via pydantic-settings — 12-factor app style.

Each plugin has its own option model. ``Settings`` nests them so the whole
surface can be set from the environment, e.g.::

    LINEPILOT_ENCODER__TIMESTAMP_PRECISION=ms
    LINEPILOT_JSON_DECODER__TIME_KEY=time
    LINEPILOT_JSON_DECODER__KEYS_IGNORE='["pid", "host"]'

Semantic checks (required keys, known precisions, loadable zones) are done
by the plugin constructors, which raise ``ConfigurationError``.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class EncoderConfig(BaseModel):
    timestamp_precision: str = Field(default="ns", description="One of ns, us, ms, s, m, h")


class JsonDecoderConfig(BaseModel):
    time_key: str = Field(default="", description="JSON key holding the record time (required)")
    time_layout: str = Field(default="", description="strptime layout of the time value (required)")
    time_location: str = Field(default="Local", description="IANA zone name, or 'Local'")
    keys_ignore: list[str] = Field(default_factory=list, description="JSON keys to drop")
    sort_keys: bool = Field(default=False, description="Emit fields in lexical key order")


class UlogdDecoderConfig(BaseModel):
    time_location: str = Field(default="Local", description="IANA zone name, or 'Local'")
    use_first_segment: bool = Field(
        default=False, description="Take the record type from the first logger segment"
    )
    timestamp_policy: Literal["field", "primary"] = Field(
        default="field", description="Where a parsed 'timestamp'/'@Timestamp' value goes"
    )


class Settings(BaseSettings):
    """linepilot configuration — loaded from env vars / .env file."""

    encoder: EncoderConfig = Field(default_factory=EncoderConfig)
    json_decoder: JsonDecoderConfig = Field(default_factory=JsonDecoderConfig)
    ulogd_decoder: UlogdDecoderConfig = Field(default_factory=UlogdDecoderConfig)

    class Config:
        env_prefix = "LINEPILOT_"
        env_nested_delimiter = "__"
        env_file = ".env"


settings = Settings()
