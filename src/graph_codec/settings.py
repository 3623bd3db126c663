from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CodecSettings(BaseSettings):
    """Unified configuration for graph-codec.

    Environment variables are prefixed with GRAPH_CODEC_.
    """

    model_config = SettingsConfigDict(env_prefix="GRAPH_CODEC_", extra="ignore")

    # --- Core ---
    log_level: str = Field(default="INFO", description="Python logging level")

    # --- Writer ---
    indent: int | None = Field(default=None, description="Pretty-print indent; None for compact output")
    ensure_ascii: bool = Field(default=False, description="Escape non-ASCII characters in strings")
    nan_as_string: bool = Field(default=True, description='Write NaN/Infinity as "NaN"/"Infinity" strings')

    # --- Narrowing ---
    precision_policy: Literal["warn", "error", "ignore"] = Field(
        default="warn",
        description="What to do when a float beyond 2**53 is narrowed to an integer kind",
    )


settings = CodecSettings()
