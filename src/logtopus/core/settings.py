"""
Environment-driven settings for logtopus using Pydantic v2 Settings.

These are process-level toggles read once when a facade is constructed.
Per-instance construction config lives in `config.py`.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import (  # type: ignore[import-not-found]
    BaseSettings,
    SettingsConfigDict,
)

_FALSE_TOKENS = frozenset({"0", "false", "no", "off"})


class Settings(BaseSettings):
    """Top-level environment settings."""

    debug: bool = Field(
        default=False,
        description="Emit internal lifecycle diagnostics to stderr",
    )
    environment: str | None = Field(
        default=None,
        validation_alias=AliasChoices("LOGTOPUS_ENV", "APP_ENV"),
        description="Environment tag selecting the default threshold",
    )
    enable_metrics: bool = Field(
        default=False,
        description="Enable Prometheus-compatible dispatch metrics",
    )
    atexit_flush_enabled: bool = Field(
        default=True,
        description="Flush registered loggers when the interpreter exits",
    )
    atexit_flush_timeout_seconds: float = Field(
        default=2.0,
        gt=0.0,
        description="Upper bound for the exit-time flush of one logger",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOGTOPUS_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("debug", mode="before")
    @classmethod
    def _truthy_debug(cls, value: Any) -> Any:
        # Any non-empty value switches debug mode on
        if isinstance(value, str):
            token = value.strip().lower()
            return bool(token) and token not in _FALSE_TOKENS
        return value

    @field_validator("environment")
    @classmethod
    def _normalize_environment(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().lower()
        return value or None
