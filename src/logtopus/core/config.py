"""
Construction config for a logtopus facade.

The config is validated once, frozen, and combined with the environment
`Settings` into `RuntimeOptions`. Nothing below the facade reads the process
environment after construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .levels import LEVELS, default_rank, rank_of
from .settings import Settings

DEFAULT_THRESHOLD = 3


def default_logger_config() -> dict[str, dict[str, Any]]:
    """Backends loaded when a config names none."""
    return {
        "console": {
            "colors": True,
            "template": "default",
            "timestamp": False,
        },
        "file": {
            "logfile": "./logs/app.log",
        },
    }


class LogtopusConfig(BaseModel):
    """Per-instance construction config.

    ``level`` accepts a rank or a level name; ``logger`` maps backend names to
    their backend-specific config and falls back to console + file.
    """

    model_config = ConfigDict(
        frozen=True, extra="ignore", populate_by_name=True, validate_default=True
    )

    level: int = Field(default=DEFAULT_THRESHOLD, ge=1)
    debug_mode: bool | None = Field(
        default=None, validation_alias=AliasChoices("debug_mode", "debugMode")
    )
    logger: dict[str, Any] = Field(default_factory=default_logger_config)

    @field_validator("level", mode="before")
    @classmethod
    def _level_from_name(cls, value: Any) -> Any:
        if value is None or value == 0:
            return DEFAULT_THRESHOLD
        if isinstance(value, str) and value in LEVELS:
            return rank_of(value)
        return value

    @field_validator("logger", mode="before")
    @classmethod
    def _default_logger(cls, value: Any) -> Any:
        if not value:
            return default_logger_config()
        if isinstance(value, Mapping):
            return {str(k): ({} if v is None else v) for k, v in value.items()}
        return value

    @classmethod
    def coerce(cls, value: LogtopusConfig | Mapping[str, Any] | None) -> LogtopusConfig:
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls.model_validate(dict(value))

    def backend_config(self, name: str) -> Any:
        """Return the config section for one backend (empty mapping if none)."""
        section = self.logger.get(name)
        return {} if section is None else section


@dataclass(frozen=True)
class RuntimeOptions:
    """Values resolved once at construction and threaded through the facade."""

    debug: bool
    environment: str | None
    environment_rank: int
    initial_rank: int
    enable_metrics: bool = False
    atexit_flush_enabled: bool = True
    atexit_flush_timeout_seconds: float = 2.0


def resolve_runtime(config: LogtopusConfig, settings: Settings) -> RuntimeOptions:
    debug = (
        config.debug_mode if config.debug_mode is not None else bool(settings.debug)
    )
    return RuntimeOptions(
        debug=debug,
        environment=settings.environment,
        environment_rank=default_rank(settings.environment),
        initial_rank=config.level,
        enable_metrics=bool(settings.enable_metrics),
        atexit_flush_enabled=bool(settings.atexit_flush_enabled),
        atexit_flush_timeout_seconds=float(settings.atexit_flush_timeout_seconds),
    )
