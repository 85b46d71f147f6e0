"""
Public entrypoints for logtopus.

Provides the `Logtopus` facade and `get_logger()` for named, cached
instances.
"""

from __future__ import annotations

import threading
from typing import Any, Mapping

from . import backends as _backends  # noqa: F401  (registers built-ins)
from ._version import __version__
from .core import shutdown as _shutdown
from .core.config import LogtopusConfig
from .core.errors import (
    BackendDispatchError,
    BackendFlushError,
    BackendLoadError,
    BackendNotFoundError,
    BackendResolutionError,
    InvalidLevelError,
    LogtopusError,
    UnknownLevelError,
)
from .core.event import LogEvent
from .core.facade import Logtopus
from .core.levels import LEVEL_NAMES, LEVELS
from .core.loader import BackendResolver, Resolver, register_builtin
from .core.registry import Backend
from .core.render import Renderable, Styled
from .core.settings import Settings

__all__ = [
    "Backend",
    "BackendDispatchError",
    "BackendFlushError",
    "BackendLoadError",
    "BackendNotFoundError",
    "BackendResolutionError",
    "BackendResolver",
    "InvalidLevelError",
    "LEVELS",
    "LEVEL_NAMES",
    "LogEvent",
    "Logtopus",
    "LogtopusConfig",
    "LogtopusError",
    "Renderable",
    "Settings",
    "Styled",
    "UnknownLevelError",
    "clear_logger_cache",
    "get_logger",
    "register_builtin",
    "__version__",
    "VERSION",
]

_loggers: dict[str, Logtopus] = {}
_loggers_lock = threading.Lock()


def get_logger(
    name: str = "default",
    config: LogtopusConfig | Mapping[str, Any] | None = None,
    *,
    settings: Settings | None = None,
    resolver: Resolver | None = None,
) -> Logtopus:
    """Return the facade registered under ``name``, creating it on first use.

    ``config``, ``settings`` and ``resolver`` only apply when the facade is
    created; later calls return the cached instance unchanged.

    Example:
        log = get_logger("api", {"logger": {"console": {"template": "minimal"}}})
        log.set_level("info")
        log.info("Hello logtopus!")
    """
    with _loggers_lock:
        logger = _loggers.get(name)
        if logger is None:
            logger = Logtopus(config, settings=settings, resolver=resolver)
            _loggers[name] = logger
        return logger


def clear_logger_cache() -> None:
    """Forget all named facades (they are no longer flushed at exit)."""
    with _loggers_lock:
        cached = list(_loggers.values())
        _loggers.clear()
    for logger in cached:
        _shutdown.unregister_logger(logger)


VERSION = __version__
