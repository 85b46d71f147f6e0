"""Flush-on-exit handling.

This module provides:
- Atexit handler that flushes every registered facade on normal exit
- WeakSet-based registration so facades can still be garbage collected

The handler is best-effort: each facade's flush is bounded by its own
timeout and failures never propagate out of interpreter shutdown.
"""

from __future__ import annotations

import atexit
import weakref
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .facade import Logtopus


_shutdown_in_progress: bool = False
_registered_loggers: weakref.WeakSet[Any] = weakref.WeakSet()


def register_logger(logger: Logtopus) -> None:
    """Register a facade for flushing at interpreter exit."""
    _registered_loggers.add(logger)


def unregister_logger(logger: Logtopus) -> None:
    _registered_loggers.discard(logger)


def registered_loggers() -> list[Any]:
    return list(_registered_loggers)


def _flush_single_logger(logger: Any) -> None:
    try:
        logger.flush_sync(timeout=logger.runtime.atexit_flush_timeout_seconds)
    except Exception:
        pass  # Best effort - don't crash on exit


def _atexit_handler() -> None:
    """Flush all registered facades; never raises."""
    global _shutdown_in_progress

    if _shutdown_in_progress:
        return
    _shutdown_in_progress = True

    # Snapshot the loggers (WeakSet iteration can fail if GC runs)
    try:
        loggers = list(_registered_loggers)
    except Exception:  # pragma: no cover - rare GC race
        return

    for logger in loggers:
        _flush_single_logger(logger)


atexit.register(_atexit_handler)
