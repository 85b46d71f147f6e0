"""
Event dispatch: level filtering and fan-out to every registered backend.

Dispatch is synchronous and runs to completion on the calling thread. Each
backend call is isolated: an exception is reported through diagnostics and
metrics and the next backend still receives the event.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Callable

from ..metrics.metrics import MetricsCollector
from .diagnostics import DISABLED, Diagnostics
from .errors import BackendDispatchError
from .event import LogEvent, process_uptime
from .levels import LEVELS
from .registry import BackendRegistry
from .render import render_message


def _format_ms(seconds: float) -> str:
    return f"{seconds * 1000:.3f}ms"


class Dispatcher:
    """Filter by threshold, render, and fan out one event per call."""

    def __init__(
        self,
        registry: BackendRegistry,
        threshold: Callable[[], int],
        *,
        diagnostics: Diagnostics | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self._registry = registry
        self._threshold = threshold
        self._diagnostics = diagnostics or DISABLED
        self._metrics = metrics

    def is_enabled_for(self, level: str) -> bool:
        """Return True when an event of type ``level`` would be delivered."""
        rank = LEVELS.get(level) if isinstance(level, str) else None
        return rank is None or rank <= self._threshold()

    def dispatch(self, level: str, message: Any = None, *data: Any) -> int:
        """Deliver one event to all backends.

        Returns:
            Number of backends that accepted the event. Filtered events and
            backends that raised are not counted.
        """
        if not self.is_enabled_for(level):
            if self._metrics is not None:
                self._metrics.record_filtered()
            return 0

        plain, decorated = render_message(message)
        event = LogEvent(
            type=level,
            msg=plain,
            cmsg=decorated,
            data=tuple(data),
            time=datetime.now(timezone.utc),
            uptime=process_uptime(),
        )
        if self._metrics is not None:
            # Unknown event types share one label value
            label = level if isinstance(level, str) and level in LEVELS else "other"
            self._metrics.record_dispatched(label)

        timed = self._diagnostics.enabled or (
            self._metrics is not None and self._metrics.is_enabled
        )
        delivered = 0
        for name, backend in self._registry.items():
            start = time.perf_counter() if timed else 0.0
            try:
                backend.log(event)
            except Exception as exc:
                self._report_failure(name, backend, exc)
                continue
            delivered += 1
            elapsed = time.perf_counter() - start if timed else None
            if self._metrics is not None:
                self._metrics.record_backend_write(name, duration_seconds=elapsed)
            if elapsed is not None:
                self._diagnostics.debug(
                    "dispatch",
                    f"Write {level} log to {type_name(backend)} logger in "
                    f"{_format_ms(elapsed)}",
                    backend=name,
                    elapsed_seconds=elapsed,
                )
        return delivered

    def _report_failure(self, name: str, backend: Any, exc: Exception) -> None:
        error = BackendDispatchError(name, f"Backend '{name}' failed: {exc}")
        error.__cause__ = exc
        if self._metrics is not None:
            self._metrics.record_backend_error(name, stage="log")
        self._diagnostics.warn(
            "dispatch",
            str(error),
            backend=name,
            backend_type=type_name(backend),
            error_type=type(exc).__name__,
        )


def type_name(backend: Any) -> str:
    return type(backend).__name__
