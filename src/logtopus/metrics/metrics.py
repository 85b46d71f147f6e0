"""
Dispatch metrics for logtopus.

Implements a small set of Prometheus-compatible counters and histograms for
the fan-out and flush paths.

Design goals:
- Synchronous and cheap; dispatch runs on the caller's thread
- Zero global state; every collector owns an isolated registry
- Safe no-op exporters when metrics are disabled, while still tracking
  in-memory counters for tests
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Histogram


@dataclass(frozen=True)
class DispatchMetrics:
    """Captured runtime counters for quick assertions in tests."""

    events_dispatched: int = 0
    events_filtered: int = 0
    backend_writes: int = 0
    backend_errors: int = 0
    flush_errors: int = 0


class MetricsCollector:
    """Facade-scoped metrics collector."""

    def __init__(self, *, enabled: bool = False) -> None:
        self._enabled = bool(enabled)
        self._lock = threading.Lock()
        self._state = DispatchMetrics()

        self._c_dispatched: Any | None = None
        self._c_filtered: Any | None = None
        self._c_backend_errors: Any | None = None
        self._h_write_latency: Any | None = None
        self._registry: CollectorRegistry | None = None

        if self._enabled:
            # Isolated registry to avoid global duplication across facades
            self._registry = CollectorRegistry()
            self._c_dispatched = Counter(
                "logtopus_events_dispatched_total",
                "Events delivered to the backend fan-out",
                ["level"],
                registry=self._registry,
            )
            self._c_filtered = Counter(
                "logtopus_events_filtered_total",
                "Events dropped by the level threshold",
                registry=self._registry,
            )
            self._c_backend_errors = Counter(
                "logtopus_backend_errors_total",
                "Backend failures contained by the facade",
                ["backend", "stage"],
                registry=self._registry,
            )
            self._h_write_latency = Histogram(
                "logtopus_backend_write_seconds",
                "Latency of a single backend log() call",
                ["backend"],
                buckets=(
                    0.0001,
                    0.0005,
                    0.001,
                    0.0025,
                    0.005,
                    0.01,
                    0.025,
                    0.05,
                    0.1,
                    0.5,
                ),
                registry=self._registry,
            )

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def registry(self) -> CollectorRegistry | None:
        return self._registry

    def record_dispatched(self, level: str) -> None:
        with self._lock:
            self._state = replace(
                self._state, events_dispatched=self._state.events_dispatched + 1
            )
        if self._c_dispatched is not None:
            self._c_dispatched.labels(level=level).inc()

    def record_filtered(self) -> None:
        with self._lock:
            self._state = replace(
                self._state, events_filtered=self._state.events_filtered + 1
            )
        if self._c_filtered is not None:
            self._c_filtered.inc()

    def record_backend_write(
        self, backend: str, *, duration_seconds: float | None = None
    ) -> None:
        with self._lock:
            self._state = replace(
                self._state, backend_writes=self._state.backend_writes + 1
            )
        if self._h_write_latency is not None and duration_seconds is not None:
            self._h_write_latency.labels(backend=backend).observe(duration_seconds)

    def record_backend_error(self, backend: str, *, stage: str = "log") -> None:
        with self._lock:
            if stage == "flush":
                self._state = replace(
                    self._state, flush_errors=self._state.flush_errors + 1
                )
            else:
                self._state = replace(
                    self._state, backend_errors=self._state.backend_errors + 1
                )
        if self._c_backend_errors is not None:
            self._c_backend_errors.labels(backend=backend, stage=stage).inc()

    def snapshot(self) -> DispatchMetrics:
        return self._state
