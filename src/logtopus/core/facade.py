"""
The logtopus facade: one leveled logging API over many backends.

Example:
    from logtopus import Logtopus

    log = Logtopus({"logger": {"console": {"colors": False}}})
    log.set_level("debug")
    log.info("System is up and running")
    log.req("API request", "/api/v1/ping")
"""

from __future__ import annotations

import asyncio
import inspect
import threading
from typing import Any, Callable, Mapping

from ..metrics.metrics import MetricsCollector
from . import shutdown
from .config import LogtopusConfig, RuntimeOptions, resolve_runtime
from .diagnostics import Diagnostics
from .dispatcher import Dispatcher
from .errors import BackendFlushError, InvalidLevelError
from .levels import LEVELS, name_of
from .loader import BackendLoader, Resolver
from .registry import BackendFactory, BackendRegistry
from .settings import Settings
from .timer import LabeledTimer, Stopwatch


class Logtopus:
    """Leveled logging facade fanning events out to registered backends.

    Args:
        config: Construction config (``LogtopusConfig`` or a mapping with
            ``level``, ``debug_mode`` and ``logger`` keys).
        settings: Environment settings; read from ``LOGTOPUS_*`` env vars
            when omitted.
        resolver: Callable mapping a canonical backend id to a backend
            constructor. Defaults to the built-in/entry-point resolver.
    """

    def __init__(
        self,
        config: LogtopusConfig | Mapping[str, Any] | None = None,
        *,
        settings: Settings | None = None,
        resolver: Resolver | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self._config = LogtopusConfig.coerce(config)
        self._runtime = resolve_runtime(self._config, settings or Settings())
        self._diagnostics = diagnostics or Diagnostics(enabled=self._runtime.debug)
        self._metrics = MetricsCollector(enabled=self._runtime.enable_metrics)

        self._lock = threading.RLock()
        self._threshold = self._runtime.initial_rank

        self._registry = BackendRegistry(self._diagnostics)
        self._dispatcher = Dispatcher(
            self._registry,
            lambda: self._threshold,
            diagnostics=self._diagnostics,
            metrics=self._metrics,
        )
        self._loader = BackendLoader(self._registry, resolver, self._diagnostics)
        self.load_loggers()

        if self._runtime.atexit_flush_enabled:
            shutdown.register_logger(self)

    # -- configuration -----------------------------------------------------

    @property
    def config(self) -> LogtopusConfig:
        return self._config

    @property
    def runtime(self) -> RuntimeOptions:
        return self._runtime

    @property
    def debug_mode(self) -> bool:
        return self._diagnostics.enabled

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics

    @property
    def threshold(self) -> int:
        """Active threshold rank."""
        return self._threshold

    def set_level(self, level: str | None = None) -> Logtopus:
        """Set the threshold by level name, or reset it to the environment default.

        Raises:
            InvalidLevelError: If ``level`` is given but unknown. The current
                threshold is left unchanged.
        """
        if level:
            if not isinstance(level, str) or level not in LEVELS:
                raise InvalidLevelError(level)
            rank = LEVELS[level]
        else:
            rank = self._runtime.environment_rank
        with self._lock:
            self._threshold = rank
        self._diagnostics.debug(
            "facade", "log level set", level=name_of(rank), rank=rank
        )
        return self

    def get_level(self) -> str | None:
        return name_of(self._threshold)

    def is_enabled_for(self, level: str) -> bool:
        return self._dispatcher.is_enabled_for(level)

    # -- backends ----------------------------------------------------------

    def load_loggers(self, backends: Mapping[str, Any] | None = None) -> list[str]:
        """Resolve and register backends (the configured ones by default)."""
        return self._loader.load(self._config.logger if backends is None else backends)

    def add_logger(
        self, name: str, factory: BackendFactory, config: Any = None
    ) -> Logtopus:
        """Register a backend under ``name``; a taken name is left untouched.

        ``factory`` receives ``config`` or, when omitted, the backend's
        section of the logger config.
        """
        if config is None:
            config = self._config.backend_config(name)
        self._registry.add(name, factory, config)
        return self

    def remove_logger(self, name: str) -> Logtopus:
        self._registry.remove(name)
        return self

    def has_logger(self, name: str) -> bool:
        return self._registry.has(name)

    def get_logger(self, name: str) -> Any | None:
        """Return the backend instance registered under ``name``."""
        return self._registry.get(name)

    @property
    def loggers(self) -> list[str]:
        return self._registry.names()

    # -- writing -----------------------------------------------------------

    def log(self, type: str, msg: Any = None, *data: Any) -> Logtopus:
        """Write an event of any type; unknown types are never filtered."""
        self._dispatcher.dispatch(type, msg, *data)
        return self

    def error(self, msg: Any = None, *data: Any) -> Logtopus:
        self._dispatcher.dispatch("error", msg, *data)
        return self

    def warn(self, msg: Any = None, *data: Any) -> Logtopus:
        self._dispatcher.dispatch("warn", msg, *data)
        return self

    def sys(self, msg: Any = None, *data: Any) -> Logtopus:
        self._dispatcher.dispatch("sys", msg, *data)
        return self

    def req(self, msg: Any = None, *data: Any) -> Logtopus:
        self._dispatcher.dispatch("req", msg, *data)
        return self

    def res(self, msg: Any = None, *data: Any) -> Logtopus:
        self._dispatcher.dispatch("res", msg, *data)
        return self

    def info(self, msg: Any = None, *data: Any) -> Logtopus:
        self._dispatcher.dispatch("info", msg, *data)
        return self

    def debug(self, msg: Any = None, *data: Any) -> Logtopus:
        self._dispatcher.dispatch("debug", msg, *data)
        return self

    # -- timers ------------------------------------------------------------

    def timer(self, label: str | None = None) -> Stopwatch | LabeledTimer:
        """Start a stopwatch.

        Without a label the stopwatch is freestanding. With a label, reading
        it writes an ``info`` event with the elapsed time substituted for
        ``%s`` in the label.
        """
        if not label:
            return Stopwatch()
        return LabeledTimer(label, self._emit_info)

    def _emit_info(self, message: str) -> None:
        self._dispatcher.dispatch("info", message)

    # -- flushing ----------------------------------------------------------

    async def flush(self) -> None:
        """Flush every backend that supports it, concurrently.

        All backends get their attempt even when some fail.

        Raises:
            BackendFlushError: If one or more backends failed; aggregates
                every failure by backend name.
        """
        targets: list[tuple[str, Callable[[], Any]]] = []
        for name, backend in self._registry.items():
            flush = getattr(backend, "flush", None)
            if callable(flush):
                targets.append((name, flush))
        if not targets:
            return

        results = await asyncio.gather(
            *(_call_flush(flush) for _, flush in targets),
            return_exceptions=True,
        )

        failures: dict[str, BaseException] = {}
        for (name, _), result in zip(targets, results):
            if isinstance(result, BaseException):
                failures[name] = result
                self._metrics.record_backend_error(name, stage="flush")
                self._diagnostics.warn(
                    "flush",
                    "backend flush failed",
                    backend=name,
                    error=str(result),
                    error_type=type(result).__name__,
                )
        if failures:
            raise BackendFlushError(failures) from next(iter(failures.values()))
        self._diagnostics.debug("flush", "flushed backends", count=len(targets))

    def flush_sync(self, timeout: float | None = None) -> None:
        """Run ``flush()`` from synchronous code.

        Raises:
            RuntimeError: If called from inside a running event loop.
            BackendFlushError: As for ``flush()``.
            asyncio.TimeoutError: If ``timeout`` elapses first.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            if timeout is None:
                asyncio.run(self.flush())
            else:
                asyncio.run(asyncio.wait_for(self.flush(), timeout=timeout))
            return
        raise RuntimeError(
            "flush_sync() cannot run inside an event loop; await flush() instead"
        )

    def close(self) -> None:
        """Flush, then stop tracking this facade for exit-time flushing."""
        try:
            self.flush_sync(timeout=self._runtime.atexit_flush_timeout_seconds)
        finally:
            shutdown.unregister_logger(self)

    def __repr__(self) -> str:
        return (
            f"Logtopus(level={self.get_level()!r}, loggers={self._registry.names()!r})"
        )


async def _call_flush(flush: Callable[[], Any]) -> Any:
    result = flush()
    if inspect.isawaitable(result):
        return await result
    return result
