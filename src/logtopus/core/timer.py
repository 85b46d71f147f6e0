"""Stopwatches for measuring and logging elapsed time."""

from __future__ import annotations

import time
from typing import Callable


def format_elapsed(seconds: float) -> str:
    """Human-readable elapsed time: ``12.345ms`` below one second, else ``1.234s``."""
    if seconds < 1.0:
        return f"{seconds * 1000:.3f}ms"
    return f"{seconds:.3f}s"


class Stopwatch:
    """Freestanding monotonic stopwatch.

    ``log()`` reads a lap and keeps running; ``stop()`` freezes the
    stopwatch so later reads return the same value.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._start = clock()
        self._stopped_at: float | None = None

    @property
    def running(self) -> bool:
        return self._stopped_at is None

    def elapsed(self) -> float:
        end = self._stopped_at if self._stopped_at is not None else self._clock()
        return end - self._start

    def log(self) -> float:
        return self.elapsed()

    def stop(self) -> float:
        if self._stopped_at is None:
            self._stopped_at = self._clock()
        return self.elapsed()


class LabeledTimer:
    """Stopwatch that writes an ``info`` event when read.

    The label is a ``%s`` template receiving the formatted elapsed time,
    e.g. ``"request took %s"``.
    """

    def __init__(
        self,
        label: str,
        emit: Callable[[str], object],
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._label = label
        self._emit = emit
        self._watch = Stopwatch(clock)

    @property
    def label(self) -> str:
        return self._label

    def elapsed(self) -> float:
        return self._watch.elapsed()

    def stop(self) -> float:
        elapsed = self._watch.stop()
        self._emit(_substitute(self._label, format_elapsed(elapsed)))
        return elapsed

    def log(self, label: str | None = None) -> float:
        elapsed = self._watch.log()
        self._emit(_substitute(label or self._label, format_elapsed(elapsed)))
        return elapsed


def _substitute(template: str, value: str) -> str:
    if "%s" not in template:
        return f"{template} {value}"
    return template.replace("%s", value, 1)
