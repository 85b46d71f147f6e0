"""
Exception hierarchy for logtopus.

Only ``InvalidLevelError`` reaches application code during normal logging.
Backend failures are contained by the dispatcher and loader; flush failures
are aggregated into a single ``BackendFlushError``.
"""

from __future__ import annotations


class LogtopusError(Exception):
    """Base class for all logtopus errors."""


class UnknownLevelError(LogtopusError, ValueError):
    """A level name is not present in the rank table."""

    def __init__(self, level: object) -> None:
        self.level = level
        super().__init__(f"Unknown log level: {level!r}")


class InvalidLevelError(UnknownLevelError):
    """An unrecognised level name was passed to ``set_level``."""

    def __init__(self, level: object) -> None:
        super().__init__(level)
        self.args = (f"Invalid log level argument: {level!r}",)


class BackendError(LogtopusError):
    """Error attributed to a single named backend."""

    def __init__(self, backend: str, message: str) -> None:
        self.backend = backend
        super().__init__(message)


class BackendNotFoundError(BackendError):
    """No constructor is known for a backend id."""

    def __init__(self, backend: str) -> None:
        super().__init__(backend, f"Backend '{backend}' not found")


class BackendLoadError(BackendError):
    """A backend constructor was found but could not be loaded."""


class BackendResolutionError(BackendError):
    """A configured backend could not be resolved or constructed."""


class BackendDispatchError(BackendError):
    """A backend raised while receiving an event."""


class BackendFlushError(LogtopusError):
    """One or more backends failed to flush.

    Attributes:
        failures: Mapping of backend name to the exception it raised, in
            registry order.
    """

    def __init__(self, failures: dict[str, BaseException]) -> None:
        self.failures = dict(failures)
        names = ", ".join(self.failures)
        super().__init__(
            f"{len(self.failures)} backend(s) failed to flush: {names}"
        )

    @property
    def backends(self) -> list[str]:
        return list(self.failures)
