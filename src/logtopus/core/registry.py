"""
Backend registry: live backend instances keyed by registration name.

Adds are idempotent (the first registration under a name wins) and removals
never fail. Readers iterate an immutable snapshot that is swapped under a
lock on every mutation, so fan-out never observes a half-updated registry.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Iterator, Protocol, runtime_checkable

from .diagnostics import DISABLED, Diagnostics


@runtime_checkable
class Backend(Protocol):
    """Capability every registered backend provides.

    ``flush()`` is optional and may be sync or async; it is looked up with
    ``getattr`` rather than required by this protocol.
    """

    def log(self, event: Any) -> None:  # noqa: D401
        ...


BackendFactory = Callable[[Any], Any]


class BackendRegistry:
    """Insertion-ordered mapping of backend name to backend instance."""

    def __init__(self, diagnostics: Diagnostics | None = None) -> None:
        self._diagnostics = diagnostics or DISABLED
        self._lock = threading.RLock()
        self._entries: tuple[tuple[str, Any], ...] = ()

    def add(self, name: str, factory: BackendFactory, config: Any = None) -> bool:
        """Construct and register a backend unless ``name`` is taken.

        Returns:
            True if a new backend was registered, False for a duplicate name.
        """
        with self._lock:
            if self.has(name):
                self._diagnostics.info(
                    "registry", "backend already added", backend=name
                )
                return False
            instance = factory({} if config is None else config)
            self._entries = self._entries + ((name, instance),)
        self._diagnostics.debug(
            "registry",
            "backend added",
            backend=name,
            type=type(instance).__name__,
        )
        return True

    def remove(self, name: str) -> bool:
        with self._lock:
            remaining = tuple(e for e in self._entries if e[0] != name)
            removed = len(remaining) != len(self._entries)
            self._entries = remaining
        if removed:
            self._diagnostics.debug("registry", "backend removed", backend=name)
        return removed

    def has(self, name: str) -> bool:
        return any(entry_name == name for entry_name, _ in self._entries)

    def get(self, name: str) -> Any | None:
        for entry_name, backend in self._entries:
            if entry_name == name:
                return backend
        return None

    def names(self) -> list[str]:
        return [name for name, _ in self._entries]

    def items(self) -> tuple[tuple[str, Any], ...]:
        """Stable snapshot of ``(name, backend)`` pairs in insertion order."""
        return self._entries

    def for_each(self, visitor: Callable[[str, Any], None]) -> None:
        for name, backend in self._entries:
            visitor(name, backend)

    def clear(self) -> None:
        with self._lock:
            self._entries = ()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self._entries)
