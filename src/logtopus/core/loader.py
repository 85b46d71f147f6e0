"""
Backend resolution and loading.

Backend names from the logger config are turned into canonical ids
(``fileLogger`` -> ``file-logger``) and resolved through an injected
resolver. The default resolver is an explicit factory map of built-ins plus
constructors published by installed distributions under the
``logtopus.backends`` entry point group. Built-ins win when names collide.

A backend that cannot be resolved or constructed never stops the others from
loading; the failure is reported through diagnostics only.
"""

from __future__ import annotations

import importlib.metadata
import re
from typing import Any, Callable, Iterable, Mapping

from .diagnostics import DISABLED, Diagnostics
from .errors import (
    BackendError,
    BackendLoadError,
    BackendNotFoundError,
    BackendResolutionError,
)
from .registry import BackendFactory, BackendRegistry

ENTRY_POINT_GROUP = "logtopus.backends"

Resolver = Callable[[str], BackendFactory]

_CAMEL_BOUNDARY = re.compile(r"[A-Z]")


def canonical_backend_id(name: str) -> str:
    """Hyphenate camel-case boundaries: ``fileLogger`` -> ``file-logger``."""
    hyphenated = _CAMEL_BOUNDARY.sub(lambda m: "-" + m.group(0).lower(), name)
    return hyphenated.lstrip("-")


def _normalize_backend_id(name: str) -> str:
    """Normalize ids so ``file_logger`` and ``File-Logger`` match."""
    return name.replace("_", "-").lower()


def _select_entry_points(eps: Any, group: str) -> list[Any]:
    """Support both modern and legacy entry_points APIs."""
    if hasattr(eps, "select"):
        return list(eps.select(group=group))
    return list(eps.get(group, []))


class BackendResolver:
    """Explicit factory map used as the default resolver."""

    def __init__(self, *, entry_point_group: str | None = ENTRY_POINT_GROUP) -> None:
        self._factories: dict[str, BackendFactory] = {}
        self._aliases: dict[str, str] = {}
        self._group = entry_point_group

    def register(
        self,
        name: str,
        factory: BackendFactory,
        *,
        aliases: Iterable[str] | None = None,
    ) -> None:
        canonical = _normalize_backend_id(name)
        self._factories[canonical] = factory
        for alias in aliases or ():
            self._aliases[_normalize_backend_id(alias)] = canonical

    def unregister(self, name: str) -> None:
        canonical = _normalize_backend_id(name)
        self._factories.pop(canonical, None)
        self._aliases = {a: c for a, c in self._aliases.items() if c != canonical}

    def resolve(self, backend_id: str) -> BackendFactory:
        canonical = _normalize_backend_id(backend_id)
        target = self._aliases.get(canonical, canonical)
        if target in self._factories:
            return self._factories[target]

        if self._group:
            for ep in self._entry_points():
                if _normalize_backend_id(ep.name) == canonical:
                    try:
                        factory: BackendFactory = ep.load()
                    except Exception as exc:
                        raise BackendLoadError(
                            backend_id, f"Failed to load backend '{backend_id}': {exc}"
                        ) from exc
                    return factory

        raise BackendNotFoundError(backend_id)

    def available(self) -> list[str]:
        """Names resolvable right now (built-ins, aliases, entry points)."""
        names: set[str] = set(self._factories) | set(self._aliases)
        if self._group:
            names.update(_normalize_backend_id(ep.name) for ep in self._entry_points())
        return sorted(names)

    def __call__(self, backend_id: str) -> BackendFactory:
        return self.resolve(backend_id)

    def _entry_points(self) -> list[Any]:
        try:
            return _select_entry_points(importlib.metadata.entry_points(), self._group)
        except Exception:
            # Best-effort; discovery errors mean "no entry points"
            return []


_default_resolver = BackendResolver()


def default_resolver() -> BackendResolver:
    return _default_resolver


def register_builtin(
    name: str, factory: BackendFactory, *, aliases: Iterable[str] | None = None
) -> None:
    """Register a built-in backend with the default resolver."""
    _default_resolver.register(name, factory, aliases=aliases)


class BackendLoader:
    """Instantiate the backends named in a logger config."""

    def __init__(
        self,
        registry: BackendRegistry,
        resolver: Resolver | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self._registry = registry
        self._resolver: Resolver = resolver or _default_resolver
        self._diagnostics = diagnostics or DISABLED

    def load(self, backends: Mapping[str, Any]) -> list[str]:
        """Load every backend in ``backends``; return the names registered."""
        loaded: list[str] = []
        for name, config in backends.items():
            self._diagnostics.info("loader", f"Load {name} logger", backend=name)
            try:
                added = self.load_one(name, config)
            except BackendResolutionError as exc:
                self._diagnostics.warn(
                    "loader",
                    "Could not load logger module",
                    backend=name,
                    error=str(exc.__cause__ or exc),
                    error_type=type(exc.__cause__ or exc).__name__,
                )
                continue
            if added:
                loaded.append(name)
        return loaded

    def load_one(self, name: str, config: Any = None) -> bool:
        """Resolve and register one backend.

        Raises:
            BackendResolutionError: If the backend cannot be resolved or
                its constructor raises.
        """
        backend_id = canonical_backend_id(name)
        try:
            factory = self._resolver(backend_id)
            return self._registry.add(name, factory, config)
        except BackendResolutionError:
            raise
        except BackendError as exc:
            raise BackendResolutionError(name, str(exc)) from exc
        except Exception as exc:
            raise BackendResolutionError(
                name, f"Failed to construct backend '{name}': {exc}"
            ) from exc
