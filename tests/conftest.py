from __future__ import annotations

from typing import Any, Callable

import pytest

from logtopus import Logtopus, Settings
from logtopus.core.loader import BackendResolver
from logtopus.testing import MockBackend


@pytest.fixture
def settings() -> Settings:
    """Settings that never touch the host environment or exit hooks."""
    return Settings(debug=False, environment=None, atexit_flush_enabled=False)


@pytest.fixture
def resolver() -> BackendResolver:
    """Resolver knowing only the mock backend; no entry point discovery."""
    r = BackendResolver(entry_point_group=None)
    r.register("mock", MockBackend)
    return r


@pytest.fixture
def make_logger(
    settings: Settings, resolver: BackendResolver
) -> Callable[..., Logtopus]:
    def _make(
        backends: dict[str, Any] | None = None, **config: Any
    ) -> Logtopus:
        config.setdefault("logger", backends if backends is not None else {"mock": {}})
        return Logtopus(config, settings=settings, resolver=resolver)

    return _make
