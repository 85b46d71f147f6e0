from __future__ import annotations

from typing import Any, Callable

import pytest

from logtopus import Logtopus, Settings
from logtopus.core import shutdown
from logtopus.core.loader import BackendResolver
from logtopus.testing import MockBackend


@pytest.fixture
def fresh_state(monkeypatch: pytest.MonkeyPatch) -> None:
    import weakref

    monkeypatch.setattr(shutdown, "_shutdown_in_progress", False)
    monkeypatch.setattr(shutdown, "_registered_loggers", weakref.WeakSet())


def test_facade_registers_when_enabled(
    fresh_state: None, resolver: BackendResolver
) -> None:
    settings = Settings(atexit_flush_enabled=True)
    log = Logtopus({"logger": {"mock": {}}}, settings=settings, resolver=resolver)
    assert log in shutdown.registered_loggers()


def test_facade_not_registered_when_disabled(
    fresh_state: None, make_logger: Callable[..., Logtopus]
) -> None:
    log = make_logger()
    assert log not in shutdown.registered_loggers()


def test_atexit_handler_flushes_registered(
    fresh_state: None, make_logger: Callable[..., Logtopus]
) -> None:
    log = make_logger()
    shutdown.register_logger(log)
    shutdown._atexit_handler()
    backend = log.get_logger("mock")
    assert backend.calls.flush_completed == 1

    # A second invocation is a no-op
    shutdown._atexit_handler()
    assert backend.calls.flush == 1


def test_atexit_handler_contains_failures(
    fresh_state: None, make_logger: Callable[..., Logtopus]
) -> None:
    failing = make_logger({})
    failing.add_logger("bad", MockBackend, {"fail_on_flush": True})
    healthy = make_logger()
    shutdown.register_logger(failing)
    shutdown.register_logger(healthy)

    shutdown._atexit_handler()

    assert healthy.get_logger("mock").calls.flush_completed == 1


def test_unregister(fresh_state: None) -> None:
    class Dummy:
        runtime: Any = None

    d = Dummy()
    shutdown.register_logger(d)  # type: ignore[arg-type]
    shutdown.unregister_logger(d)  # type: ignore[arg-type]
    assert shutdown.registered_loggers() == []
