from __future__ import annotations

from typing import Any, Callable

import pytest

from logtopus import InvalidLevelError, Logtopus, Settings, UnknownLevelError
from logtopus.core.loader import BackendResolver
from logtopus.core.timer import LabeledTimer, Stopwatch
from logtopus.testing import MockBackend

MakeLogger = Callable[..., Logtopus]


def _mock(log: Logtopus, name: str = "mock") -> MockBackend:
    backend = log.get_logger(name)
    assert isinstance(backend, MockBackend)
    return backend


class TestConstruction:
    def test_loads_configured_backends(self, make_logger: MakeLogger) -> None:
        log = make_logger({"mock": {"async_flush": False}})
        assert log.loggers == ["mock"]
        assert _mock(log).config.async_flush is False

    def test_initial_threshold_defaults_to_sys(self, make_logger: MakeLogger) -> None:
        log = make_logger()
        assert log.threshold == 3
        assert log.get_level() == "sys"

    def test_initial_threshold_from_config(self, make_logger: MakeLogger) -> None:
        assert make_logger(level=5).get_level() == "res"
        assert make_logger(level="debug").get_level() == "debug"

    def test_missing_backends_do_not_fail_construction(
        self, make_logger: MakeLogger
    ) -> None:
        log = make_logger({"mock": {}, "doesNotExist": {}})
        assert log.loggers == ["mock"]

    def test_debug_mode_from_config(self, settings: Settings) -> None:
        resolver = BackendResolver(entry_point_group=None)
        log = Logtopus(
            {"debug_mode": True, "logger": {}}, settings=settings, resolver=resolver
        )
        assert log.debug_mode is True

    def test_debug_mode_from_env(
        self, monkeypatch: pytest.MonkeyPatch, resolver: BackendResolver
    ) -> None:
        monkeypatch.setenv("LOGTOPUS_DEBUG", "1")
        monkeypatch.setenv("LOGTOPUS_ATEXIT_FLUSH_ENABLED", "false")
        log = Logtopus({"logger": {"mock": {}}}, resolver=resolver)
        assert log.debug_mode is True

    def test_repr(self, make_logger: MakeLogger) -> None:
        assert repr(make_logger()) == "Logtopus(level='sys', loggers=['mock'])"


class TestLevels:
    @pytest.mark.parametrize(
        ("name", "rank"),
        [
            ("error", 1),
            ("warn", 2),
            ("sys", 3),
            ("req", 4),
            ("res", 5),
            ("info", 6),
            ("debug", 7),
        ],
    )
    def test_set_level(self, make_logger: MakeLogger, name: str, rank: int) -> None:
        log = make_logger()
        assert log.set_level(name) is log
        assert log.threshold == rank
        assert log.get_level() == name

    def test_invalid_level_keeps_threshold(self, make_logger: MakeLogger) -> None:
        log = make_logger().set_level("info")
        with pytest.raises(InvalidLevelError) as exc_info:
            log.set_level("verbose")
        assert isinstance(exc_info.value, UnknownLevelError)
        assert isinstance(exc_info.value, ValueError)
        assert "Invalid log level" in str(exc_info.value)
        assert log.get_level() == "info"

    @pytest.mark.parametrize(
        ("environment", "expected"),
        [
            ("production", "sys"),
            ("staging", "res"),
            ("qa", "res"),
            ("test", "error"),
            (None, "info"),
        ],
    )
    def test_set_level_without_name_uses_environment(
        self,
        resolver: BackendResolver,
        environment: str | None,
        expected: str,
    ) -> None:
        settings = Settings(environment=environment, atexit_flush_enabled=False)
        log = Logtopus({"logger": {"mock": {}}}, settings=settings, resolver=resolver)
        log.set_level("debug")
        log.set_level()
        assert log.get_level() == expected

    def test_environment_read_once(
        self, monkeypatch: pytest.MonkeyPatch, resolver: BackendResolver
    ) -> None:
        monkeypatch.setenv("LOGTOPUS_ENV", "production")
        monkeypatch.setenv("LOGTOPUS_ATEXIT_FLUSH_ENABLED", "0")
        log = Logtopus({"logger": {"mock": {}}}, resolver=resolver)
        monkeypatch.setenv("LOGTOPUS_ENV", "test")
        log.set_level()
        assert log.get_level() == "sys"

    def test_is_enabled_for(self, make_logger: MakeLogger) -> None:
        log = make_logger().set_level("req")
        assert log.is_enabled_for("sys")
        assert not log.is_enabled_for("info")


class TestWriting:
    @pytest.mark.parametrize(
        "level", ["error", "warn", "sys", "req", "res", "info", "debug"]
    )
    def test_level_methods_forward_type(
        self, make_logger: MakeLogger, level: str
    ) -> None:
        log = make_logger().set_level("debug")
        method = getattr(log, level)
        assert method("hello", 1, "two") is log
        event = _mock(log).events[0]
        assert event.type == level
        assert event.msg == "hello"
        assert event.data == (1, "two")

    def test_generic_log(self, make_logger: MakeLogger) -> None:
        log = make_logger().set_level("error")
        log.log("audit", "always").log("info", "filtered")
        assert _mock(log).types == ["audit"]

    def test_filtered_by_threshold(self, make_logger: MakeLogger) -> None:
        log = make_logger().set_level("sys")
        log.debug("x").info("x").res("x").req("x").sys("s").warn("w").error("e")
        assert _mock(log).messages == ["s", "w", "e"]

    def test_broken_backend_never_reaches_caller(self, make_logger: MakeLogger) -> None:
        log = make_logger({})
        log.add_logger("broken", MockBackend, {"fail_on_log": True})
        log.add_logger("mock", MockBackend)
        log.error("still fine")
        assert _mock(log).messages == ["still fine"]

    def test_object_with_unrelated_render_method(
        self, make_logger: MakeLogger
    ) -> None:
        class Page:
            def render(self) -> str:
                return "<html>"

            def __str__(self) -> str:
                return "page"

        log = make_logger().set_level("info")
        log.info(Page())
        assert _mock(log).messages == ["page"]


class TestBackends:
    def test_add_logger_uses_config_section(self, make_logger: MakeLogger) -> None:
        log = make_logger({"mock": {}, "extra": {"async_flush": False}})
        # extra failed to resolve at construction; add it explicitly
        log.add_logger("extra", MockBackend)
        assert _mock(log, "extra").config.async_flush is False

    def test_add_logger_explicit_config(self, make_logger: MakeLogger) -> None:
        log = make_logger()
        log.add_logger("x", MockBackend, {"fail_on_flush": True})
        assert _mock(log, "x").config.fail_on_flush is True

    def test_add_logger_idempotent(self, make_logger: MakeLogger) -> None:
        class Other(MockBackend):
            pass

        log = make_logger()
        log.add_logger("x", MockBackend)
        original = log.get_logger("x")
        assert log.add_logger("x", Other) is log
        assert log.get_logger("x") is original
        assert type(log.get_logger("x")) is MockBackend

    def test_remove_logger(self, make_logger: MakeLogger) -> None:
        log = make_logger().set_level("debug")
        backend = _mock(log)
        assert log.remove_logger("mock") is log
        assert not log.has_logger("mock")
        log.info("after removal")
        assert backend.count == 0

    def test_remove_unknown_logger_is_noop(self, make_logger: MakeLogger) -> None:
        log = make_logger()
        log.remove_logger("nope")
        assert log.loggers == ["mock"]

    @pytest.mark.critical
    def test_register_dispatch_unregister_round_trip(
        self, make_logger: MakeLogger
    ) -> None:
        log = make_logger({}).set_level("info")
        log.add_logger("counter", MockBackend)
        backend = _mock(log, "counter")
        for i in range(5):
            log.info(f"event {i}")
        log.debug("below threshold")
        log.remove_logger("counter")
        log.info("after")
        log.error("after")
        assert backend.count == 5

    def test_load_loggers(self, make_logger: MakeLogger) -> None:
        log = make_logger()
        assert log.load_loggers({"second": {}}) == []
        assert log.load_loggers({"mock": {}}) == []


class TestTimer:
    def test_timer_without_label(self, make_logger: MakeLogger) -> None:
        log = make_logger().set_level("debug")
        watch = log.timer()
        assert isinstance(watch, Stopwatch)
        assert watch.stop() >= 0
        assert _mock(log).count == 0

    def test_timer_with_label_emits_info(self, make_logger: MakeLogger) -> None:
        log = make_logger().set_level("info")
        timer = log.timer("elapsed: %s")
        assert isinstance(timer, LabeledTimer)
        elapsed = timer.stop()
        backend = _mock(log)
        assert backend.types == ["info"]
        message = backend.messages[0]
        assert message.startswith("elapsed: ")
        assert message.endswith(("ms", "s"))
        assert elapsed >= 0

    def test_timer_log_keeps_running(self, make_logger: MakeLogger) -> None:
        log = make_logger().set_level("info")
        timer = log.timer("total %s")
        timer.log("lap %s")
        timer.stop()
        messages = _mock(log).messages
        assert messages[0].startswith("lap ")
        assert messages[1].startswith("total ")

    def test_timer_event_respects_threshold(self, make_logger: MakeLogger) -> None:
        log = make_logger().set_level("sys")
        log.timer("took %s").stop()
        assert _mock(log).count == 0
