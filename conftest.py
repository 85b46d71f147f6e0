"""
Root pytest configuration.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "critical: Tests that must never fail - core functionality",
    )
    config.addinivalue_line(
        "markers",
        "integration: Tests exercising several components together",
    )
    config.addinivalue_line(
        "markers",
        "property: Property-based tests (may be slow)",
    )


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host env vars from leaking into Settings()."""
    for var in (
        "LOGTOPUS_DEBUG",
        "LOGTOPUS_ENV",
        "APP_ENV",
        "LOGTOPUS_ENABLE_METRICS",
        "LOGTOPUS_ATEXIT_FLUSH_ENABLED",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _clear_logger_cache() -> Generator[None, None, None]:
    """Clear the named-logger cache before and after each test.

    Each test gets fresh facades rather than reusing cached ones.
    """
    from logtopus import clear_logger_cache

    clear_logger_cache()
    yield
    clear_logger_cache()
