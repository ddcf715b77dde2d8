"""Shared fixtures for ephemeris tests."""

import logging
from collections.abc import Generator
from datetime import datetime, timedelta
from typing import Any, Callable

import pytest

from ephemeris.models import Occurrence

# Fixed reference instant so that tests never depend on the wall clock.
D0 = datetime(2024, 3, 4, 9, 30)


def pytest_configure(config: Any) -> None:
    """Register markers used across the suite."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "critical_path: Core functionality tests")


@pytest.fixture
def d0() -> datetime:
    """Reference instant used as day zero."""
    return D0


@pytest.fixture
def occurrence() -> Callable[[str, int, int], Occurrence]:
    """Factory building an occurrence from day offsets relative to day zero."""

    def _make(name: str, start_day: int, end_day: int) -> Occurrence:
        return Occurrence(
            name=name,
            start=D0 + timedelta(days=start_day),
            end=D0 + timedelta(days=end_day),
        )

    return _make


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Keep ephemeris environment overrides from leaking into tests."""
    for name in (
        "EPHEMERIS_DEBUG",
        "EPHEMERIS_LOG_LEVEL",
        "EPHEMERIS_MAX_OCCURRENCES",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def preserve_logging() -> Generator[None, Any, None]:
    """Restore root and ephemeris logger levels after a test."""
    from ephemeris.logging_config import EPHEMERIS_MODULES

    root = logging.getLogger()
    saved_root_level = root.level
    saved_levels = {name: logging.getLogger(name).level for name in EPHEMERIS_MODULES}
    yield
    root.setLevel(saved_root_level)
    for name, level in saved_levels.items():
        logging.getLogger(name).setLevel(level)
