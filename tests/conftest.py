"""Pytest configuration for async testing.

This configuration ensures:
1. Async tests are always marked for pytest-asyncio
2. Container singletons are cleared between tests
3. Shared doubles (mock logger, controllable clock) are available everywhere
"""

import inspect
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest


class FakeClock:
    """Controllable clock returning an aware UTC datetime.

    Usage:
        clock = FakeClock()
        clock.advance(25)      # 25 seconds later
        clock()                # current fake time
    """

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    """Provide a controllable clock starting at 2024-01-01T12:00:00Z."""
    return FakeClock()


@pytest.fixture
def mock_logger():
    """Create mock logger."""
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.critical = MagicMock()
    return logger


@pytest.fixture(autouse=True)
def clear_container_singletons():
    """Reset lru_cache'd factories so no test sees another test's instances."""
    from src.core import container

    factories = [getattr(container, name) for name in container.__all__]
    for factory in factories:
        factory.cache_clear()
    yield
    for factory in factories:
        factory.cache_clear()


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with in-memory Redis (fakeredis)"
    )
    config.addinivalue_line("markers", "asyncio: Async test that requires event loop")


# Test execution configuration
def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        if inspect.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)
