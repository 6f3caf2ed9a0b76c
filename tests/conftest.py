"""Pytest configuration and shared fixtures for the chartcache test suite."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from chartcache.core.chart.manager import ChartManager
from chartcache.core.data.providers import StaticChartProvider
from chartcache.core.data.storage import DuckDBChartStorage, InMemoryChartStorage
from chartcache.core.models import ChartKey, ChartPoint, Instrument, RangeType
from chartcache.core.services import InMemoryInstrumentResolver

# 2024-01-15T18:00:00Z
NOW = datetime(2024, 1, 15, 18, 0, tzinfo=UTC).timestamp()


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--chartcache-run-integration",
        action="store_true",
        default=False,
        help="Run chartcache integration tests that require external services.",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: marks chartcache tests requiring network or external services",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--chartcache-run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="integration tests require --chartcache-run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


def make_points(timestamps: Sequence[float], start_value: str = "100") -> list[ChartPoint]:
    """Build ascending points with increasing values and a volume extra."""

    base = Decimal(start_value)
    return [
        ChartPoint(
            timestamp=timestamp,
            value=base + index,
            extra={ChartPoint.VOLUME: Decimal(1000 + index)},
        )
        for index, timestamp in enumerate(sorted(timestamps))
    ]


@pytest.fixture
def points_at() -> Callable[..., list[ChartPoint]]:
    return make_points


@pytest.fixture
def now() -> float:
    return NOW


@pytest.fixture
def bitcoin() -> Instrument:
    return Instrument(uid="bitcoin", name="Bitcoin", code="BTC", decimals=8)


@pytest.fixture
def ethereum() -> Instrument:
    return Instrument(uid="ethereum", name="Ethereum", code="ETH", decimals=18)


@pytest.fixture
def key_for(bitcoin: Instrument) -> Callable[..., ChartKey]:
    def _key_for(range_type: RangeType = RangeType.WEEK_1, currency_code: str = "USD", instrument: Instrument | None = None) -> ChartKey:
        return ChartKey(instrument=instrument or bitcoin, currency_code=currency_code, range_type=range_type)

    return _key_for


@pytest.fixture
def resolver(bitcoin: Instrument, ethereum: Instrument) -> InMemoryInstrumentResolver:
    return InMemoryInstrumentResolver([bitcoin, ethereum])


@pytest.fixture
def memory_storage() -> InMemoryChartStorage:
    return InMemoryChartStorage()


@pytest.fixture
def duckdb_storage():
    storage = DuckDBChartStorage(":memory:")
    yield storage
    storage.close()


@pytest.fixture
def provider() -> StaticChartProvider:
    return StaticChartProvider()


@pytest.fixture
def manager(resolver, memory_storage, provider, now) -> ChartManager:
    return ChartManager(resolver, memory_storage, provider, clock=lambda: now)


class RecordingObserver:
    """Observer collecting every notification it receives."""

    def __init__(self) -> None:
        self.updated: list[tuple[object, ChartKey]] = []
        self.not_found: list[ChartKey] = []

    def did_update(self, chart_info, key: ChartKey) -> None:
        self.updated.append((chart_info, key))

    def did_find_no_chart_info(self, key: ChartKey) -> None:
        self.not_found.append(key)


@pytest.fixture
def observer(manager: ChartManager) -> RecordingObserver:
    recording = RecordingObserver()
    manager.add_observer(recording)
    return recording
