"""Builders wiring configuration into storage, retry policy and managers."""

from __future__ import annotations

from chartcache.core.chart.manager import ChartManager
from chartcache.core.chart.syncer import ChartSyncer
from chartcache.core.config.settings import ChartCacheConfig, ProviderConfig, StorageConfig
from chartcache.core.data.providers.base import ChartProvider
from chartcache.core.data.storage.base import ChartStorage
from chartcache.core.data.storage.duckdb import DuckDBChartStorage
from chartcache.core.data.storage.memory import InMemoryChartStorage
from chartcache.core.patterns.retry import RetryConfig
from chartcache.core.services.instruments import InstrumentResolver


def build_storage(config: StorageConfig) -> ChartStorage:
    """Return the point store selected by ``config.backend``."""

    if config.backend == "memory":
        return InMemoryChartStorage()
    return DuckDBChartStorage(db_path=config.db_path)


def build_retry_config(config: ProviderConfig) -> RetryConfig:
    """Translate provider settings into a retry policy."""

    return RetryConfig(
        max_attempts=max(1, config.max_retries),
        base_delay=config.backoff_factor,
        max_delay=config.max_backoff,
    )


def create_chart_syncer(
    config: ChartCacheConfig,
    resolver: InstrumentResolver,
    provider: ChartProvider,
    storage: ChartStorage | None = None,
) -> ChartSyncer:
    """Build a :class:`ChartSyncer` and its :class:`ChartManager` from configuration."""

    manager = ChartManager(resolver, storage or build_storage(config.storage), provider)
    return ChartSyncer(
        manager,
        retry_config=build_retry_config(config.providers),
        timeout=config.providers.timeout,
    )


__all__ = ["build_retry_config", "build_storage", "create_chart_syncer"]
