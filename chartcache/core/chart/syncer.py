"""图表同步器：驱动提供商获取并把结果交给管理器持久化与通知."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from chartcache.core.chart.manager import ChartManager
from chartcache.core.exceptions import NetworkError, ProviderError
from chartcache.core.logging import get_logger, log_context
from chartcache.core.models.chart import ChartInfo, ChartKey, ChartPoint
from chartcache.core.patterns.retry import ExponentialBackoffRetry, RetryConfig

logger = get_logger(__name__)


class ChartSyncer:
    """按缓存键同步图表数据，同一键的并发同步共享一个任务."""

    def __init__(
        self,
        manager: ChartManager,
        retry_config: RetryConfig | None = None,
        timeout: float | None = 30.0,
    ):
        self.manager = manager
        self.retry_config = retry_config or RetryConfig()
        self.timeout = timeout
        self._in_flight: dict[ChartKey, asyncio.Task[ChartInfo | None]] = {}

    def needs_sync(self, key: ChartKey, now: float | None = None) -> bool:
        """缓存为空、超出窗口或已过期时需要同步."""
        chart_info = self.manager.chart_info_for_key(key, now)
        return chart_info is None or chart_info.expired

    def in_flight(self, key: ChartKey) -> bool:
        return key in self._in_flight

    async def sync(self, key: ChartKey, force: bool = False) -> ChartInfo | None:
        """同步单个缓存键，返回同步后缓存中的图表.

        提供商错误不会抛出，而是转为 ``did_find_no_chart_info`` 通知。
        """
        if not force and not self.needs_sync(key):
            return self.manager.chart_info_for_key(key)

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.create_task(self._sync(key))
            self._in_flight[key] = task
            task.add_done_callback(lambda _: self._in_flight.pop(key, None))
        else:
            logger.debug("joining in-flight sync", **key.describe())

        # a cancelled waiter must not cancel the sync shared with other waiters
        return await asyncio.shield(task)

    async def sync_all(self, keys: Iterable[ChartKey], force: bool = False) -> dict[ChartKey, ChartInfo | None]:
        """并发同步多个缓存键."""
        unique_keys = list(dict.fromkeys(keys))
        results = await asyncio.gather(*(self.sync(key, force=force) for key in unique_keys))
        return dict(zip(unique_keys, results))

    async def _sync(self, key: ChartKey) -> ChartInfo | None:
        with log_context(instrument=key.instrument.uid, range_type=key.range_type.value):
            retry = ExponentialBackoffRetry(self.retry_config)
            try:
                points = await retry.execute(self._fetch, key)
            except ProviderError as e:
                logger.warning(
                    "chart sync failed",
                    error_code=e.error_code,
                    attempts=retry.attempt_count,
                    error=e.message,
                )
                self.manager.handle_no_chart_points(key)
                return None

            self.manager.handle_updated(points, key)
            return self.manager.chart_info_for_key(key)

    async def _fetch(self, key: ChartKey) -> list[ChartPoint]:
        provider = self.manager.provider
        try:
            return await asyncio.wait_for(provider.chart_points(key), timeout=self.timeout)
        except TimeoutError as e:
            raise NetworkError(
                f"Provider timed out after {self.timeout}s",
                provider.name,
                details=key.describe(),
            ) from e


__all__ = ["ChartSyncer"]
