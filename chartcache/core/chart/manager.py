"""图表缓存管理器.

Reads cached chart points and decides whether they can be served, fetches
fresh points from the remote provider, and persists provider results while
notifying registered observers.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence

from chartcache.core.chart.evaluator import evaluate
from chartcache.core.chart.observer import ChartObserver
from chartcache.core.data.providers.base import ChartProvider
from chartcache.core.data.storage.base import ChartStorage
from chartcache.core.exceptions import InstrumentNotFoundError, NoChartDataError
from chartcache.core.logging import get_logger, log_context
from chartcache.core.models.chart import ChartInfo, ChartKey, ChartPoint
from chartcache.core.models.market import RangeType
from chartcache.core.services.instruments import InstrumentResolver

logger = get_logger(__name__)

Clock = Callable[[], float]


class ChartManager:
    """图表缓存读取、远程获取与更新通知的协调器."""

    def __init__(
        self,
        resolver: InstrumentResolver,
        storage: ChartStorage,
        provider: ChartProvider,
        clock: Clock = time.time,
    ):
        self.resolver = resolver
        self.storage = storage
        self.provider = provider
        self.clock = clock
        self._observers: list[ChartObserver] = []

    # 观察者注册

    def add_observer(self, observer: ChartObserver) -> None:
        """注册观察者，重复注册无效."""
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: ChartObserver) -> None:
        """注销观察者，未注册时忽略."""
        if observer in self._observers:
            self._observers.remove(observer)

    @property
    def observers(self) -> tuple[ChartObserver, ...]:
        return tuple(self._observers)

    # 读取路径

    def _now(self, now: float | None) -> float:
        return self.clock() if now is None else now

    def _key(self, instrument_uid: str, currency_code: str, range_type: RangeType) -> ChartKey:
        instrument = self.resolver.resolve(instrument_uid)
        return ChartKey(instrument=instrument, currency_code=currency_code, range_type=range_type)

    def stored_chart_points(self, key: ChartKey) -> list[ChartPoint]:
        return self.storage.chart_points(key)

    def last_sync_timestamp(self, key: ChartKey) -> float | None:
        """最近一个已存储数据点的时间戳."""
        points = self.stored_chart_points(key)
        return points[-1].timestamp if points else None

    def chart_info_for_key(self, key: ChartKey, now: float | None = None) -> ChartInfo | None:
        """评估缓存键下已存储的数据点."""
        return evaluate(self.stored_chart_points(key), key, self._now(now))

    def chart_info(
        self,
        instrument_uid: str,
        currency_code: str,
        range_type: RangeType,
        now: float | None = None,
    ) -> ChartInfo | None:
        """从缓存同步读取图表.

        无法解析品种与没有缓存数据都返回 ``None``。
        """
        try:
            key = self._key(instrument_uid, currency_code, range_type)
        except InstrumentNotFoundError:
            logger.debug("instrument not resolved for cached chart", instrument=instrument_uid)
            return None

        chart_info = self.chart_info_for_key(key, now)
        logger.debug(
            "cached chart evaluated",
            found=chart_info is not None,
            expired=chart_info.expired if chart_info else None,
            **key.describe(),
        )
        return chart_info

    # 远程获取路径

    async def fetch_chart_info(
        self,
        instrument_uid: str,
        currency_code: str,
        range_type: RangeType,
        now: float | None = None,
    ) -> ChartInfo:
        """从提供商获取图表，不读写存储.

        Raises:
            NoChartDataError: 品种无法解析，或获取到的数据点不构成可用图表
            ProviderError: 提供商请求失败
        """
        try:
            key = self._key(instrument_uid, currency_code, range_type)
        except InstrumentNotFoundError as e:
            raise NoChartDataError(
                f"No chart data for unknown instrument '{instrument_uid}'",
                key_details={
                    "instrument": instrument_uid,
                    "currency_code": currency_code,
                    "range_type": range_type.value,
                },
            ) from e

        with log_context(instrument=key.instrument.uid, range_type=key.range_type.value):
            points = await self.provider.chart_points(key)
            chart_info = evaluate(points, key, self._now(now))
            if chart_info is None:
                logger.info("fetched points produced no chart", count=len(points), provider=self.provider.name)
                raise NoChartDataError(key_details=key.describe())
            return chart_info

    # 更新与通知路径

    def handle_updated(self, chart_points: Sequence[ChartPoint], key: ChartKey, now: float | None = None) -> None:
        """用获取到的数据点整体替换缓存，并通知观察者."""
        points = list(chart_points)
        with log_context(instrument=key.instrument.uid, range_type=key.range_type.value):
            self.storage.replace_chart_points(key, points)
            logger.info("chart points replaced", count=len(points), currency_code=key.currency_code)

            chart_info = evaluate(points, key, self._now(now))
            if chart_info is not None:
                self._notify_updated(chart_info, key)
            else:
                self._notify_not_found(key)

    def handle_no_chart_points(self, key: ChartKey) -> None:
        """提供商未能返回数据点时通知观察者，存储保持不变."""
        with log_context(instrument=key.instrument.uid, range_type=key.range_type.value):
            logger.info("no chart points received", currency_code=key.currency_code)
            self._notify_not_found(key)

    def _notify_updated(self, chart_info: ChartInfo, key: ChartKey) -> None:
        for observer in self.observers:
            try:
                observer.did_update(chart_info, key)
            except Exception as e:
                logger.warning("observer failed on update", observer=type(observer).__name__, error=str(e))

    def _notify_not_found(self, key: ChartKey) -> None:
        for observer in self.observers:
            try:
                observer.did_find_no_chart_info(key)
            except Exception as e:
                logger.warning("observer failed on not-found", observer=type(observer).__name__, error=str(e))


__all__ = ["ChartManager", "Clock"]
