"""Static chart provider serving pre-registered points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable

from chartcache.core.data.providers.base import ChartProvider
from chartcache.core.exceptions import ProviderError
from chartcache.core.models.chart import ChartKey, ChartPoint

ErrorFactory = Callable[[], ProviderError]


class StaticChartProvider(ChartProvider):
    """Provider returning points registered per key, for tests and offline runs."""

    def __init__(self, name: str = "static", delay: float = 0.0) -> None:
        super().__init__(name)
        self._points: dict[ChartKey, list[ChartPoint]] = {}
        self._failures: dict[ChartKey, ErrorFactory] = {}
        self._delay = delay
        self.calls: list[ChartKey] = []

    def register(self, key: ChartKey, points: Iterable[ChartPoint]) -> None:
        """Serve ``points`` for ``key``, sorted ascending by timestamp."""

        self._points[key] = sorted(points, key=lambda point: point.timestamp)
        self._failures.pop(key, None)

    def fail(self, key: ChartKey, error_factory: ErrorFactory | None = None) -> None:
        """Make every request for ``key`` raise a new error built by ``error_factory``."""

        self._failures[key] = error_factory or (
            lambda: ProviderError("Provider unavailable", self.name, details=key.describe())
        )

    async def chart_points(self, key: ChartKey) -> list[ChartPoint]:
        self.calls.append(key)
        if self._delay:
            await asyncio.sleep(self._delay)

        error_factory = self._failures.get(key)
        if error_factory is not None:
            raise error_factory()
        if key not in self._points:
            raise ProviderError("No chart points registered", self.name, details=key.describe())
        return list(self._points[key])


__all__ = ["StaticChartProvider"]
