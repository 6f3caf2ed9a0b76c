"""图表更新通知通道."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from chartcache.core.models.chart import ChartInfo, ChartKey


@runtime_checkable
class ChartObserver(Protocol):
    """Listener notified when a chart for a key is refreshed."""

    def did_update(self, chart_info: ChartInfo, key: ChartKey) -> None: ...

    def did_find_no_chart_info(self, key: ChartKey) -> None: ...


class ChartEventKind(str, Enum):
    """通知类型."""

    UPDATED = "updated"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ChartEvent:
    """推送给观察者队列的事件."""

    kind: ChartEventKind
    key: ChartKey
    chart_info: ChartInfo | None = None


class QueueChartObserver:
    """Observer owning an ``asyncio.Queue``; the manager only writes into it."""

    def __init__(self, maxsize: int = 0) -> None:
        self.queue: asyncio.Queue[ChartEvent] = asyncio.Queue(maxsize=maxsize)

    def did_update(self, chart_info: ChartInfo, key: ChartKey) -> None:
        self.queue.put_nowait(ChartEvent(ChartEventKind.UPDATED, key, chart_info))

    def did_find_no_chart_info(self, key: ChartKey) -> None:
        self.queue.put_nowait(ChartEvent(ChartEventKind.NOT_FOUND, key))

    async def get(self) -> ChartEvent:
        """等待下一个事件."""
        return await self.queue.get()

    def empty(self) -> bool:
        return self.queue.empty()


__all__ = ["ChartEvent", "ChartEventKind", "ChartObserver", "QueueChartObserver"]
