"""图表新鲜度评估与同步."""

from chartcache.core.chart.evaluator import evaluate
from chartcache.core.chart.manager import ChartManager
from chartcache.core.chart.observer import ChartEvent, ChartEventKind, ChartObserver, QueueChartObserver
from chartcache.core.chart.policy import (
    expiration_interval,
    point_interval,
    range_interval,
    utc_start_of_today,
    window_bounds,
)
from chartcache.core.chart.syncer import ChartSyncer

__all__ = [
    "ChartEvent",
    "ChartEventKind",
    "ChartManager",
    "ChartObserver",
    "ChartSyncer",
    "QueueChartObserver",
    "evaluate",
    "expiration_interval",
    "point_interval",
    "range_interval",
    "utc_start_of_today",
    "window_bounds",
]
