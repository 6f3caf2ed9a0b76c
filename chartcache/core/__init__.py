"""chartcache core package."""

from chartcache.core.chart import ChartManager, ChartSyncer, evaluate
from chartcache.core.models import ChartInfo, ChartKey, ChartPoint, Instrument, RangeType

__all__ = [
    "ChartInfo",
    "ChartKey",
    "ChartManager",
    "ChartPoint",
    "ChartSyncer",
    "Instrument",
    "RangeType",
    "evaluate",
]
