"""Data models module."""

from chartcache.core.models.chart import ChartInfo, ChartKey, ChartPoint, Instrument
from chartcache.core.models.market import RangeType

__all__ = [
    "ChartInfo",
    "ChartKey",
    "ChartPoint",
    "Instrument",
    "RangeType",
]
