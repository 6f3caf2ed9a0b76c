"""时间窗口策略.

Pure functions deriving, for each :class:`RangeType`, how long a window spans
and how old its last point may get before the chart counts as expired.
"""

from datetime import UTC, datetime

from chartcache.core.models.market import RangeType

MINUTE = 60.0
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY

_RANGE_INTERVALS: dict[RangeType, float] = {
    RangeType.TODAY: DAY,
    RangeType.DAY_1: DAY,
    RangeType.WEEK_1: WEEK,
    RangeType.WEEK_2: 2 * WEEK,
    RangeType.MONTH_1: 30 * DAY,
    RangeType.MONTH_3: 90 * DAY,
    RangeType.MONTH_6: 180 * DAY,
    RangeType.YEAR_1: 360 * DAY,
    RangeType.YEAR_2: 720 * DAY,
}

# 提供商返回数据点的间隔，过期阈值等于一个间隔
_POINT_INTERVALS: dict[RangeType, float] = {
    RangeType.TODAY: 30 * MINUTE,
    RangeType.DAY_1: 30 * MINUTE,
    RangeType.WEEK_1: 4 * HOUR,
    RangeType.WEEK_2: 8 * HOUR,
    RangeType.MONTH_1: DAY,
    RangeType.MONTH_3: DAY,
    RangeType.MONTH_6: 3 * DAY,
    RangeType.YEAR_1: WEEK,
    RangeType.YEAR_2: 2 * WEEK,
}


def range_interval(range_type: RangeType) -> float:
    """窗口跨度（秒）."""
    return _RANGE_INTERVALS[range_type]


def point_interval(range_type: RangeType) -> float:
    """数据点间隔（秒）."""
    return _POINT_INTERVALS[range_type]


def expiration_interval(range_type: RangeType) -> float:
    """最后一个数据点的最大允许年龄（秒）."""
    return point_interval(range_type)


def utc_start_of_today(now: float) -> float:
    """Midnight of the UTC calendar day containing ``now``."""
    moment = datetime.fromtimestamp(now, tz=UTC)
    midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.timestamp()


def window_bounds(range_type: RangeType, last_timestamp: float, now: float) -> tuple[float, float]:
    """Return ``(start, end)`` of the chart window.

    ``today`` always covers exactly the current UTC day. Every other range
    ends at ``now`` and starts one range interval before the last point.
    """
    if range_type is RangeType.TODAY:
        start = utc_start_of_today(now)
        return start, start + DAY

    start = last_timestamp - range_interval(range_type)
    # points stamped further in the future than a whole window
    return start, max(now, start)


__all__ = [
    "DAY",
    "HOUR",
    "MINUTE",
    "WEEK",
    "expiration_interval",
    "point_interval",
    "range_interval",
    "utc_start_of_today",
    "window_bounds",
]
