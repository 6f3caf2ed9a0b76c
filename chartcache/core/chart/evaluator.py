"""图表新鲜度评估."""

from collections.abc import Sequence

from chartcache.core.chart.policy import expiration_interval, range_interval, window_bounds
from chartcache.core.models.chart import ChartInfo, ChartKey, ChartPoint


def evaluate(points: Sequence[ChartPoint], key: ChartKey, now: float) -> ChartInfo | None:
    """根据数据点和缓存键判断图表是否可用.

    Args:
        points: 按时间升序排列的数据点
        key: 图表缓存键
        now: 当前时间戳（秒）

    Returns:
        ``ChartInfo``（可能带 ``expired`` 标记），最后一个数据点早于整个窗口时返回 ``None``
    """
    if not points:
        return None

    last_point = points[-1]
    last_point_age = now - last_point.timestamp
    start_timestamp, end_timestamp = window_bounds(key.range_type, last_point.timestamp, now)

    # window check first: a point older than the whole window means no data
    if last_point_age >= range_interval(key.range_type):
        return None

    return ChartInfo(
        points=tuple(points),
        start_timestamp=start_timestamp,
        end_timestamp=end_timestamp,
        expired=last_point_age >= expiration_interval(key.range_type),
    )
