"""Market-related enums and types."""

from enum import Enum


class RangeType(str, Enum):
    """图表时间范围枚举."""

    TODAY = "today"
    DAY_1 = "1d"
    WEEK_1 = "1w"
    WEEK_2 = "2w"
    MONTH_1 = "1m"
    MONTH_3 = "3m"
    MONTH_6 = "6m"
    YEAR_1 = "1y"
    YEAR_2 = "2y"
