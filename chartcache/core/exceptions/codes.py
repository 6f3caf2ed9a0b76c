"""标准化错误代码."""

from enum import Enum


class ErrorCode(str, Enum):
    """chartcache错误代码枚举."""

    GENERAL_ERROR = "GENERAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # 品种解析
    INSTRUMENT_NOT_FOUND = "INSTRUMENT_NOT_FOUND"

    # 图表数据
    NO_CHART_DATA = "NO_CHART_DATA"

    # 数据提供商
    PROVIDER_ERROR = "PROVIDER_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"

    # 存储
    STORAGE_ERROR = "STORAGE_ERROR"
