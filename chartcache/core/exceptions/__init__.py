"""Exception handling module."""

from chartcache.core.exceptions.base import (
    ChartCacheError,
    ConfigurationError,
    InstrumentNotFoundError,
    NetworkError,
    NoChartDataError,
    ProviderError,
    StorageError,
)
from chartcache.core.exceptions.codes import ErrorCode

__all__ = [
    "ChartCacheError",
    "ConfigurationError",
    "ErrorCode",
    "InstrumentNotFoundError",
    "NetworkError",
    "NoChartDataError",
    "ProviderError",
    "StorageError",
]
