"""图表数据点持久化模块."""

from chartcache.core.data.storage.base import ChartStorage
from chartcache.core.data.storage.duckdb import CHART_POINTS_TABLE, DuckDBChartStorage
from chartcache.core.data.storage.duckdb_factory import ChartDuckDBFactory, DuckDBFactoryConfig
from chartcache.core.data.storage.memory import InMemoryChartStorage
from chartcache.core.data.storage.models import ChartPointRecord, records_for

__all__ = [
    "CHART_POINTS_TABLE",
    "ChartDuckDBFactory",
    "ChartPointRecord",
    "ChartStorage",
    "DuckDBChartStorage",
    "DuckDBFactoryConfig",
    "InMemoryChartStorage",
    "records_for",
]
