"""chartcache - 金融图表数据本地缓存

维护品种价格序列（图表数据点）的本地缓存，判断缓存图表是否新鲜、
已过期或缺失，并协调远程获取、持久化与更新通知。
"""

from chartcache.core.chart import (
    ChartEvent,
    ChartEventKind,
    ChartManager,
    ChartObserver,
    ChartSyncer,
    QueueChartObserver,
    evaluate,
)
from chartcache.core.config import ChartCacheConfig, ConfigManager
from chartcache.core.data.providers import ChartProvider, StaticChartProvider
from chartcache.core.data.storage import ChartStorage, DuckDBChartStorage, InMemoryChartStorage
from chartcache.core.exceptions import (
    ChartCacheError,
    InstrumentNotFoundError,
    NoChartDataError,
    ProviderError,
)
from chartcache.core.factory import create_chart_syncer
from chartcache.core.models import ChartInfo, ChartKey, ChartPoint, Instrument, RangeType
from chartcache.core.services import InMemoryInstrumentResolver, InstrumentResolver

__version__ = "0.1.0"

__all__ = [
    "ChartCacheConfig",
    "ChartCacheError",
    "ChartEvent",
    "ChartEventKind",
    "ChartInfo",
    "ChartKey",
    "ChartManager",
    "ChartObserver",
    "ChartPoint",
    "ChartProvider",
    "ChartStorage",
    "ChartSyncer",
    "ConfigManager",
    "DuckDBChartStorage",
    "InMemoryChartStorage",
    "InMemoryInstrumentResolver",
    "Instrument",
    "InstrumentNotFoundError",
    "InstrumentResolver",
    "NoChartDataError",
    "ProviderError",
    "QueueChartObserver",
    "RangeType",
    "StaticChartProvider",
    "create_chart_syncer",
    "evaluate",
]
