"""图表数据提供商模块."""

from chartcache.core.data.providers.base import ChartProvider
from chartcache.core.data.providers.static import StaticChartProvider

__all__ = ["ChartProvider", "StaticChartProvider"]
