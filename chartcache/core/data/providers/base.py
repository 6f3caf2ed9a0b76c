"""远程图表数据提供商接口."""

from abc import ABC, abstractmethod

from chartcache.core.models.chart import ChartKey, ChartPoint


class ChartProvider(ABC):
    """异步获取图表数据点的提供商抽象基类."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def chart_points(self, key: ChartKey) -> list[ChartPoint]:
        """获取缓存键对应的按时间升序排列的数据点.

        Raises:
            ProviderError: 提供商不可达或返回了无法解析的数据
        """
