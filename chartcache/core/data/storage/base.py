"""图表数据点存储接口."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from chartcache.core.data.storage.models import ChartPointRecord, records_for
from chartcache.core.models.chart import ChartKey, ChartPoint


class ChartStorage(ABC):
    """按缓存键存取有序数据点的存储抽象基类."""

    name: str = "storage"

    @abstractmethod
    def chart_points(self, key: ChartKey) -> list[ChartPoint]:
        """读取缓存键下按时间升序的数据点，没有数据时返回空列表."""

    @abstractmethod
    def delete_chart_points(self, key: ChartKey) -> None:
        """删除缓存键下的全部数据点."""

    @abstractmethod
    def save(self, records: Sequence[ChartPointRecord]) -> None:
        """保存数据点记录."""

    def replace_chart_points(self, key: ChartKey, points: Sequence[ChartPoint]) -> None:
        """用新数据点整体替换缓存键下的数据（先删后插）."""
        self.delete_chart_points(key)
        self.save(records_for(key, list(points)))

    def close(self) -> None:
        """释放存储资源."""
