"""线程安全的内存图表存储实现."""

from collections.abc import Sequence
from threading import Lock

from chartcache.core.data.storage.base import ChartStorage
from chartcache.core.data.storage.models import ChartPointRecord, records_for
from chartcache.core.models.chart import ChartKey, ChartPoint
from chartcache.core.models.market import RangeType

_StorageId = tuple[str, str, str]


class InMemoryChartStorage(ChartStorage):
    """以缓存键为索引的内存存储."""

    name = "memory"

    def __init__(self) -> None:
        self._records: dict[_StorageId, dict[float, ChartPointRecord]] = {}
        self._lock = Lock()

    def chart_points(self, key: ChartKey) -> list[ChartPoint]:
        with self._lock:
            records = self._records.get(key.storage_id, {})
            return [records[ts].to_point() for ts in sorted(records)]

    def delete_chart_points(self, key: ChartKey) -> None:
        with self._lock:
            self._records.pop(key.storage_id, None)

    def save(self, records: Sequence[ChartPointRecord]) -> None:
        with self._lock:
            self._save(records)

    def replace_chart_points(self, key: ChartKey, points: Sequence[ChartPoint]) -> None:
        records = records_for(key, list(points))
        with self._lock:
            self._records.pop(key.storage_id, None)
            self._save(records)

    def _save(self, records: Sequence[ChartPointRecord]) -> None:
        for record in records:
            storage_id = (record.instrument_uid, record.currency_code, RangeType(record.range_type).value)
            self._records.setdefault(storage_id, {})[record.timestamp] = record

    def __len__(self) -> int:
        """获取存储的数据点总数."""
        with self._lock:
            return sum(len(records) for records in self._records.values())


__all__ = ["InMemoryChartStorage"]
