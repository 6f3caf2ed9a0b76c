"""数据库存储模型."""

from decimal import Decimal

from pydantic import BaseModel

from chartcache.core.models.chart import ChartKey, ChartPoint
from chartcache.core.models.market import RangeType


class ChartPointRecord(BaseModel):
    """图表数据点记录模型."""

    instrument_uid: str
    currency_code: str
    range_type: RangeType
    timestamp: float
    value: Decimal
    volume: Decimal | None = None

    @classmethod
    def from_point(cls, key: ChartKey, point: ChartPoint) -> "ChartPointRecord":
        """从ChartPoint转换为ChartPointRecord."""
        return cls(
            instrument_uid=key.instrument.uid,
            currency_code=key.currency_code,
            range_type=key.range_type,
            timestamp=point.timestamp,
            value=point.value,
            volume=point.volume,
        )

    def to_point(self) -> ChartPoint:
        """将ChartPointRecord转换为ChartPoint."""
        extra = {ChartPoint.VOLUME: self.volume} if self.volume is not None else {}
        return ChartPoint(timestamp=self.timestamp, value=self.value, extra=extra)

    def as_row(self) -> list[object]:
        """Row values in ``chart_points`` column order."""
        return [
            self.instrument_uid,
            self.currency_code,
            self.range_type.value,
            self.timestamp,
            self.value,
            self.volume,
        ]


def records_for(key: ChartKey, points: list[ChartPoint]) -> list[ChartPointRecord]:
    """Map points to records scoped to ``key``."""
    return [ChartPointRecord.from_point(key, point) for point in points]


__all__ = ["ChartPointRecord", "records_for"]
