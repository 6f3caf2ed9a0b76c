"""图表数据模型."""

from decimal import Decimal
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from .market import RangeType


class Instrument(BaseModel):
    """规范化的品种信息."""

    model_config = ConfigDict(frozen=True)

    uid: str
    name: str
    code: str
    decimals: int | None = None


class ChartKey(BaseModel):
    """图表缓存键：品种 + 计价货币 + 时间范围."""

    model_config = ConfigDict(frozen=True)

    instrument: Instrument
    currency_code: str
    range_type: RangeType

    @property
    def storage_id(self) -> tuple[str, str, str]:
        """Identity triple used by point stores."""
        return (self.instrument.uid, self.currency_code, self.range_type.value)

    def describe(self) -> dict[str, str]:
        """Flat description used in logs and error details."""
        return {
            "instrument": self.instrument.uid,
            "currency_code": self.currency_code,
            "range_type": self.range_type.value,
        }


class ChartPoint(BaseModel):
    """单个图表数据点."""

    VOLUME: ClassVar[str] = "volume"

    model_config = ConfigDict(frozen=True)

    timestamp: float
    value: Decimal
    extra: dict[str, Decimal] = Field(default_factory=dict)

    @property
    def volume(self) -> Decimal | None:
        return self.extra.get(self.VOLUME)

    @field_serializer("value", when_used="json")
    def serialize_value(self, value: Decimal) -> str:
        """Serialize Decimal to string."""
        return str(value)


class ChartInfo(BaseModel):
    """由新鲜度评估得出的图表视图，不持久化."""

    model_config = ConfigDict(frozen=True)

    points: tuple[ChartPoint, ...]
    start_timestamp: float
    end_timestamp: float
    expired: bool

    @model_validator(mode="after")
    def _check_bounds(self) -> "ChartInfo":
        if not self.points:
            raise ValueError("ChartInfo requires at least one point")
        if self.start_timestamp > self.end_timestamp:
            raise ValueError("start_timestamp must not exceed end_timestamp")
        return self

    @property
    def last_point(self) -> ChartPoint:
        return self.points[-1]
