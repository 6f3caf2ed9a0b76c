"""品种解析服务."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from threading import Lock

from chartcache.core.exceptions import InstrumentNotFoundError
from chartcache.core.models.chart import Instrument


class InstrumentResolver(ABC):
    """将不透明的品种标识映射为规范化品种记录."""

    @abstractmethod
    def resolve(self, uid: str) -> Instrument:
        """解析单个品种.

        Raises:
            InstrumentNotFoundError: 标识无法映射
        """

    def resolve_many(self, uids: Sequence[str]) -> list[Instrument]:
        """批量解析，跳过无法解析的标识."""
        instruments: list[Instrument] = []
        for uid in uids:
            try:
                instruments.append(self.resolve(uid))
            except InstrumentNotFoundError:
                continue
        return instruments


class InMemoryInstrumentResolver(InstrumentResolver):
    """基于内存注册表的品种解析器."""

    def __init__(self, instruments: Iterable[Instrument] = ()) -> None:
        self._lock = Lock()
        self._instruments: dict[str, Instrument] = {}
        for instrument in instruments:
            self.register(instrument)

    def register(self, instrument: Instrument) -> None:
        with self._lock:
            self._instruments[instrument.uid] = instrument

    def resolve(self, uid: str) -> Instrument:
        with self._lock:
            instrument = self._instruments.get(uid)
        if instrument is None:
            raise InstrumentNotFoundError(uid)
        return instrument

    def __len__(self) -> int:
        with self._lock:
            return len(self._instruments)


__all__ = ["InMemoryInstrumentResolver", "InstrumentResolver"]
