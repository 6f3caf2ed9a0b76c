"""Service layer exports."""

from chartcache.core.services.instruments import InMemoryInstrumentResolver, InstrumentResolver

__all__ = ["InMemoryInstrumentResolver", "InstrumentResolver"]
