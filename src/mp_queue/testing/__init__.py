"""Testing utilities – fakes for the record store, dispatchers, clock and metrics."""
from mp_queue.testing.fakes import (
    FailingDispatcher,
    FakeClock,
    FrozenClock,
    InMemoryMetrics,
    InMemoryRecordStore,
    InMemoryTransaction,
    RecordingDispatcher,
    ScriptedDispatcher,
)

__all__ = [
    "FailingDispatcher",
    "FakeClock",
    "FrozenClock",
    "InMemoryMetrics",
    "InMemoryRecordStore",
    "InMemoryTransaction",
    "RecordingDispatcher",
    "ScriptedDispatcher",
]
