"""Testing fakes – in-memory doubles for the queue ports."""
from mp_queue.kernel.time import FrozenClock
from mp_queue.testing.fakes.clock import FakeClock
from mp_queue.testing.fakes.dispatchers import (
    FailingDispatcher,
    RecordingDispatcher,
    ScriptedDispatcher,
)
from mp_queue.testing.fakes.metrics import InMemoryMetrics
from mp_queue.testing.fakes.store import InMemoryRecordStore, InMemoryTransaction

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
