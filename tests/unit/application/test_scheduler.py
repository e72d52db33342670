"""Unit tests for queue jobs and batch draining."""

from __future__ import annotations

import asyncio
import random

import pytest

from mp_queue.application import (
    BatchMetrics,
    InMemoryDispatcherRegistry,
    Job,
    MessageProcessor,
    Publisher,
    PurgeSweeper,
    Sharder,
    SweepMetrics,
    drain,
    queue_jobs,
)
from mp_queue.config import QueueSettings
from mp_queue.testing import FakeClock, InMemoryRecordStore, RecordingDispatcher


async def _noop() -> None:
    return None


class TestJob:
    def test_valid_job(self) -> None:
        job = Job(id="j", name="J", handler=_noop, interval_seconds=5)
        assert job.enabled is True

    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError):
            Job(id="j", name="J", handler=_noop, interval_seconds=0)


class TestQueueJobs:
    def test_one_job_per_shard_plus_purge(self) -> None:
        settings = QueueSettings(num_shards=3, process_interval_seconds=10, purge_interval_seconds=600)
        jobs = queue_jobs(settings, lambda: None, lambda: None)  # type: ignore[arg-type, return-value]
        assert [j.id for j in jobs] == ["queue.process.0", "queue.process.1", "queue.process.2", "queue.purge"]
        assert [j.interval_seconds for j in jobs] == [10, 10, 10, 600]

    def test_jobs_drive_processor_and_sweeper(self) -> None:
        settings = QueueSettings(num_shards=2)
        clock = FakeClock()
        store = InMemoryRecordStore()
        dispatcher = RecordingDispatcher()
        registry = InMemoryDispatcherRegistry({"q": dispatcher})
        publisher = Publisher(store, Sharder(2, random.Random(5)), clock)
        for n in range(6):
            asyncio.run(publisher.publish("q", n, {"retention": "ALWAYS", "retentionDuration": 60}))

        jobs = {
            job.id: job
            for job in queue_jobs(
                settings,
                lambda: MessageProcessor(store, registry, clock),
                lambda: PurgeSweeper(store, clock),
            )
        }

        results = [asyncio.run(jobs[f"queue.process.{shard}"].handler()) for shard in range(2)]
        assert sum(r.processed for r in results) == 6
        assert dispatcher.call_count == 6

        clock.advance(minutes=2)
        assert asyncio.run(jobs["queue.purge"].handler()) == SweepMetrics(removed=6)
        assert len(store) == 0

    def test_each_run_gets_a_fresh_runner(self) -> None:
        store = InMemoryRecordStore()
        created: list[PurgeSweeper] = []

        def sweeper() -> PurgeSweeper:
            created.append(PurgeSweeper(store, FakeClock()))
            return created[-1]

        purge = queue_jobs(QueueSettings(num_shards=1), lambda: None, sweeper)[-1]  # type: ignore[arg-type, return-value]
        asyncio.run(purge.handler())
        asyncio.run(purge.handler())
        assert len(created) == 2
        assert created[0] is not created[1]


class TestDrain:
    def test_drain_processor(self) -> None:
        clock = FakeClock()
        store = InMemoryRecordStore()
        registry = InMemoryDispatcherRegistry({"q": RecordingDispatcher()})
        asyncio.run(Publisher(store, Sharder(1), clock).publish("q", 1))
        result = asyncio.run(drain(MessageProcessor(store, registry, clock), 0))
        assert result == BatchMetrics(processed=1, removed=1)


