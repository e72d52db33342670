"""Application scheduler – Job dataclass and queue job builders."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol

from mp_queue.config.settings import QueueSettings
from mp_queue.kernel.messaging import QueueMessage

__all__ = ["BatchRunner", "Job", "drain", "queue_jobs"]


@dataclass
class Job:
    """A periodic job: *handler* is awaited every *interval_seconds*."""

    id: str
    name: str
    handler: Callable[[], Awaitable[Any]]
    interval_seconds: int
    enabled: bool = True

    def __post_init__(self) -> None:
        if self.interval_seconds < 1:
            raise ValueError("Job 'interval_seconds' must be >= 1")


class BatchRunner(Protocol):
    """Anything following the begin/next/handle/end batch contract."""

    async def begin_batch(self, *args: Any) -> int: ...
    async def next(self) -> QueueMessage | None: ...
    async def handle(self, message: QueueMessage) -> None: ...
    async def end_batch(self) -> Any: ...


async def drain(runner: BatchRunner, *args: Any) -> Any:
    """Run one full batch on *runner* and return its ``end_batch()`` metrics."""
    await runner.begin_batch(*args)
    while True:
        message = await runner.next()
        if message is None:
            break
        await runner.handle(message)
    return await runner.end_batch()


def queue_jobs(
    settings: QueueSettings,
    processor_factory: Callable[[], BatchRunner],
    sweeper_factory: Callable[[], BatchRunner],
) -> list[Job]:
    """One processing job per shard plus one purge job.

    Each run gets a fresh runner from its factory, so overlapping runs never
    share batch state.
    """

    def _process(shard: int) -> Callable[[], Awaitable[Any]]:
        async def handler() -> Any:
            return await drain(processor_factory(), shard)

        return handler

    async def _purge() -> Any:
        return await drain(sweeper_factory())

    jobs = [
        Job(
            id=f"queue.process.{shard}",
            name=f"Process queue shard {shard}",
            handler=_process(shard),
            interval_seconds=settings.process_interval_seconds,
        )
        for shard in range(settings.num_shards)
    ]
    jobs.append(
        Job(
            id="queue.purge",
            name="Purge expired queue messages",
            handler=_purge,
            interval_seconds=settings.purge_interval_seconds,
        )
    )
    return jobs
