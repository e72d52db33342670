"""Application – PurgeSweeper: delete terminal messages past their retention deadline."""
from __future__ import annotations

import dataclasses
from datetime import datetime

from mp_queue.kernel.errors import BatchNotStartedError
from mp_queue.kernel.messaging import MessageQuery, QueueMessage, RecordCursor, RecordStore
from mp_queue.kernel.time import Clock, SystemClock
from mp_queue.observability.logging import get_logger
from mp_queue.observability.metrics import Metrics, NoopMetrics

logger = get_logger(__name__)


@dataclasses.dataclass
class SweepMetrics:
    removed: int = 0


@dataclasses.dataclass
class SweepContext:
    cursor: RecordCursor
    started_at: datetime
    metrics: SweepMetrics = dataclasses.field(default_factory=SweepMetrics)


class PurgeSweeper:
    """Same batch shape as :class:`~mp_queue.application.processor.MessageProcessor`,
    without a shard: every expired COMPLETE or FAILED record is deleted in its
    own transaction. Non-terminal records are never selected.
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Clock | None = None,
        *,
        metrics: Metrics | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or SystemClock()
        self._metrics = metrics or NoopMetrics()
        self._context: SweepContext | None = None

    async def begin_batch(self) -> int:
        now = self._clock.now()
        cursor = await self._store.query(MessageQuery.expired(now))
        self._context = SweepContext(cursor=cursor, started_at=now)
        logger.debug("queue.purge.started", expired=cursor.count)
        return cursor.count

    async def next(self) -> QueueMessage | None:
        return await self._require_context().cursor.next()

    async def handle(self, message: QueueMessage) -> None:
        ctx = self._require_context()
        try:
            async with self._store.transaction() as tx:
                await tx.delete(message)
        except Exception:  # noqa: BLE001
            logger.exception("queue.purge.delete_failed", message_id=message.id)
            return
        ctx.metrics.removed += 1

    async def end_batch(self) -> SweepMetrics:
        ctx = self._require_context()
        self._context = None
        self._metrics.counter("queue.messages.purged", "Expired records deleted").add(ctx.metrics.removed)
        logger.info(
            "queue.purge.completed",
            removed=ctx.metrics.removed,
            duration_ms=_elapsed_ms(ctx.started_at, self._clock.now()),
        )
        return ctx.metrics

    def _require_context(self) -> SweepContext:
        if self._context is None:
            raise BatchNotStartedError()
        return self._context


def _elapsed_ms(started_at: datetime, now: datetime) -> float:
    return round((now - started_at).total_seconds() * 1000, 3)


__all__ = ["PurgeSweeper", "SweepContext", "SweepMetrics"]
