"""Application – MessageProcessor: deliver eligible messages of one shard.

A batch is driven by the scheduler through four calls::

    count = await processor.begin_batch(shard)
    while (message := await processor.next()) is not None:
        await processor.handle(message)
    metrics = await processor.end_batch()

``handle`` runs the per-message state machine. The dispatcher runs in its
own transaction; the resulting state change (status, attempts, backoff,
last result, or deletion) is written in a second one. Nothing raised while
handling a message escapes: every failure ends up in the message state, the
batch metrics, or the log.
"""
from __future__ import annotations

import dataclasses
import json
from datetime import UTC, datetime
from typing import Any

from mp_queue.application.backoff import ExponentialBackoff
from mp_queue.application.classification import (
    DeliveryOutcome,
    classify_exception,
    classify_no_subscriber,
    classify_result,
)
from mp_queue.application.dead_letter import DeadLetterRouter
from mp_queue.application.dispatch import invoke_isolated
from mp_queue.application.scheduler.job import drain
from mp_queue.config.settings import QueueSettings
from mp_queue.kernel.errors import BatchNotStartedError, ResultSerializationError
from mp_queue.kernel.messaging import (
    DispatcherRegistry,
    LastResult,
    MessageQuery,
    MessageStatus,
    QueueMessage,
    RecordCursor,
    RecordStore,
    Retention,
)
from mp_queue.kernel.time import Clock, SystemClock
from mp_queue.observability.logging import get_logger
from mp_queue.observability.metrics import Metrics, NoopMetrics

logger = get_logger(__name__)

_FAR_FUTURE = datetime.max.replace(tzinfo=UTC)


@dataclasses.dataclass
class BatchMetrics:
    processed: int = 0
    retried: int = 0
    errored: int = 0
    removed: int = 0

    def as_dict(self) -> dict[str, int]:
        return dataclasses.asdict(self)


@dataclasses.dataclass
class BatchContext:
    """State of one open batch."""

    shard: int
    cursor: RecordCursor
    started_at: datetime
    metrics: BatchMetrics = dataclasses.field(default_factory=BatchMetrics)

    @property
    def eligible(self) -> int:
        return self.cursor.count


class MessageProcessor:
    """Delivers messages of one shard per batch.

    One instance serves one batch at a time; run shards concurrently with
    one processor per shard.
    """

    def __init__(
        self,
        store: RecordStore,
        registry: DispatcherRegistry,
        clock: Clock | None = None,
        *,
        backoff: ExponentialBackoff | None = None,
        metrics: Metrics | None = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._clock = clock or SystemClock()
        self._backoff = backoff or ExponentialBackoff()
        self._metrics = metrics or NoopMetrics()
        self._dead_letters = DeadLetterRouter(store, registry)
        self._context: BatchContext | None = None

    @classmethod
    def from_settings(
        cls,
        store: RecordStore,
        registry: DispatcherRegistry,
        settings: QueueSettings,
        clock: Clock | None = None,
        metrics: Metrics | None = None,
    ) -> "MessageProcessor":
        return cls(
            store,
            registry,
            clock,
            backoff=ExponentialBackoff(settings.backoff_base_seconds),
            metrics=metrics,
        )

    @property
    def context(self) -> BatchContext | None:
        return self._context

    # ------------------------------------------------------------------
    # Batch lifecycle
    # ------------------------------------------------------------------

    async def begin_batch(self, shard: int) -> int:
        """Select the eligible messages of *shard* and return how many there are."""
        now = self._clock.now()
        cursor = await self._store.query(MessageQuery.eligible(shard, now))
        self._context = BatchContext(shard=shard, cursor=cursor, started_at=now)
        self._metrics.gauge("queue.messages.eligible", "Messages selected for delivery").set(
            cursor.count, {"shard": str(shard)}
        )
        logger.debug("queue.batch.started", shard=shard, eligible=cursor.count)
        return cursor.count

    async def next(self) -> QueueMessage | None:
        return await self._require_context().cursor.next()

    async def handle(self, message: QueueMessage) -> None:
        ctx = self._require_context()
        try:
            await self._process(ctx, message)
        except Exception:  # noqa: BLE001
            ctx.metrics.errored += 1
            logger.exception(
                "queue.message.handling_failed",
                message_id=message.id,
                queue=message.queue_name,
                shard=ctx.shard,
            )

    async def end_batch(self) -> BatchMetrics:
        ctx = self._require_context()
        self._context = None
        labels = {"shard": str(ctx.shard)}
        for name, value in ctx.metrics.as_dict().items():
            self._metrics.counter(f"queue.messages.{name}").add(value, labels)
        logger.info(
            "queue.batch.completed",
            shard=ctx.shard,
            eligible=ctx.eligible,
            duration_ms=round((self._clock.now() - ctx.started_at).total_seconds() * 1000, 3),
            **ctx.metrics.as_dict(),
        )
        return ctx.metrics

    async def run_batch(self, shard: int) -> BatchMetrics:
        """Convenience: begin, handle every eligible message, end."""
        return await drain(self, shard)

    def _require_context(self) -> BatchContext:
        if self._context is None:
            raise BatchNotStartedError()
        return self._context

    # ------------------------------------------------------------------
    # Per-message state machine
    # ------------------------------------------------------------------

    async def _process(self, ctx: BatchContext, message: QueueMessage) -> None:
        was_retry = message.status is MessageStatus.RETRY
        outcome, payload = await self._deliver(message)

        updated = message.copy()
        updated.last_result = self._serialize_result(message.id, outcome.result)
        updated.remaining_delivery_attempts -= 1

        if outcome.success:
            updated.status = MessageStatus.COMPLETE
        else:
            updated.error_count += 1
            if updated.remaining_delivery_attempts <= 0:
                updated.status = MessageStatus.FAILED
                logger.error(
                    "queue.message.failed",
                    message_id=message.id,
                    queue=message.queue_name,
                    code=outcome.result.code,
                    error_count=updated.error_count,
                )
            else:
                updated.status = MessageStatus.RETRY
                updated.visibility_time = self._next_visibility(updated.error_count)
                logger.warning(
                    "queue.message.retry_scheduled",
                    message_id=message.id,
                    queue=message.queue_name,
                    code=outcome.result.code,
                    remaining_attempts=updated.remaining_delivery_attempts,
                    visible_at=updated.visibility_time.isoformat(),
                )

        acknowledged = False
        if updated.status is MessageStatus.FAILED:
            acknowledged = await self._dead_letters.route(message.queue_name, payload)

        remove = self._should_remove(updated, acknowledged)
        async with self._store.transaction() as tx:
            if remove:
                await tx.delete(updated)
            else:
                await tx.update(updated)

        if was_retry:
            ctx.metrics.retried += 1
        if outcome.success:
            ctx.metrics.processed += 1
        else:
            ctx.metrics.errored += 1
        if remove:
            ctx.metrics.removed += 1
            logger.debug("queue.message.removed", message_id=message.id, status=updated.status.value)

    async def _deliver(self, message: QueueMessage) -> tuple[DeliveryOutcome, Any]:
        try:
            payload = json.loads(message.payload)
        except (TypeError, ValueError) as exc:
            return classify_exception(exc), message.payload

        if not self._registry.has_handler(message.queue_name):
            logger.warning("queue.message.no_subscriber", message_id=message.id, queue=message.queue_name)
            return classify_no_subscriber(message.queue_name), payload

        try:
            result = await invoke_isolated(self._store, self._registry, message.queue_name, payload)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "queue.message.dispatch_raised",
                message_id=message.id,
                queue=message.queue_name,
                error=str(exc),
            )
            return classify_exception(exc), payload
        return classify_result(result, queue_name=message.queue_name), payload

    def _serialize_result(self, message_id: str, result: LastResult) -> str:
        try:
            return json.dumps(result.to_dict(), indent=2)
        except (TypeError, ValueError) as exc:
            error = ResultSerializationError("Cannot serialize delivery result", cause=exc)
            logger.warning("queue.result.unserializable", message_id=message_id, error=error.to_dict())
            return json.dumps(LastResult.empty().to_dict(), indent=2)

    def _next_visibility(self, error_count: int) -> datetime:
        try:
            return self._clock.now() + self._backoff.compute(error_count)
        except OverflowError:
            return _FAR_FUTURE

    @staticmethod
    def _should_remove(message: QueueMessage, acknowledged: bool) -> bool:
        if message.status is MessageStatus.COMPLETE:
            return message.retention is not Retention.ALWAYS
        if message.status is MessageStatus.FAILED:
            return message.retention is Retention.NEVER or acknowledged
        return False


__all__ = ["BatchContext", "BatchMetrics", "MessageProcessor"]
