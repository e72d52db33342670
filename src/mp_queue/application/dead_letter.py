"""Application – dead-letter routing for messages that exhausted their attempts."""
from __future__ import annotations

from typing import Any

from mp_queue.application.dispatch import invoke_isolated
from mp_queue.kernel.errors import DeadLetterDispatchError
from mp_queue.kernel.messaging import DEAD_LETTER, DispatcherRegistry, RecordStore, dead_letter_name
from mp_queue.kernel.types import Err, Ok
from mp_queue.observability.logging import get_logger

logger = get_logger(__name__)


class LoggingDeadLetterDispatcher:
    """Default generic ``deadletter`` dispatcher: log the failure and acknowledge."""

    async def invoke(self, queue_name: str, payload: Any) -> Ok:
        logger.error("queue.deadletter.received", queue=queue_name, payload=payload)
        return Ok()


class DeadLetterRouter:
    """Notify dead-letter dispatchers about a message that just became FAILED.

    The queue-specific ``deadletter.<queue>`` dispatcher is tried first. When
    it is missing, raises, or returns an error (``Err`` or ``None``) the
    generic ``deadletter`` dispatcher is notified instead. Dead-letter
    failures are logged and never propagate.

    :meth:`route` returns ``True`` only when the queue-specific dispatcher
    acknowledged the message with ``Ok``; callers use that to decide whether
    a FAILED record may be deleted.
    """

    def __init__(self, store: RecordStore, registry: DispatcherRegistry) -> None:
        self._store = store
        self._registry = registry

    async def route(self, queue_name: str, payload: Any) -> bool:
        specific = dead_letter_name(queue_name)
        if self._registry.has_handler(specific):
            try:
                result = await invoke_isolated(self._store, self._registry, specific, queue_name, payload)
            except Exception as exc:  # noqa: BLE001
                self._log_failure(specific, queue_name, exc)
                result = Err(DeadLetterDispatchError.default_code, str(exc))

            if isinstance(result, Ok):
                return True
            if not (result is None or isinstance(result, Err)):
                logger.warning(
                    "queue.deadletter.nonconforming",
                    dispatcher=specific,
                    queue=queue_name,
                    result_type=type(result).__name__,
                )
                return False

        await self._notify_generic(queue_name, payload)
        return False

    async def _notify_generic(self, queue_name: str, payload: Any) -> None:
        if not self._registry.has_handler(DEAD_LETTER):
            logger.warning("queue.deadletter.missing", queue=queue_name)
            return
        try:
            await invoke_isolated(self._store, self._registry, DEAD_LETTER, queue_name, payload)
        except Exception as exc:  # noqa: BLE001
            self._log_failure(DEAD_LETTER, queue_name, exc)

    @staticmethod
    def _log_failure(dispatcher: str, queue_name: str, exc: Exception) -> None:
        error = DeadLetterDispatchError(
            f"Dead-letter dispatcher {dispatcher!r} failed",
            detail=str(exc),
            cause=exc,
        )
        logger.error(
            "queue.deadletter.failed",
            dispatcher=dispatcher,
            queue=queue_name,
            error=error.to_dict(),
            exc_info=exc,
        )


__all__ = ["DeadLetterRouter", "LoggingDeadLetterDispatcher"]
