"""Application – StatusReader: read-only view of a message's current state."""
from __future__ import annotations

import json

from mp_queue.kernel.errors import MessageNotFoundError
from mp_queue.kernel.messaging import LastResult, MessageInfo, RecordStore
from mp_queue.observability.logging import get_logger

logger = get_logger(__name__)


class StatusReader:
    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def get_status(self, message_id: str) -> MessageInfo | None:
        """Return the message's status and last result, or ``None`` if it does not exist.

        Deleted messages (completed with non-ALWAYS retention, purged, ...) are
        reported as absent.
        """
        record = await self._store.get(message_id)
        if record is None:
            return None
        return MessageInfo(
            id=record.id,
            status=record.status,
            last_result=_parse_last_result(record.id, record.last_result),
            record=record,
        )

    async def get_status_or_raise(self, message_id: str) -> MessageInfo:
        info = await self.get_status(message_id)
        if info is None:
            raise MessageNotFoundError(message_id)
        return info


def _parse_last_result(message_id: str, raw: str | None) -> LastResult:
    if not raw:
        return LastResult.empty()
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("last_result is not a JSON object")
        return LastResult.from_dict(data)
    except (TypeError, ValueError) as exc:
        logger.warning("queue.result.unreadable", message_id=message_id, error=str(exc))
        return LastResult.empty()


__all__ = ["StatusReader"]
