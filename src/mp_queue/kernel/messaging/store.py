"""Kernel messaging – record store port, transactions and query cursor."""
from __future__ import annotations

import abc
import dataclasses
from contextvars import ContextVar, Token
from datetime import datetime
from typing import Any, AsyncIterator, Iterable, Iterator

from mp_queue.kernel.messaging.message import MessageStatus, QueueMessage

_CURRENT_TX: ContextVar["Transaction | None"] = ContextVar("_mp_queue_tx", default=None)


def current_transaction() -> "Transaction | None":
    """The innermost open transaction in this context, if any.

    Dispatchers use this to enlist their own writes in the isolated scope the
    processor opens around each dispatch.
    """
    return _CURRENT_TX.get()


@dataclasses.dataclass(frozen=True)
class MessageQuery:
    """Predicate plus fixed ``(priority, creation_time)`` ordering."""

    statuses: frozenset[MessageStatus]
    visible_at: datetime | None = None
    retained_before: datetime | None = None
    shard: int | None = None

    @classmethod
    def eligible(cls, shard: int, now: datetime) -> "MessageQuery":
        """Messages the processor may deliver on *shard* at *now*."""
        return cls(
            statuses=frozenset({MessageStatus.PENDING, MessageStatus.RETRY}),
            visible_at=now,
            shard=shard,
        )

    @classmethod
    def expired(cls, now: datetime) -> "MessageQuery":
        """Terminal messages whose retention deadline has passed."""
        return cls(
            statuses=frozenset({MessageStatus.COMPLETE, MessageStatus.FAILED}),
            retained_before=now,
        )

    def matches(self, message: QueueMessage) -> bool:
        if message.status not in self.statuses:
            return False
        if self.visible_at is not None and message.visibility_time > self.visible_at:
            return False
        if self.retained_before is not None and message.retain_till >= self.retained_before:
            return False
        if self.shard is not None and message.shard != self.shard:
            return False
        return True

    @staticmethod
    def sort_key(message: QueueMessage) -> tuple[int, datetime]:
        return (int(message.priority), message.creation_time)


class RecordCursor:
    """Forward-only cursor over a point-in-time query result."""

    def __init__(self, records: Iterable[QueueMessage], count: int) -> None:
        self._iter: Iterator[QueueMessage] = iter(records)
        self._count = count

    @property
    def count(self) -> int:
        return self._count

    async def next(self) -> QueueMessage | None:
        return next(self._iter, None)

    def __aiter__(self) -> AsyncIterator[QueueMessage]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[QueueMessage]:
        for record in self._iter:
            yield record


class Transaction(abc.ABC):
    """Port: atomic unit of record changes.

    Used as an async context manager: entering begins the transaction, a clean
    exit commits and an exception rolls back. ``commit``/``rollback`` may also
    be called explicitly, after which exit does nothing further.
    """

    def __init__(self) -> None:
        self._finished = False
        self._token: Token[Transaction | None] | None = None

    @abc.abstractmethod
    async def create(self, message: QueueMessage) -> None: ...

    @abc.abstractmethod
    async def update(self, message: QueueMessage) -> None: ...

    @abc.abstractmethod
    async def delete(self, message: QueueMessage) -> None: ...

    @abc.abstractmethod
    async def _commit(self) -> None: ...

    @abc.abstractmethod
    async def _rollback(self) -> None: ...

    async def begin(self) -> None:
        """Hook for adapters that need to open a session or connection."""

    async def close(self) -> None:
        """Hook for adapters that need to release resources."""

    @property
    def is_finished(self) -> bool:
        return self._finished

    async def commit(self) -> None:
        if self._finished:
            return
        self._finished = True
        await self._commit()

    async def rollback(self) -> None:
        if self._finished:
            return
        self._finished = True
        await self._rollback()

    async def __aenter__(self) -> "Transaction":
        await self.begin()
        self._token = _CURRENT_TX.set(self)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if self._token is not None:
            _CURRENT_TX.reset(self._token)
            self._token = None
        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
        finally:
            await self.close()


class RecordStore(abc.ABC):
    """Port: transactional persistence for queue messages."""

    @abc.abstractmethod
    def transaction(self) -> Transaction:
        """Return a new, not yet entered, transaction."""
        ...

    @abc.abstractmethod
    async def get(self, message_id: str) -> QueueMessage | None: ...

    @abc.abstractmethod
    async def query(self, query: MessageQuery) -> RecordCursor:
        """Snapshot the records matching *query*, ordered by priority then creation time."""
        ...


__all__ = [
    "MessageQuery",
    "RecordCursor",
    "RecordStore",
    "Transaction",
    "current_transaction",
]
