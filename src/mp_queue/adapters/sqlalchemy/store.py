"""SQLAlchemy adapter – SqlAlchemyRecordStore and SqlAlchemyTransaction."""
from __future__ import annotations

from typing import Any, Callable

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mp_queue.adapters.sqlalchemy.models import QueueMessageModel, message_to_row, row_to_message
from mp_queue.adapters.sqlalchemy.session import SqlAlchemySessionFactory
from mp_queue.config.settings import QueueSettings
from mp_queue.kernel.errors import StoreError
from mp_queue.kernel.messaging import MessageQuery, QueueMessage, RecordCursor, RecordStore, Transaction

SessionFactory = Callable[[], AsyncSession]


class SqlAlchemyTransaction(Transaction):
    """One ``AsyncSession`` per transaction.

    Dispatchers running inside the processor's dispatch scope can reach the
    session through ``current_transaction().session`` to enlist their own
    writes.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        super().__init__()
        self._factory = session_factory
        self.session: Any = None

    async def begin(self) -> None:
        self.session = self._factory()

    async def close(self) -> None:
        if self.session is not None:
            await self.session.close()

    async def create(self, message: QueueMessage) -> None:
        self.session.add(QueueMessageModel(**message_to_row(message)))
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise StoreError(f"Cannot create message '{message.id}'", cause=exc) from exc

    async def update(self, message: QueueMessage) -> None:
        values = message_to_row(message)
        values.pop("id")
        result = await self._execute(
            update(QueueMessageModel).where(QueueMessageModel.id == message.id).values(**values)
        )
        if result.rowcount == 0:
            raise StoreError(f"Message '{message.id}' does not exist")

    async def delete(self, message: QueueMessage) -> None:
        result = await self._execute(delete(QueueMessageModel).where(QueueMessageModel.id == message.id))
        if result.rowcount == 0:
            raise StoreError(f"Message '{message.id}' does not exist")

    async def _execute(self, statement: Any) -> Any:
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as exc:
            raise StoreError("Record store statement failed", cause=exc) from exc

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise StoreError("Commit failed", cause=exc) from exc

    async def _rollback(self) -> None:
        await self.session.rollback()


class SqlAlchemyRecordStore(RecordStore):
    """Durable record store on any async SQLAlchemy engine.

    Usage::

        factory = SqlAlchemySessionFactory("sqlite+aiosqlite:///queue.db")
        await factory.create_schema()
        store = SqlAlchemyRecordStore(factory)
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self._factory = session_factory

    @classmethod
    def from_settings(cls, settings: QueueSettings, **engine_kwargs: Any) -> "SqlAlchemyRecordStore":
        return cls(SqlAlchemySessionFactory(settings.database_url, **engine_kwargs))

    @property
    def session_factory(self) -> SessionFactory:
        return self._factory

    def transaction(self) -> SqlAlchemyTransaction:
        return SqlAlchemyTransaction(self._factory)

    async def get(self, message_id: str) -> QueueMessage | None:
        async with self._factory() as session:
            row = await session.get(QueueMessageModel, message_id)
            return row_to_message(row) if row is not None else None

    async def query(self, query: MessageQuery) -> RecordCursor:
        model = QueueMessageModel
        stmt = select(model).where(model.status.in_(sorted(s.value for s in query.statuses)))
        if query.visible_at is not None:
            stmt = stmt.where(model.visibility_time <= query.visible_at)
        if query.retained_before is not None:
            stmt = stmt.where(model.retain_till < query.retained_before)
        if query.shard is not None:
            stmt = stmt.where(model.shard == query.shard)
        stmt = stmt.order_by(model.priority, model.creation_time)

        async with self._factory() as session:
            rows = list((await session.execute(stmt)).scalars().all())
        return RecordCursor((row_to_message(row) for row in rows), len(rows))


__all__ = ["SqlAlchemyRecordStore", "SqlAlchemyTransaction"]
