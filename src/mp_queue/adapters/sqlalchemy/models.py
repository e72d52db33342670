"""SQLAlchemy adapter – ORM model for the ``queue_messages`` table."""
from __future__ import annotations

import datetime
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.engine import Dialect
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from mp_queue.kernel.messaging import MessageStatus, Priority, QueueMessage, Retention
from mp_queue.kernel.time import ensure_utc


class UTCDateTime(TypeDecorator[datetime.datetime]):
    """Timezone-aware UTC datetimes on every backend.

    SQLite has no timezone support, so values are stored there as naive UTC
    and re-tagged with UTC when loaded.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime.datetime | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        value = ensure_utc(value)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: Any, dialect: Dialect) -> datetime.datetime | None:
        if value is None:
            return None
        return ensure_utc(value)


class Base(DeclarativeBase):
    pass


class QueueMessageModel(Base):
    __tablename__ = "queue_messages"
    __table_args__ = (
        Index("ix_queue_messages_selection", "shard", "status", "visibility_time"),
        Index("ix_queue_messages_retention", "status", "retain_till"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    queue_name: Mapped[str] = mapped_column(String(255))
    payload: Mapped[str] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(16))
    priority: Mapped[int] = mapped_column(Integer)
    remaining_delivery_attempts: Mapped[int] = mapped_column(Integer)
    error_count: Mapped[int] = mapped_column(Integer, default=0)
    visibility_time: Mapped[datetime.datetime] = mapped_column(UTCDateTime())
    retention: Mapped[str] = mapped_column(String(16))
    retain_till: Mapped[datetime.datetime] = mapped_column(UTCDateTime())
    shard: Mapped[int] = mapped_column(Integer)
    creation_time: Mapped[datetime.datetime] = mapped_column(UTCDateTime())
    last_result: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    call_site: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)


def message_to_row(message: QueueMessage) -> dict[str, Any]:
    return {
        "id": message.id,
        "queue_name": message.queue_name,
        "payload": message.payload,
        "status": message.status.value,
        "priority": int(message.priority),
        "remaining_delivery_attempts": message.remaining_delivery_attempts,
        "error_count": message.error_count,
        "visibility_time": message.visibility_time,
        "retention": message.retention.value,
        "retain_till": message.retain_till,
        "shard": message.shard,
        "creation_time": message.creation_time,
        "last_result": message.last_result,
        "call_site": message.call_site,
    }


def row_to_message(row: QueueMessageModel) -> QueueMessage:
    return QueueMessage(
        id=row.id,
        queue_name=row.queue_name,
        payload=row.payload,
        status=MessageStatus(row.status),
        priority=Priority(row.priority),
        remaining_delivery_attempts=row.remaining_delivery_attempts,
        error_count=row.error_count,
        visibility_time=row.visibility_time,
        retention=Retention(row.retention),
        retain_till=row.retain_till,
        shard=row.shard,
        creation_time=row.creation_time,
        last_result=row.last_result,
        call_site=row.call_site,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create the ``queue_messages`` table (and its indexes) if missing."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = [
    "Base",
    "QueueMessageModel",
    "UTCDateTime",
    "create_tables",
    "message_to_row",
    "row_to_message",
]
