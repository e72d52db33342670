"""SQLAlchemy adapter – durable record store (requires the ``sqlalchemy`` extra)."""
from mp_queue.adapters.sqlalchemy.models import Base, QueueMessageModel, UTCDateTime, create_tables
from mp_queue.adapters.sqlalchemy.session import SqlAlchemySessionFactory
from mp_queue.adapters.sqlalchemy.store import SqlAlchemyRecordStore, SqlAlchemyTransaction

__all__ = [
    "Base",
    "QueueMessageModel",
    "SqlAlchemyRecordStore",
    "SqlAlchemySessionFactory",
    "SqlAlchemyTransaction",
    "UTCDateTime",
    "create_tables",
]
