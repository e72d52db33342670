"""mp-queue – durable, sharded, at-least-once message queue.

Quick start::

    from mp_queue import Queue, MessageProcessor, Ok, load_settings
    from mp_queue.adapters.sqlalchemy import SqlAlchemyRecordStore, SqlAlchemySessionFactory
    from mp_queue.application import InMemoryDispatcherRegistry

    settings = load_settings()
    factory = SqlAlchemySessionFactory(settings.database_url)
    await factory.create_schema()
    store = SqlAlchemyRecordStore(factory)

    registry = InMemoryDispatcherRegistry().with_default_dead_letter()
    registry.register("email.send", send_email)

    queue = Queue.from_settings(store, settings)
    message_id = await queue.publish("email.send", {"to": "a@b.c"})

    processor = MessageProcessor.from_settings(store, registry, settings)
    await processor.run_batch(shard=0)
"""
from mp_queue.application import (
    InMemoryDispatcherRegistry,
    MessageProcessor,
    PublishOptions,
    PurgeSweeper,
    Queue,
    StatusReader,
)
from mp_queue.config import QueueSettings, load_settings
from mp_queue.kernel.errors import QueueError
from mp_queue.kernel.messaging import MessageStatus, Priority, Retention
from mp_queue.kernel.types import Err, Ok

__version__ = "0.1.0"

__all__ = [
    "Err",
    "InMemoryDispatcherRegistry",
    "MessageProcessor",
    "MessageStatus",
    "Ok",
    "Priority",
    "PublishOptions",
    "PurgeSweeper",
    "Queue",
    "QueueError",
    "QueueSettings",
    "Retention",
    "StatusReader",
    "__version__",
    "load_settings",
]
