"""Application – Queue facade and hook-style PublishDispatcher."""
from __future__ import annotations

import random
from typing import Any, Mapping

from mp_queue.application.publisher import PublishOptions, Publisher
from mp_queue.application.status import StatusReader
from mp_queue.config.settings import QueueSettings
from mp_queue.kernel.messaging import CallSite, MessageInfo, RecordStore
from mp_queue.kernel.time import Clock
from mp_queue.kernel.types import Ok


class Queue:
    """Public entry point: ``publish`` new messages and ``get`` their status.

    Usage::

        queue = Queue.from_settings(store, load_settings())
        message_id = await queue.publish("email.send", {"to": "a@b.c"}, {"priority": "HIGH"})
        info = await queue.get(message_id)
    """

    def __init__(self, publisher: Publisher, status_reader: StatusReader) -> None:
        self._publisher = publisher
        self._status = status_reader

    @classmethod
    def from_settings(
        cls,
        store: RecordStore,
        settings: QueueSettings | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> "Queue":
        settings = settings or QueueSettings()
        return cls(Publisher.from_settings(store, settings, clock, rng), StatusReader(store))

    @property
    def publisher(self) -> Publisher:
        return self._publisher

    async def publish(
        self,
        queue_name: str,
        payload: Any,
        options: PublishOptions | Mapping[str, Any] | None = None,
        *,
        call_site: CallSite | None = None,
    ) -> str:
        if call_site is None:
            call_site = CallSite.capture()
        return await self._publisher.publish(
            queue_name, payload, options, call_site=call_site, capture_call_site=False
        )

    async def get(self, message_id: str) -> MessageInfo | None:
        return await self._status.get_status(message_id)

    async def get_or_raise(self, message_id: str) -> MessageInfo:
        return await self._status.get_status_or_raise(message_id)


class PublishDispatcher:
    """Dispatcher that publishes its arguments.

    Registered under some name, it lets hosts (or other dispatchers) enqueue
    work through the registry: ``invoke(queue_name, payload, options=None)``
    returns ``Ok({"message_id": ...})``. Publish errors propagate.
    """

    def __init__(self, publisher: Publisher) -> None:
        self._publisher = publisher

    async def invoke(
        self,
        queue_name: str,
        payload: Any,
        options: PublishOptions | Mapping[str, Any] | None = None,
    ) -> Ok:
        message_id = await self._publisher.publish(queue_name, payload, options)
        return Ok({"message_id": message_id})


__all__ = ["PublishDispatcher", "Queue"]
