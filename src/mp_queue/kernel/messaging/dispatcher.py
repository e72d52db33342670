"""Kernel messaging – dispatcher and registry ports."""
from __future__ import annotations

import abc
from typing import Any, Protocol, runtime_checkable

DEAD_LETTER = "deadletter"


def dead_letter_name(queue_name: str) -> str:
    """Registry key of the dead-letter dispatcher dedicated to *queue_name*."""
    return f"{DEAD_LETTER}.{queue_name}"


@runtime_checkable
class Dispatcher(Protocol):
    """Performs the work for one queue name.

    Regular deliveries call ``invoke(payload)``; dead-letter notifications call
    ``invoke(queue_name, payload)``. The return value should be an
    :class:`~mp_queue.kernel.types.Ok` or :class:`~mp_queue.kernel.types.Err`.
    """

    async def invoke(self, *args: Any) -> Any: ...


class DispatcherRegistry(abc.ABC):
    """Port: named dispatcher lookup and invocation."""

    @abc.abstractmethod
    def has_handler(self, name: str) -> bool: ...

    @abc.abstractmethod
    async def invoke(self, name: str, *args: Any) -> Any:
        """Invoke the dispatcher registered as *name*.

        Raises :class:`~mp_queue.kernel.errors.NoSubscriberError` when absent.
        """
        ...


__all__ = ["DEAD_LETTER", "Dispatcher", "DispatcherRegistry", "dead_letter_name"]
