"""Application – invoke a dispatcher inside its own transaction scope."""
from __future__ import annotations

from typing import Any

from mp_queue.kernel.messaging import DispatcherRegistry, RecordStore


async def invoke_isolated(
    store: RecordStore,
    registry: DispatcherRegistry,
    name: str,
    *args: Any,
) -> Any:
    """Run dispatcher *name* in a transaction separate from the bookkeeping one.

    Writes the dispatcher enlists through
    :func:`~mp_queue.kernel.messaging.current_transaction` commit when it
    returns and roll back when it raises; either way the exception (if any)
    propagates to the caller for classification.
    """
    async with store.transaction():
        return await registry.invoke(name, *args)


__all__ = ["invoke_isolated"]
