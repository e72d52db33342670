"""Kernel messaging – queue message model, store and dispatcher ports."""
from mp_queue.kernel.messaging.dispatcher import (
    DEAD_LETTER,
    Dispatcher,
    DispatcherRegistry,
    dead_letter_name,
)
from mp_queue.kernel.messaging.message import (
    CallSite,
    LastResult,
    MessageInfo,
    MessageStatus,
    Outcome,
    Priority,
    QueueMessage,
    Retention,
)
from mp_queue.kernel.messaging.store import (
    MessageQuery,
    RecordCursor,
    RecordStore,
    Transaction,
    current_transaction,
)

__all__ = [
    "DEAD_LETTER",
    "CallSite",
    "Dispatcher",
    "DispatcherRegistry",
    "LastResult",
    "MessageInfo",
    "MessageQuery",
    "MessageStatus",
    "Outcome",
    "Priority",
    "QueueMessage",
    "RecordCursor",
    "RecordStore",
    "Retention",
    "Transaction",
    "current_transaction",
    "dead_letter_name",
]
