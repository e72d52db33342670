"""Kernel – framework-agnostic building blocks of the queue engine."""

from mp_queue.kernel.errors import (
    DeliveryError,
    InvalidPublishOptionsError,
    MessageNotFoundError,
    QueueError,
    SerializationError,
    StoreError,
    ValidationError,
)
from mp_queue.kernel.types import Err, Ok, Result

__all__ = [
    "DeliveryError",
    "Err",
    "InvalidPublishOptionsError",
    "MessageNotFoundError",
    "Ok",
    "QueueError",
    "Result",
    "SerializationError",
    "StoreError",
    "ValidationError",
]
