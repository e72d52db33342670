"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    QueueError
    ├── ValidationError              (domain.py)
    │   └── InvalidPublishOptionsError
    ├── MessageNotFoundError
    ├── BatchNotStartedError
    ├── SerializationError           (infrastructure.py)
    ├── StoreError
    └── DeliveryError                (delivery.py)
        ├── NoSubscriberError
        ├── DispatchError
        ├── MalformedResultError
        ├── ResultSerializationError
        └── DeadLetterDispatchError

Configuration errors live in :mod:`mp_queue.config.errors`.
"""

from mp_queue.kernel.errors.base import QueueError
from mp_queue.kernel.errors.delivery import (
    DeadLetterDispatchError,
    DeliveryError,
    DispatchError,
    MalformedResultError,
    NoSubscriberError,
    ResultSerializationError,
)
from mp_queue.kernel.errors.domain import (
    BatchNotStartedError,
    InvalidPublishOptionsError,
    MessageNotFoundError,
    ValidationError,
)
from mp_queue.kernel.errors.infrastructure import SerializationError, StoreError

__all__ = [
    "BatchNotStartedError",
    "DeadLetterDispatchError",
    "DeliveryError",
    "DispatchError",
    "InvalidPublishOptionsError",
    "MalformedResultError",
    "MessageNotFoundError",
    "NoSubscriberError",
    "QueueError",
    "ResultSerializationError",
    "SerializationError",
    "StoreError",
    "ValidationError",
]
