"""Delivery errors – raised while processing a message, absorbed into its state.

None of these escape a batch. Their ``code`` ends up in the message's
``last_result`` so callers can inspect the failure through the status reader.
"""

from __future__ import annotations

from typing import Any

from mp_queue.kernel.errors.base import QueueError


class DeliveryError(QueueError):
    """Base for failures during a delivery attempt."""

    default_code = "ERROR"


class NoSubscriberError(DeliveryError):
    """No dispatcher is registered for the message's queue name."""

    default_code = "NO_SUBSCRIBER"

    def __init__(self, queue_name: str, **kwargs: Any) -> None:
        super().__init__(f"Subscriber for queue '{queue_name}' not found", **kwargs)
        self.queue_name = queue_name


class DispatchError(DeliveryError):
    """The dispatcher raised while handling the payload."""

    default_code = "EXCEPTION"


class MalformedResultError(DeliveryError):
    """The dispatcher returned nothing usable."""

    default_code = "ERROR"


class ResultSerializationError(DeliveryError):
    """The outcome record of an attempt could not be serialized."""

    default_code = "result_serialization_error"


class DeadLetterDispatchError(DeliveryError):
    """A dead-letter dispatcher raised while being notified."""

    default_code = "dead_letter_dispatch_error"


__all__ = [
    "DeadLetterDispatchError",
    "DeliveryError",
    "DispatchError",
    "MalformedResultError",
    "NoSubscriberError",
    "ResultSerializationError",
]
