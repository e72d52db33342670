"""Infrastructure errors – serialization and record store failures."""

from __future__ import annotations

from typing import Any

from mp_queue.kernel.errors.base import QueueError


class SerializationError(QueueError):
    """A message payload could not be serialized; nothing was persisted."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str = "Cannot serialize message; must be JSON serializable",
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


class StoreError(QueueError):
    """The record store rejected an operation."""

    default_code = "store_error"


__all__ = ["SerializationError", "StoreError"]
