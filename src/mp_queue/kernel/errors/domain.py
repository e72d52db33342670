"""Domain errors – invalid requests against the queue API."""

from __future__ import annotations

from typing import Any

from mp_queue.kernel.errors.base import QueueError


class ValidationError(QueueError):
    """Input data does not meet validation rules.

    ``errors`` is a list of field-level validation failures.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class InvalidPublishOptionsError(ValidationError):
    """Publish arguments or options were rejected before anything was persisted."""

    default_code = "invalid_publish_options"


class MessageNotFoundError(QueueError):
    """No message exists for the requested identifier."""

    default_code = "message_not_found"

    def __init__(self, message_id: str, **kwargs: Any) -> None:
        super().__init__(f"Message '{message_id}' not found", **kwargs)
        self.message_id = message_id


class BatchNotStartedError(QueueError):
    """A batch operation was called before ``begin_batch``."""

    default_code = "batch_not_started"

    def __init__(self, message: str = "begin_batch() must be called first", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


__all__ = [
    "BatchNotStartedError",
    "InvalidPublishOptionsError",
    "MessageNotFoundError",
    "ValidationError",
]
