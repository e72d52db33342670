"""Application – classify what a dispatcher returned (or raised)."""
from __future__ import annotations

import dataclasses
from typing import Any

from mp_queue.kernel.errors import DeliveryError, DispatchError, MalformedResultError, NoSubscriberError
from mp_queue.kernel.messaging import CallSite, LastResult, Outcome
from mp_queue.kernel.types import Err, Ok
from mp_queue.observability.logging import get_logger

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True)
class DeliveryOutcome:
    success: bool
    result: LastResult


def classify_result(result: Any, *, queue_name: str = "") -> DeliveryOutcome:
    """Map a dispatcher's return value onto a delivery outcome.

    * ``Ok`` succeeds and keeps its details.
    * ``Err`` fails with the dispatcher's code, message and details.
    * ``None`` fails as a malformed (empty) result.
    * Anything else is logged and accepted as success, with the raw value
      wrapped as ``details["value"]``.
    """
    if isinstance(result, Ok):
        return DeliveryOutcome(
            True,
            LastResult(Outcome.OK, result.code, result.message, result.details),
        )
    if isinstance(result, Err):
        return DeliveryOutcome(
            False,
            LastResult(Outcome.ERROR, result.code, result.message, result.details),
        )
    if result is None:
        error = MalformedResultError("Empty result from subscriber")
        return DeliveryOutcome(False, LastResult(Outcome.ERROR, error.code, error.message))

    logger.warning(
        "queue.result.nonconforming",
        queue=queue_name,
        result_type=type(result).__name__,
    )
    return DeliveryOutcome(True, LastResult(Outcome.OK, Ok.code, "", {"value": result}))


def classify_exception(exc: BaseException) -> DeliveryOutcome:
    """A raised error is a failed attempt; its location becomes provenance."""
    if isinstance(exc, DeliveryError):
        code, message = exc.code, exc.message
    else:
        code = DispatchError.default_code
        message = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
    return DeliveryOutcome(
        False,
        LastResult(Outcome.ERROR, code, message, call_site=CallSite.from_exception(exc)),
    )


def classify_no_subscriber(queue_name: str) -> DeliveryOutcome:
    error = NoSubscriberError(queue_name)
    return DeliveryOutcome(False, LastResult(Outcome.ERROR, error.code, error.message))


__all__ = ["DeliveryOutcome", "classify_exception", "classify_no_subscriber", "classify_result"]
