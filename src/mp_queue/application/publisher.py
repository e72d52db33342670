"""Application – Publisher: validate, schedule and persist new messages."""
from __future__ import annotations

import dataclasses
import json
import math
import random
from datetime import timedelta
from enum import Enum
from typing import Any, Callable, Mapping, TypeVar
from uuid import uuid4

from mp_queue.application.sharding import Sharder
from mp_queue.config.settings import QueueSettings
from mp_queue.kernel.errors import InvalidPublishOptionsError, SerializationError
from mp_queue.kernel.messaging import (
    CallSite,
    MessageStatus,
    Priority,
    QueueMessage,
    RecordStore,
    Retention,
)
from mp_queue.kernel.time import Clock, SystemClock
from mp_queue.observability.logging import get_logger

logger = get_logger(__name__)

TEnum = TypeVar("TEnum", bound=Enum)

# Keys accepted from the original camelCase publish API.
_OPTION_ALIASES = {
    "retentionDuration": "retention_duration",
    "deliveryAttempts": "delivery_attempts",
}


@dataclasses.dataclass(frozen=True)
class PublishOptions:
    """Per-message publish options.

    ``retention_duration`` and ``delivery_attempts`` left as ``None`` take the
    publisher's configured defaults (7 days and 3 attempts out of the box).
    """

    delay: float = 0
    retention: Retention = Retention.ONFAILURE
    retention_duration: float | None = None
    delivery_attempts: int | None = None
    priority: Priority = Priority.NORMAL
    fifo: bool = False

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "PublishOptions":
        """Build options from a plain mapping; enum values may be names or values."""
        known = {f.name for f in dataclasses.fields(cls)}
        values: dict[str, Any] = {}
        errors: list[dict[str, Any]] = []
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                errors.append({"field": key, "error": "unknown option"})
                continue
            values[name] = value

        for name, enum_cls in (("priority", Priority), ("retention", Retention)):
            if name in values:
                try:
                    values[name] = _coerce_enum(enum_cls, values[name])
                except ValueError as exc:
                    errors.append({"field": name, "error": str(exc)})
                    del values[name]

        if errors:
            raise InvalidPublishOptionsError("Invalid publish options", errors=errors)
        return cls(**values)


def _coerce_enum(enum_cls: type[TEnum], value: Any) -> TEnum:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str) and value.upper() in enum_cls.__members__:
        return enum_cls[value.upper()]
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(f"{value!r} is not a valid {enum_cls.__name__}") from None


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


class Publisher:
    """Creates PENDING messages, one transaction per publish."""

    def __init__(
        self,
        store: RecordStore,
        sharder: Sharder,
        clock: Clock | None = None,
        *,
        default_delivery_attempts: int = 3,
        default_retention_duration: float = 604800,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._store = store
        self._sharder = sharder
        self._clock = clock or SystemClock()
        self._default_attempts = default_delivery_attempts
        self._default_retention = default_retention_duration
        self._id_factory = id_factory or (lambda: str(uuid4()))

    @classmethod
    def from_settings(
        cls,
        store: RecordStore,
        settings: QueueSettings,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> "Publisher":
        return cls(
            store,
            Sharder(settings.num_shards, rng),
            clock,
            default_delivery_attempts=settings.default_delivery_attempts,
            default_retention_duration=settings.default_retention_duration,
        )

    async def publish(
        self,
        queue_name: str,
        payload: Any,
        options: PublishOptions | Mapping[str, Any] | None = None,
        *,
        call_site: CallSite | None = None,
        capture_call_site: bool = True,
    ) -> str:
        """Persist *payload* for *queue_name* and return the new message id.

        Raises :class:`InvalidPublishOptionsError` for bad arguments and
        :class:`SerializationError` when *payload* is not JSON serializable;
        in both cases nothing is stored.
        """
        opts = self._resolve(queue_name, options)
        if call_site is None and capture_call_site:
            call_site = CallSite.capture()

        attempts = opts.delivery_attempts if opts.delivery_attempts is not None else self._default_attempts
        retention_duration = (
            opts.retention_duration if opts.retention_duration is not None else self._default_retention
        )
        message_id = self._id_factory()
        now = self._clock.now()

        async with self._store.transaction() as tx:
            try:
                body = json.dumps(payload, indent=2, allow_nan=False)
            except (TypeError, ValueError) as exc:
                logger.error("queue.message.unserializable", queue=queue_name, error=str(exc))
                raise SerializationError(payload_type=type(payload).__name__, cause=exc) from exc
            # Tuples and non-string keys serialize but come back as other values.
            if json.loads(body) != payload:
                logger.error("queue.message.unserializable", queue=queue_name, error="lossy JSON round-trip")
                raise SerializationError(
                    "Cannot serialize message; payload does not survive a JSON round-trip",
                    payload_type=type(payload).__name__,
                )

            message = QueueMessage(
                id=message_id,
                queue_name=queue_name,
                payload=body,
                status=MessageStatus.PENDING,
                priority=opts.priority,
                remaining_delivery_attempts=attempts,
                error_count=0,
                visibility_time=now + timedelta(seconds=opts.delay),
                retention=opts.retention,
                retain_till=now + timedelta(seconds=retention_duration),
                shard=self._sharder.assign(queue_name, opts.fifo),
                creation_time=now,
                call_site=json.dumps(call_site.to_dict()) if call_site else None,
            )
            await tx.create(message)
            logger.info(
                "queue.message.published",
                message_id=message_id,
                queue=queue_name,
                shard=message.shard,
                priority=message.priority.name,
            )
        return message_id

    def _resolve(
        self,
        queue_name: str,
        options: PublishOptions | Mapping[str, Any] | None,
    ) -> PublishOptions:
        if options is None:
            opts = PublishOptions()
        elif isinstance(options, PublishOptions):
            opts = options
        else:
            opts = PublishOptions.from_mapping(options)

        errors: list[dict[str, Any]] = []
        try:
            opts = dataclasses.replace(
                opts,
                priority=_coerce_enum(Priority, opts.priority),
                retention=_coerce_enum(Retention, opts.retention),
            )
        except ValueError as exc:
            errors.append({"field": "options", "error": str(exc)})
        if not isinstance(queue_name, str) or not queue_name:
            errors.append({"field": "queue_name", "error": "must be a non-empty string"})
        if not _is_finite_number(opts.delay):
            errors.append({"field": "delay", "error": "must be a finite number"})
        elif opts.delay < 0:
            errors.append({"field": "delay", "error": "must be >= 0"})
        if opts.retention_duration is not None:
            if not _is_finite_number(opts.retention_duration):
                errors.append({"field": "retention_duration", "error": "must be a finite number"})
            elif opts.retention_duration < 0:
                errors.append({"field": "retention_duration", "error": "must be >= 0"})
        if opts.delivery_attempts is not None:
            if isinstance(opts.delivery_attempts, bool) or not isinstance(opts.delivery_attempts, int):
                errors.append({"field": "delivery_attempts", "error": "must be an integer"})
            elif opts.delivery_attempts < 1:
                errors.append({"field": "delivery_attempts", "error": "must be >= 1"})
        if errors:
            raise InvalidPublishOptionsError("Invalid publish request", errors=errors)
        return opts


__all__ = ["PublishOptions", "Publisher"]
