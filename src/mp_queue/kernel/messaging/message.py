"""Kernel messaging – the persisted queue message and its value types."""
from __future__ import annotations

import asyncio
import dataclasses
import inspect
import traceback
from datetime import datetime
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any

_PACKAGE_ROOT = Path(__file__).resolve().parents[2]
# Event-loop frames sit between a coroutine and the code that scheduled it.
_SKIPPED_ROOTS = (_PACKAGE_ROOT, Path(asyncio.__file__).resolve().parent)


class MessageStatus(str, Enum):
    PENDING = "PENDING"
    RETRY = "RETRY"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (MessageStatus.COMPLETE, MessageStatus.FAILED)


class Priority(IntEnum):
    """Lower value is served first."""

    HIGH = 0
    NORMAL = 1
    LOW = 2


class Retention(str, Enum):
    """What happens to a message once it is COMPLETE or FAILED.

    ``NEVER`` deletes it as soon as it is terminal, ``ONFAILURE`` keeps only
    failed messages until ``retain_till`` and ``ALWAYS`` keeps both.
    """

    NEVER = "NEVER"
    ONFAILURE = "ONFAILURE"
    ALWAYS = "ALWAYS"


class Outcome(str, Enum):
    OK = "OK"
    ERROR = "ERROR"


@dataclasses.dataclass(frozen=True)
class CallSite:
    """Source location used as diagnostic provenance."""

    filename: str
    line_no: int
    function_name: str | None = None

    @classmethod
    def capture(cls) -> "CallSite | None":
        """Return the innermost caller frame outside ``mp_queue`` and ``asyncio``.

        Never raises; returns ``None`` when no such frame can be found.
        """
        try:
            frame = inspect.currentframe()
            while frame is not None:
                filename = frame.f_code.co_filename
                path = Path(filename).resolve()
                if not any(path.is_relative_to(root) for root in _SKIPPED_ROOTS):
                    return cls(filename, frame.f_lineno, frame.f_code.co_name)
                frame = frame.f_back
        except Exception:  # noqa: BLE001
            return None
        return None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "CallSite | None":
        """Location where *exc* was raised, from its traceback."""
        frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
        if not frames:
            return None
        last = frames[-1]
        return cls(last.filename, last.lineno or 0, last.name)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"filename": self.filename, "line_no": self.line_no}
        if self.function_name:
            data["function_name"] = self.function_name
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "CallSite | None":
        if not data or "filename" not in data:
            return None
        return cls(
            filename=str(data["filename"]),
            line_no=int(data.get("line_no", 0)),
            function_name=data.get("function_name"),
        )


@dataclasses.dataclass(frozen=True)
class LastResult:
    """Outcome of the most recent delivery attempt."""

    outcome: Outcome | None = None
    code: str | None = None
    message: str | None = None
    details: dict[str, Any] = dataclasses.field(default_factory=dict)
    call_site: CallSite | None = None

    @classmethod
    def empty(cls) -> "LastResult":
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.outcome is None and self.code is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "call_site": self.call_site.to_dict() if self.call_site else None,
            "outcome": self.outcome.value if self.outcome else None,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "LastResult":
        if not data:
            return cls.empty()
        outcome = data.get("outcome")
        return cls(
            outcome=Outcome(outcome) if outcome else None,
            code=data.get("code"),
            message=data.get("message"),
            details=dict(data.get("details") or {}),
            call_site=CallSite.from_dict(data.get("call_site")),
        )


@dataclasses.dataclass
class QueueMessage:
    """A persisted unit of work.

    ``payload``, ``last_result`` and ``call_site`` hold serialized JSON text,
    exactly as stored by the record store.
    """

    id: str
    queue_name: str
    payload: str
    status: MessageStatus
    priority: Priority
    remaining_delivery_attempts: int
    error_count: int
    visibility_time: datetime
    retention: Retention
    retain_till: datetime
    shard: int
    creation_time: datetime
    last_result: str | None = None
    call_site: str | None = None

    def copy(self) -> "QueueMessage":
        return dataclasses.replace(self)


@dataclasses.dataclass(frozen=True)
class MessageInfo:
    """Read-only projection returned by the status reader."""

    id: str
    status: MessageStatus
    last_result: LastResult
    record: QueueMessage = dataclasses.field(repr=False, compare=False)


__all__ = [
    "CallSite",
    "LastResult",
    "MessageInfo",
    "MessageStatus",
    "Outcome",
    "Priority",
    "QueueMessage",
    "Retention",
]
