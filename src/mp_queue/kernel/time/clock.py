"""Kernel time – Clock protocol + implementations.

Every timestamp the engine writes (visibility, retention, creation) comes
from an injected clock, so tests can step time across backoff windows and
retention deadlines without sleeping.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port: source of the current UTC instant."""

    def now(self) -> datetime: ...


class SystemClock:
    """Production clock that delegates to ``datetime.now(UTC)``."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FrozenClock:
    """Test clock pinned to a fixed instant until advanced."""

    def __init__(self, fixed: datetime) -> None:
        if fixed.tzinfo is None:
            fixed = fixed.replace(tzinfo=UTC)
        self._fixed = fixed

    def now(self) -> datetime:
        return self._fixed

    def advance(self, **kwargs: int | float) -> datetime:
        """Advance by the given ``timedelta`` kwargs and return the new instant."""
        self._fixed += timedelta(**kwargs)
        return self._fixed

    def set(self, instant: datetime) -> None:
        self._fixed = instant if instant.tzinfo else instant.replace(tzinfo=UTC)


def utc_now() -> datetime:
    """Shorthand for ``datetime.now(UTC)``."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive values (as returned by some SQL drivers)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


__all__ = ["Clock", "FrozenClock", "SystemClock", "ensure_utc", "utc_now"]
