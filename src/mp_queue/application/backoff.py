"""Application – retry backoff for failed deliveries."""
from __future__ import annotations

from datetime import timedelta


class ExponentialBackoff:
    """Delay grows exponentially: ``base_delay * 2^error_count``.

    With the default one-minute base the first retry waits 2 minutes, the
    second 4, and so on. There is no upper bound.
    """

    def __init__(self, base_delay: float = 60.0) -> None:
        if base_delay <= 0:
            raise ValueError("base_delay must be > 0")
        self._base = base_delay

    def compute(self, error_count: int) -> timedelta:
        return timedelta(seconds=self._base * (2 ** error_count))


__all__ = ["ExponentialBackoff"]
