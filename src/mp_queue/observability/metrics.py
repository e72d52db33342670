"""Observability – Counter, Gauge and Metrics ports with a no-op backend.

Metric names used by the engine:

* ``queue.messages.eligible`` (gauge) – messages selected by ``begin_batch``
* ``queue.messages.processed`` / ``retried`` / ``errored`` / ``removed``
  (counters) – per-batch totals reported by ``end_batch``
* ``queue.messages.purged`` (counter) – records deleted by the sweeper
"""
from __future__ import annotations

import abc


class Counter(abc.ABC):
    """Monotonically increasing counter."""

    @abc.abstractmethod
    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None: ...


class Gauge(abc.ABC):
    """Point-in-time value."""

    @abc.abstractmethod
    def set(self, value: float, labels: dict[str, str] | None = None) -> None: ...


class Metrics(abc.ABC):
    """Port: factory for metric instruments."""

    @abc.abstractmethod
    def counter(self, name: str, description: str = "") -> Counter: ...

    @abc.abstractmethod
    def gauge(self, name: str, description: str = "") -> Gauge: ...


class _NoopCounter(Counter):
    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None:
        pass


class _NoopGauge(Gauge):
    def set(self, value: float, labels: dict[str, str] | None = None) -> None:
        pass


class NoopMetrics(Metrics):
    """Silent metrics used when no backend is configured."""

    def counter(self, name: str, description: str = "") -> Counter:
        return _NoopCounter()

    def gauge(self, name: str, description: str = "") -> Gauge:
        return _NoopGauge()


__all__ = ["Counter", "Gauge", "Metrics", "NoopMetrics"]
