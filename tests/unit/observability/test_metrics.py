"""Unit tests for the metrics ports and the in-memory double."""

from __future__ import annotations

from mp_queue.observability import Counter, Gauge, Metrics, NoopMetrics
from mp_queue.testing import InMemoryMetrics


class TestNoopMetrics:
    def test_instruments_accept_calls(self) -> None:
        metrics = NoopMetrics()
        counter = metrics.counter("queue.messages.processed")
        gauge = metrics.gauge("queue.messages.eligible")
        counter.add(3, {"shard": "0"})
        gauge.set(5)
        assert isinstance(counter, Counter)
        assert isinstance(gauge, Gauge)
        assert isinstance(metrics, Metrics)


class TestInMemoryMetrics:
    def test_counter_totals(self) -> None:
        metrics = InMemoryMetrics()
        metrics.counter("c").add()
        metrics.counter("c").add(2, {"shard": "1"})
        assert metrics.counter_total("c") == 3
        assert metrics.counter("c").total_for(shard="1") == 2
        assert metrics.counter("c").total_for() == 1

    def test_unknown_counter_total_is_zero(self) -> None:
        assert InMemoryMetrics().counter_total("missing") == 0

    def test_gauge_keeps_latest_per_labels(self) -> None:
        metrics = InMemoryMetrics()
        gauge = metrics.gauge("g")
        gauge.set(1, {"shard": "0"})
        gauge.set(4, {"shard": "0"})
        gauge.set(2, {"shard": "1"})
        assert gauge.value_for(shard="0") == 4
        assert gauge.value_for(shard="1") == 2
        assert gauge.value_for(shard="9") is None

    def test_reset(self) -> None:
        metrics = InMemoryMetrics()
        metrics.counter("c").add(5)
        metrics.reset()
        assert metrics.counter_total("c") == 0
