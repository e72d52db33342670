"""Observability – structured logging and metrics ports."""
from mp_queue.observability.logging import configure_logging, get_logger
from mp_queue.observability.metrics import Counter, Gauge, Metrics, NoopMetrics

__all__ = ["Counter", "Gauge", "Metrics", "NoopMetrics", "configure_logging", "get_logger"]
