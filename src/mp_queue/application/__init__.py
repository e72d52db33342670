"""Application layer – publishing, delivery, dead letters, purge and status."""
from mp_queue.application.backoff import ExponentialBackoff
from mp_queue.application.classification import (
    DeliveryOutcome,
    classify_exception,
    classify_no_subscriber,
    classify_result,
)
from mp_queue.application.dead_letter import DeadLetterRouter, LoggingDeadLetterDispatcher
from mp_queue.application.processor import BatchContext, BatchMetrics, MessageProcessor
from mp_queue.application.publisher import PublishOptions, Publisher
from mp_queue.application.queue import PublishDispatcher, Queue
from mp_queue.application.registry import FunctionDispatcher, InMemoryDispatcherRegistry
from mp_queue.application.scheduler import Job, drain, queue_jobs
from mp_queue.application.sharding import Sharder
from mp_queue.application.status import StatusReader
from mp_queue.application.sweeper import PurgeSweeper, SweepMetrics

__all__ = [
    "BatchContext",
    "BatchMetrics",
    "DeadLetterRouter",
    "DeliveryOutcome",
    "ExponentialBackoff",
    "FunctionDispatcher",
    "InMemoryDispatcherRegistry",
    "Job",
    "LoggingDeadLetterDispatcher",
    "MessageProcessor",
    "PublishDispatcher",
    "PublishOptions",
    "Publisher",
    "PurgeSweeper",
    "Queue",
    "Sharder",
    "StatusReader",
    "SweepMetrics",
    "classify_exception",
    "classify_no_subscriber",
    "classify_result",
    "drain",
    "queue_jobs",
]
