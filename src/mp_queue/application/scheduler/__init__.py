"""Application scheduler – periodic queue jobs and batch driving."""
from mp_queue.application.scheduler.job import BatchRunner, Job, drain, queue_jobs

__all__ = ["BatchRunner", "Job", "drain", "queue_jobs"]
