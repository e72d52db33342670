"""Config settings – QueueSettings."""
from __future__ import annotations

import dataclasses
import logging
from typing import ClassVar

from mp_queue.config.errors import InvalidSettingValueError


@dataclasses.dataclass
class QueueSettings:
    """12-factor settings for the queue engine (env prefix ``QUEUE_``)."""

    _prefix: ClassVar[str] = "QUEUE"

    num_shards: int = 4
    default_delivery_attempts: int = 3
    default_retention_duration: int = 604800  # 7 days
    backoff_base_seconds: float = 60.0
    process_interval_seconds: int = 60
    purge_interval_seconds: int = 3600
    database_url: str = "sqlite+aiosqlite:///queue.db"
    log_level: str = "INFO"
    log_json: bool = True

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        if self.num_shards < 1:
            raise InvalidSettingValueError("num_shards", self.num_shards, "must be >= 1")
        if self.default_delivery_attempts < 1:
            raise InvalidSettingValueError(
                "default_delivery_attempts", self.default_delivery_attempts, "must be >= 1"
            )
        if self.default_retention_duration < 0:
            raise InvalidSettingValueError(
                "default_retention_duration", self.default_retention_duration, "must be >= 0"
            )
        if self.backoff_base_seconds <= 0:
            raise InvalidSettingValueError(
                "backoff_base_seconds", self.backoff_base_seconds, "must be > 0"
            )
        for name in ("process_interval_seconds", "purge_interval_seconds"):
            if getattr(self, name) < 1:
                raise InvalidSettingValueError(name, getattr(self, name), "must be >= 1")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise InvalidSettingValueError("log_level", self.log_level, "unknown log level")

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level.upper())


__all__ = ["QueueSettings"]
