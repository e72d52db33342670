"""Application – shard assignment for new messages."""
from __future__ import annotations

import random
import zlib


class Sharder:
    """Assigns a message to one of ``num_shards`` partitions.

    Ordering is only guaranteed within a shard, so FIFO messages are hashed on
    their queue name (CRC-32, stable across processes) while everything else
    is spread uniformly at random.
    """

    def __init__(self, num_shards: int, rng: random.Random | None = None) -> None:
        if num_shards < 1:
            raise ValueError("num_shards must be >= 1")
        self._num_shards = num_shards
        self._rng = rng or random.Random()

    @property
    def num_shards(self) -> int:
        return self._num_shards

    def assign(self, queue_name: str, fifo: bool = False) -> int:
        if fifo:
            return self.fifo_shard(queue_name)
        return self._rng.randrange(self._num_shards)

    def fifo_shard(self, queue_name: str) -> int:
        return zlib.crc32(queue_name.encode("utf-8")) % self._num_shards


__all__ = ["Sharder"]
