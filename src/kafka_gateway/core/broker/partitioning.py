# kafka_gateway/core/broker/partitioning.py
"""
Partition selection strategies.

``least_bytes`` routes each message to the partition that has received the
fewest bytes from this process so far, which keeps partitions evenly filled
when every message carries the same key. ``key`` leaves the choice to the
client library, which hashes the message key.
"""
from __future__ import annotations

import logging
from typing import Iterable, Protocol

logger = logging.getLogger(__name__)


class Balancer(Protocol):
    def choose(self, partitions: Iterable[int], size: int) -> int | None: ...


class KeyBalancer:
    """Defer to the producer's key-hash partitioner."""

    def choose(self, partitions: Iterable[int], size: int) -> int | None:
        return None


class LeastBytesBalancer:
    """Pick the partition with the lowest byte count written so far."""

    def __init__(self) -> None:
        self._written: dict[int, int] = {}

    @property
    def written(self) -> dict[int, int]:
        return dict(self._written)

    def choose(self, partitions: Iterable[int], size: int) -> int | None:
        candidates = sorted(partitions)
        if not candidates:
            return None

        # Partition set changed (topic grew): start counting again
        if set(candidates) != set(self._written):
            if self._written:
                logger.debug("Partition set changed to %s, resetting counters", candidates)
            self._written = {p: 0 for p in candidates}

        chosen = min(candidates, key=lambda p: self._written[p])
        self._written[chosen] += size
        return chosen


def make_balancer(strategy: str) -> Balancer:
    if strategy == "least_bytes":
        return LeastBytesBalancer()
    if strategy == "key":
        return KeyBalancer()
    raise ValueError(f"Unknown partitioning strategy: {strategy!r}")
