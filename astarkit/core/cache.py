from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Iterator, Optional, Tuple

from .path import SearchPath

DEFAULT_PRUNE_THRESHOLD = 7200
DEFAULT_HIT_FACTOR = 60


@dataclass(frozen=True)
class CacheKey:
    validate_key: Optional[Hashable]
    from_key: Hashable
    to_key: Hashable

    def endpoints(self) -> Tuple[Hashable, Hashable]:
        return (self.from_key, self.to_key)


@dataclass
class CacheEntry:
    # None records that no path exists
    path: Optional[SearchPath]
    hits: int = 0
    timestamp: float = 0.0

    @property
    def reachable(self) -> bool:
        return self.path is not None

    def expires_at(self, threshold: float, hit_factor: float) -> float:
        return self.timestamp + threshold + self.hits * hit_factor


class ResultCache:
    """Memoized search outcomes, partitioned by validate key.

    Entries are written once per key; a hit bumps the counter and the
    timestamp but never the payload. Frequently hit entries survive pruning
    longer: each hit adds ``hit_factor`` seconds to the entry's lifespan.
    """

    def __init__(
        self,
        *,
        hit_factor: float = DEFAULT_HIT_FACTOR,
        default_threshold: float = DEFAULT_PRUNE_THRESHOLD,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.hit_factor = hit_factor
        self.default_threshold = default_threshold
        self.clock = clock
        self._partitions: Dict[Optional[Hashable], Dict[Tuple[Hashable, Hashable], CacheEntry]] = {}

    def get(self, key: CacheKey) -> Optional[CacheEntry]:
        partition = self._partitions.get(key.validate_key)
        if not partition:
            return None
        entry = partition.get(key.endpoints())
        if entry is None:
            return None
        entry.hits += 1
        entry.timestamp = self.clock()
        return entry

    def peek(self, key: CacheKey) -> Optional[CacheEntry]:
        partition = self._partitions.get(key.validate_key) or {}
        return partition.get(key.endpoints())

    def put(self, key: CacheKey, path: Optional[SearchPath]) -> CacheEntry:
        partition = self._partitions.setdefault(key.validate_key, {})
        existing = partition.get(key.endpoints())
        if existing is not None:
            return existing
        entry = CacheEntry(path=path, timestamp=self.clock())
        partition[key.endpoints()] = entry
        return entry

    def discard(self, key: CacheKey) -> bool:
        partition = self._partitions.get(key.validate_key)
        if not partition or key.endpoints() not in partition:
            return False
        del partition[key.endpoints()]
        if not partition:
            del self._partitions[key.validate_key]
        return True

    def drop_partition(self, validate_key: Optional[Hashable]) -> int:
        partition = self._partitions.pop(validate_key, None)
        return len(partition) if partition else 0

    def prune(self, threshold: Optional[float] = None) -> int:
        threshold = threshold or self.default_threshold
        now = self.clock()
        removed = 0
        for validate_key in list(self._partitions):
            partition = self._partitions[validate_key]
            for endpoints in list(partition):
                if partition[endpoints].expires_at(threshold, self.hit_factor) < now:
                    del partition[endpoints]
                    removed += 1
            if not partition:
                del self._partitions[validate_key]
        return removed

    def clear(self) -> None:
        self._partitions = {}

    def entries(self) -> Iterator[Tuple[CacheKey, CacheEntry]]:
        for validate_key, partition in self._partitions.items():
            for (from_key, to_key), entry in partition.items():
                yield CacheKey(validate_key, from_key, to_key), entry

    def __contains__(self, key: object) -> bool:
        return isinstance(key, CacheKey) and self.peek(key) is not None

    def __len__(self) -> int:
        return sum(len(partition) for partition in self._partitions.values())
