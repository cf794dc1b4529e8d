"""Bounded, expiring cache for text-run optimization results."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..core.config import DEFAULT_CACHE_MAX_ENTRIES, DEFAULT_CACHE_TTL_SECONDS
from ..core.logging_utils import log_event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptimizationStats:
    original_count: int
    optimized_count: int
    reduction_percent: int
    merged_count: int
    processing_time_ms: float = 0.0


@dataclass(frozen=True)
class CacheEntry:
    """Merge plan for one fingerprint.

    ``run_lengths`` holds, in order, how many input segments fold into each
    output segment. Components are never stored, so a hit is replayed against
    the caller's own segments.
    """

    fingerprint: str
    run_lengths: tuple[int, ...]
    stats: OptimizationStats
    inserted_at: float


@dataclass(frozen=True)
class CacheStats:
    size: int
    max_size: int
    hits: int
    misses: int
    evictions: int
    expirations: int

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class OptimizationCache:
    """Fingerprint-keyed store with TTL expiry and insertion-order eviction.

    Entries are replaced, never mutated. All reads and writes take the same
    lock so eviction stays consistent if the cache is shared between workers.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
        ttl_seconds: Optional[float] = DEFAULT_CACHE_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        if ttl_seconds is not None and ttl_seconds < 0:
            raise ValueError("ttl_seconds must be non-negative")
        self._max_entries = max_entries
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def ttl_seconds(self) -> Optional[float]:
        return self._ttl_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, fingerprint: object) -> bool:
        with self._lock:
            entry = self._entries.get(fingerprint)  # type: ignore[arg-type]
            return entry is not None and not self._is_expired(entry, self._clock())

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        if self._ttl_seconds is None:
            return False
        return now - entry.inserted_at > self._ttl_seconds

    def get(self, fingerprint: str) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._entries.get(fingerprint)
            if entry is None:
                self._misses += 1
                return None
            if self._is_expired(entry, self._clock()):
                del self._entries[fingerprint]
                self._expirations += 1
                self._misses += 1
                log_event(
                    logger,
                    logging.DEBUG,
                    "concat.cache.expired",
                    fingerprint=fingerprint,
                )
                return None
            self._hits += 1
            return entry

    def put(
        self,
        fingerprint: str,
        run_lengths: Sequence[int],
        stats: OptimizationStats,
    ) -> CacheEntry:
        entry = CacheEntry(
            fingerprint=fingerprint,
            run_lengths=tuple(run_lengths),
            stats=stats,
            inserted_at=self._clock(),
        )
        with self._lock:
            self._entries.pop(fingerprint, None)
            while len(self._entries) >= self._max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                self._evictions += 1
                log_event(
                    logger,
                    logging.DEBUG,
                    "concat.cache.evicted",
                    fingerprint=oldest,
                    max_entries=self._max_entries,
                )
            self._entries[fingerprint] = entry
        return entry

    def prune_expired(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [
                key
                for key, entry in self._entries.items()
                if self._is_expired(entry, now)
            ]
            for key in expired:
                del self._entries[key]
            self._expirations += len(expired)
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0
            self._expirations = 0

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                max_size=self._max_entries,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                expirations=self._expirations,
            )
