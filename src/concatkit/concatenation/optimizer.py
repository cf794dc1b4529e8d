"""Text-run optimizer.

Merges adjacent text segments that carry identical style directives into a
single segment, so a composite renders fewer output nodes. Merge plans are
cached by a fingerprint of the ordered ``(kind, text, modifier-hash)`` tuples
and replayed against the incoming segments on a hit.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from functools import reduce
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Sequence

from ..core.config import ConcatConfig, default_config
from ..core.logging_utils import log_event
from .cache import CacheStats, OptimizationCache, OptimizationStats
from .components import resolve_content
from .kinds import SegmentKind
from .models import Segment
from .modifiers import Modifier

logger = logging.getLogger(__name__)

NO_MODIFIERS_HASH = "none"


@dataclass(frozen=True)
class OptimizationAnalysis:
    total_segments: int
    text_segments: int
    image_segments: int
    interactive_segments: int
    optimizable_text_pairs: int
    estimated_reduction_percent: int
    counts_by_kind: Mapping[SegmentKind, int] = field(default_factory=dict)


def polynomial_hash(value: str) -> int:
    """32-bit ``h * 31 + c`` string hash, used when no digest is available."""
    result = 0
    for char in value:
        result = (result * 31 + ord(char)) & 0xFFFFFFFF
    return result


def _resolve_digest(algorithm: str) -> Optional[Callable[[bytes], str]]:
    try:
        hashlib.new(algorithm)
    except (ValueError, TypeError):
        return None
    return lambda payload: hashlib.new(algorithm, payload).hexdigest()


def text_of(segment: Segment) -> str:
    text_content = getattr(segment.component, "text_content", None)
    if callable(text_content):
        return str(text_content())
    return resolve_content(getattr(segment.component, "content", None))


def _fingerprint_text(segment: Segment) -> str:
    if segment.kind is SegmentKind.TEXT:
        return text_of(segment)
    if segment.kind is SegmentKind.COMPOSITE:
        return segment.id
    # Frozen dataclass components repr by value; anything else reprs by identity.
    return repr(segment.component)


def _supports_merge(segment: Segment) -> bool:
    return callable(getattr(segment.component, "with_content", None))


def can_merge(a: Segment, b: Segment) -> bool:
    """Both plain text, with pairwise-identical modifier lists."""
    if a.kind is not SegmentKind.TEXT or b.kind is not SegmentKind.TEXT:
        return False
    if len(a.modifiers) != len(b.modifiers):
        return False
    for left, right in zip(a.modifiers, b.modifiers):
        if left.type != right.type or left.properties != right.properties:
            return False
    return _supports_merge(a)


def merge_segments(a: Segment, b: Segment) -> Segment:
    component = a.component.with_content(text_of(a) + text_of(b))
    return Segment(
        id=f"merged-{a.id}-{b.id}",
        component=component,
        kind=SegmentKind.TEXT,
        render=component.render,
        modifiers=a.modifiers,
    )


def optimization_stats(
    original: Sequence[Segment],
    optimized: Sequence[Segment],
    processing_time_ms: float = 0.0,
) -> OptimizationStats:
    reduction = len(original) - len(optimized)
    reduction_percent = round(reduction / len(original) * 100) if original else 0
    return OptimizationStats(
        original_count=len(original),
        optimized_count=len(optimized),
        reduction_percent=reduction_percent,
        merged_count=reduction,
        processing_time_ms=processing_time_ms,
    )


class TextRunOptimizer:
    """Folds mergeable adjacent text segments, backed by an injectable cache."""

    def __init__(
        self,
        cache: Optional[OptimizationCache] = None,
        *,
        config: Optional[ConcatConfig] = None,
    ) -> None:
        self._config = config or default_config()
        if cache is None:
            cache = OptimizationCache(
                max_entries=self._config.cache_max_entries,
                ttl_seconds=self._config.cache_ttl_seconds,
            )
        self._cache = cache
        self._digest = _resolve_digest(self._config.fingerprint_algorithm)
        if self._digest is None:
            log_event(
                logger,
                logging.DEBUG,
                "concat.optimizer.digest_unavailable",
                algorithm=self._config.fingerprint_algorithm,
            )

    @property
    def cache(self) -> OptimizationCache:
        return self._cache

    def modifier_hash(self, modifiers: Sequence[Modifier]) -> str:
        if not modifiers:
            return NO_MODIFIERS_HASH
        payload = json.dumps(
            [{"type": m.type, "props": dict(m.properties)} for m in modifiers],
            sort_keys=True,
            separators=(",", ":"),
        )
        length = self._config.fingerprint_length
        if self._digest is not None:
            return self._digest(payload.encode("utf-8"))[:length]
        return format(polynomial_hash(payload), "x")[:length]

    def fingerprint(self, segments: Sequence[Segment]) -> Optional[str]:
        """Cache key for ``segments``, or ``None`` when it cannot be computed."""
        try:
            parts = [
                [
                    segment.kind.value,
                    _fingerprint_text(segment),
                    self.modifier_hash(segment.modifiers),
                ]
                for segment in segments
            ]
            return json.dumps(parts, ensure_ascii=False, separators=(",", ":"))
        except Exception as exc:
            if self._config.development:
                log_event(
                    logger,
                    logging.DEBUG,
                    "concat.optimizer.fingerprint_degraded",
                    segments=len(segments),
                    exc=exc,
                )
            return None

    def optimize(self, segments: Sequence[Segment]) -> tuple[Segment, ...]:
        return self.optimize_with_stats(segments)[0]

    def optimize_with_stats(
        self, segments: Sequence[Segment]
    ) -> tuple[tuple[Segment, ...], OptimizationStats]:
        started = time.perf_counter()
        segments = tuple(segments)
        if len(segments) < 2:
            return segments, optimization_stats(segments, segments)

        key = self.fingerprint(segments)
        if key is not None:
            cached = self._cache.get(key)
            if cached is not None:
                log_event(
                    logger,
                    logging.DEBUG,
                    "concat.optimizer.cache_hit",
                    segments=len(segments),
                    optimized=cached.stats.optimized_count,
                )
                return self._apply_plan(segments, cached.run_lengths), cached.stats

        plan = self._plan(segments)
        optimized = self._apply_plan(segments, plan)
        elapsed_ms = (time.perf_counter() - started) * 1000
        stats = optimization_stats(segments, optimized, elapsed_ms)
        if key is not None:
            self._cache.put(key, plan, stats)
            log_event(
                logger,
                logging.DEBUG,
                "concat.optimizer.cache_miss",
                segments=stats.original_count,
                optimized=stats.optimized_count,
                reduction_percent=stats.reduction_percent,
            )
        if self._config.development and elapsed_ms > self._config.slow_optimization_ms:
            log_event(
                logger,
                logging.INFO,
                "concat.optimizer.slow",
                segments=len(segments),
                elapsed_ms=round(elapsed_ms, 2),
            )
        return optimized, stats

    @staticmethod
    def _plan(segments: Sequence[Segment]) -> tuple[int, ...]:
        """Lengths of the maximal mergeable runs, left to right."""
        run_lengths: list[int] = []
        head: Optional[Segment] = None
        for segment in segments:
            if head is not None and can_merge(head, segment):
                run_lengths[-1] += 1
            else:
                head = segment
                run_lengths.append(1)
        return tuple(run_lengths)

    @staticmethod
    def _apply_plan(
        segments: Sequence[Segment], run_lengths: Sequence[int]
    ) -> tuple[Segment, ...]:
        result: list[Segment] = []
        start = 0
        for length in run_lengths:
            result.append(reduce(merge_segments, segments[start : start + length]))
            start += length
        return tuple(result)

    @staticmethod
    def should_optimize(segments: Sequence[Segment]) -> bool:
        """Cheap pre-check: at least one adjacent text/text pair exists."""
        return any(
            current.kind is SegmentKind.TEXT and following.kind is SegmentKind.TEXT
            for current, following in zip(segments, segments[1:])
        )

    @staticmethod
    def analyze(segments: Sequence[Segment]) -> OptimizationAnalysis:
        counts: dict[SegmentKind, int] = {}
        optimizable_pairs = 0
        for index, segment in enumerate(segments):
            counts[segment.kind] = counts.get(segment.kind, 0) + 1
            if index + 1 < len(segments) and can_merge(segment, segments[index + 1]):
                optimizable_pairs += 1
        total = len(segments)
        return OptimizationAnalysis(
            total_segments=total,
            text_segments=counts.get(SegmentKind.TEXT, 0),
            image_segments=counts.get(SegmentKind.IMAGE, 0),
            interactive_segments=counts.get(SegmentKind.BUTTON, 0)
            + counts.get(SegmentKind.LINK, 0),
            optimizable_text_pairs=optimizable_pairs,
            estimated_reduction_percent=(
                round(optimizable_pairs / total * 100) if total else 0
            ),
            counts_by_kind=counts,
        )

    @staticmethod
    def optimization_stats(
        original: Sequence[Segment], optimized: Sequence[Segment]
    ) -> OptimizationStats:
        return optimization_stats(original, optimized)

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    def clear_cache(self) -> None:
        self._cache.clear()
