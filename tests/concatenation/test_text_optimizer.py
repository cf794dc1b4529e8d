from __future__ import annotations

import logging

import pytest

from concatkit.concatenation.cache import OptimizationCache
from concatkit.concatenation.components import Button, Image, Text
from concatkit.concatenation.engine import concat_all
from concatkit.concatenation.kinds import SegmentKind
from concatkit.concatenation.modifiers import Modifier
from concatkit.concatenation.optimizer import (
    NO_MODIFIERS_HASH,
    TextRunOptimizer,
    can_merge,
    polynomial_hash,
)
from concatkit.core.config import ConcatConfig

BOLD = Modifier("font", {"weight": "bold"})
RED = Modifier("foreground", {"color": "red"})


def _segments(*components):
    return concat_all(*components).segments


def test_adjacent_texts_merge_into_one(optimizer: TextRunOptimizer) -> None:
    segments = _segments(Text("Hello "), Text("World"))

    optimized = optimizer.optimize(segments)

    assert len(optimized) == 1
    assert optimized[0].component.text_content() == "Hello World"
    assert optimized[0].id == f"merged-{segments[0].id}-{segments[1].id}"
    assert optimized[0].render().text_content() == "Hello World"


def test_text_and_image_stay_unchanged(optimizer: TextRunOptimizer) -> None:
    segments = _segments(Text("Hi"), Image(src="pic.png", alt="Pic"))

    optimized = optimizer.optimize(segments)

    assert optimized == segments
    assert [s.kind for s in optimized] == [SegmentKind.TEXT, SegmentKind.IMAGE]


def test_merge_keeps_first_modifiers_and_properties(
    optimizer: TextRunOptimizer,
) -> None:
    first = Text("a", title="first").with_modifiers(BOLD)
    second = Text("b", title="second").with_modifiers(BOLD)

    (merged,) = optimizer.optimize(_segments(first, second))

    assert merged.modifiers == (BOLD,)
    assert merged.component.title == "first"
    assert merged.component.content == "ab"


def test_long_runs_fold_left_to_right(optimizer: TextRunOptimizer) -> None:
    segments = _segments(
        Text("a"), Text("b"), Text("c"), Image(src="i"), Text("d"), Text("e")
    )

    optimized = optimizer.optimize(segments)

    assert [s.kind for s in optimized] == [
        SegmentKind.TEXT,
        SegmentKind.IMAGE,
        SegmentKind.TEXT,
    ]
    assert optimized[0].component.content == "abc"
    assert optimized[2].component.content == "de"


@pytest.mark.parametrize(
    ("left", "right"),
    [
        ((BOLD,), ()),
        ((BOLD,), (RED,)),
        ((BOLD, RED), (RED, BOLD)),
        ((BOLD,), (Modifier("font", {"weight": "normal"}),)),
    ],
)
def test_modifier_differences_block_merging(left, right) -> None:
    a = Text("a").with_modifiers(*left).to_segment()
    b = Text("b").with_modifiers(*right).to_segment()

    assert not can_merge(a, b)


def test_deep_equal_modifier_properties_merge() -> None:
    a = Text("a").with_modifiers(
        Modifier("shadow", {"offset": {"x": 1, "y": 2}, "colors": ["a", "b"]})
    )
    b = Text("b").with_modifiers(
        Modifier("shadow", {"colors": ["a", "b"], "offset": {"y": 2, "x": 1}})
    )

    assert can_merge(a.to_segment(), b.to_segment())


def test_optimization_is_idempotent(optimizer: TextRunOptimizer) -> None:
    segments = _segments(
        Text("a"),
        Text("b").with_modifiers(BOLD),
        Text("c").with_modifiers(BOLD),
        Button("Go"),
        Text("d"),
        Text("e"),
    )

    once = optimizer.optimize(segments)
    twice = optimizer.optimize(once)

    assert twice == once
    assert [s.id for s in twice] == [s.id for s in once]


def test_cache_hit_returns_equal_output(clock) -> None:
    cache = OptimizationCache(max_entries=10, clock=clock)
    optimizer = TextRunOptimizer(cache)
    first = _segments(Text("x").with_modifiers(BOLD), Text("y").with_modifiers(BOLD))
    second = _segments(Text("x").with_modifiers(BOLD), Text("y").with_modifiers(BOLD))

    fresh = optimizer.optimize(first)
    cached = optimizer.optimize(second)
    uncached = TextRunOptimizer(OptimizationCache(clock=clock)).optimize(second)

    assert cached == fresh == uncached
    stats = optimizer.cache_stats()
    assert stats.hits == 1
    assert stats.misses == 1
    assert stats.size == 1


def test_cache_hit_merges_the_incoming_segments(optimizer: TextRunOptimizer) -> None:
    optimizer.optimize(_segments(Text("x", title="first"), Text("y"), Image(src="i")))
    segments = _segments(Text("x", title="second"), Text("y"), Image(src="i"))

    merged, image = optimizer.optimize(segments)

    assert optimizer.cache_stats().hits == 1
    assert merged.id == f"merged-{segments[0].id}-{segments[1].id}"
    assert merged.component.title == "second"
    assert merged.component.content == "xy"
    assert image is segments[2]


def test_different_text_gets_a_different_fingerprint(
    optimizer: TextRunOptimizer,
) -> None:
    a = optimizer.fingerprint(_segments(Text("a"), Text("b")))
    b = optimizer.fingerprint(_segments(Text("a"), Text("c")))
    c = optimizer.fingerprint(_segments(Image(src="1.png"), Image(src="2.png")))
    d = optimizer.fingerprint(_segments(Image(src="1.png"), Image(src="3.png")))

    assert a is not None and b is not None
    assert a != b
    assert c != d


def test_stats_are_recorded(optimizer: TextRunOptimizer) -> None:
    segments = _segments(Text("a"), Text("b"), Text("c"), Image(src="i"))

    optimized, stats = optimizer.optimize_with_stats(segments)

    assert len(optimized) == 2
    assert stats.original_count == 4
    assert stats.optimized_count == 2
    assert stats.merged_count == 2
    assert stats.reduction_percent == 50
    assert stats.processing_time_ms >= 0


def test_short_sequences_bypass_the_cache(optimizer: TextRunOptimizer) -> None:
    segments = _segments(Text("solo"))

    assert optimizer.optimize(segments) == segments
    assert optimizer.optimize(()) == ()
    assert optimizer.cache_stats().misses == 0
    assert len(optimizer.cache) == 0


def test_unserializable_modifier_degrades_to_uncached_path(
    optimizer: TextRunOptimizer,
) -> None:
    odd = Modifier("custom", {"value": object()})
    segments = _segments(Text("a").with_modifiers(odd), Text("b").with_modifiers(odd))

    assert optimizer.fingerprint(segments) is None
    optimized = optimizer.optimize(segments)

    assert len(optimized) == 1
    assert len(optimizer.cache) == 0


def test_fingerprint_degradation_logged_in_development(
    caplog: pytest.LogCaptureFixture,
) -> None:
    optimizer = TextRunOptimizer(config=ConcatConfig(development=True))
    odd = Modifier("custom", {"value": object()})

    with caplog.at_level(logging.DEBUG, logger="concatkit"):
        optimizer.optimize(
            _segments(Text("a").with_modifiers(odd), Text("b").with_modifiers(odd))
        )

    assert "concat.optimizer.fingerprint_degraded" in caplog.text


def test_failing_reactive_content_degrades(optimizer: TextRunOptimizer) -> None:
    def _broken() -> str:
        raise RuntimeError("signal disposed")

    segments = _segments(Text(_broken), Image(src="i"))

    assert optimizer.fingerprint(segments) is None


def test_reactive_content_is_read_at_optimization_time(
    optimizer: TextRunOptimizer,
) -> None:
    class _Signal:
        def __init__(self, value: str) -> None:
            self.value = value

        def peek(self) -> str:
            return self.value

    signal = _Signal("Hello ")
    segments = _segments(Text(signal), Text(lambda: "there"))

    (merged,) = optimizer.optimize(segments)

    assert merged.component.content == "Hello there"


def test_modifier_hash_uses_digest_or_polynomial_fallback() -> None:
    default = TextRunOptimizer()
    fallback = TextRunOptimizer(
        config=ConcatConfig(fingerprint_algorithm="no-such-digest")
    )
    modifiers = (BOLD,)

    assert default.modifier_hash(()) == NO_MODIFIERS_HASH
    digest = default.modifier_hash(modifiers)
    assert len(digest) == 16
    assert digest == default.modifier_hash((Modifier("font", {"weight": "bold"}),))
    poly = fallback.modifier_hash(modifiers)
    assert poly and poly != digest
    assert int(poly, 16) <= 0xFFFFFFFF


def test_polynomial_hash_is_32_bit() -> None:
    assert polynomial_hash("") == 0
    assert polynomial_hash("a") == 97
    assert 0 <= polynomial_hash("x" * 10_000) <= 0xFFFFFFFF


def test_should_optimize_checks_adjacent_text_pairs() -> None:
    assert TextRunOptimizer.should_optimize(_segments(Text("a"), Text("b")))
    assert TextRunOptimizer.should_optimize(
        _segments(Text("a").with_modifiers(BOLD), Text("b"))
    )
    assert not TextRunOptimizer.should_optimize(
        _segments(Text("a"), Image(src="i"), Text("b"))
    )
    assert not TextRunOptimizer.should_optimize(_segments(Text("a")))


def test_analyze_reports_without_touching_cache(optimizer: TextRunOptimizer) -> None:
    segments = _segments(
        Text("a"), Text("b"), Image(src="i"), Button("Go"), Text("c"), Text("d")
    )

    analysis = optimizer.analyze(segments)

    assert analysis.total_segments == 6
    assert analysis.text_segments == 4
    assert analysis.image_segments == 1
    assert analysis.interactive_segments == 1
    assert analysis.optimizable_text_pairs == 2
    assert analysis.estimated_reduction_percent == 33
    assert analysis.counts_by_kind[SegmentKind.BUTTON] == 1
    assert optimizer.cache_stats().misses == 0
    assert len(optimizer.cache) == 0


def test_clear_cache_resets_entries(optimizer: TextRunOptimizer) -> None:
    optimizer.optimize(_segments(Text("a"), Text("b")))
    assert len(optimizer.cache) == 1

    optimizer.clear_cache()

    assert len(optimizer.cache) == 0
    assert optimizer.cache_stats().misses == 0


def test_injected_empty_cache_is_used() -> None:
    cache = OptimizationCache(max_entries=3)
    optimizer = TextRunOptimizer(cache)

    optimizer.optimize(_segments(Text("a"), Text("b")))

    assert optimizer.cache is cache
    assert len(cache) == 1
