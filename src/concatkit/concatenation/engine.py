"""Concatenation engine.

``concat`` builds a flat :class:`CompositeEntity` from two operands. Composite
operands contribute their segments directly; atomic operands contribute the
segment returned by ``to_segment()``. A composite-kind segment (a composite
converted back into a segment) is expanded in place, so nesting never
survives concatenation and ``concat`` is associative.
"""

from __future__ import annotations

from functools import reduce
from typing import Any

from ..core.exceptions import ConstructionError
from .kinds import SegmentKind, profile_for
from .lattice import Metadata
from .models import CompositeEntity, Segment


def _segment_from(operand: Any) -> Segment:
    to_segment = getattr(operand, "to_segment", None)
    if not callable(to_segment):
        raise ConstructionError(
            f"{type(operand).__name__} cannot be concatenated: no to_segment()",
            operand=operand,
        )
    is_concatenatable = getattr(operand, "is_concatenatable", None)
    if callable(is_concatenatable) and not is_concatenatable():
        raise ConstructionError(
            f"{type(operand).__name__} reports it is not concatenatable",
            operand=operand,
        )
    try:
        segment = to_segment()
    except ConstructionError:
        raise
    except Exception as exc:
        raise ConstructionError(
            f"{type(operand).__name__}.to_segment() failed: {exc}",
            operand=operand,
        ) from exc
    if not isinstance(segment, Segment):
        raise ConstructionError(
            f"{type(operand).__name__}.to_segment() returned "
            f"{type(segment).__name__}, expected Segment",
            operand=operand,
        )
    return segment


def expand(operand: Any) -> tuple[tuple[Segment, ...], Metadata]:
    """Return the flat segments an operand contributes and its metadata."""
    if isinstance(operand, CompositeEntity):
        return operand.segments, operand.metadata
    segment = _segment_from(operand)
    if segment.kind is SegmentKind.COMPOSITE:
        inner = segment.component
        if not isinstance(inner, CompositeEntity):
            raise ConstructionError(
                f"Composite segment {segment.id} does not wrap a composite",
                operand=operand,
            )
        return inner.segments, inner.metadata
    profile = profile_for(segment.kind)
    return (segment,), Metadata(profile.role, profile.structure)


def segments_of(operand: Any) -> tuple[Segment, ...]:
    return expand(operand)[0]


def metadata_of(operand: Any) -> Metadata:
    return expand(operand)[1]


def concat(left: Any, right: Any) -> CompositeEntity:
    """Concatenate two operands into a new flat composite.

    Raises:
        ConstructionError: if either operand cannot yield a segment.
    """
    left_segments, left_metadata = expand(left)
    right_segments, right_metadata = expand(right)
    return CompositeEntity(
        segments=left_segments + right_segments,
        metadata=left_metadata.join(right_metadata),
    )


def concat_all(first: Any, *rest: Any) -> CompositeEntity:
    """Left-fold ``concat`` over operands; a single operand is wrapped alone."""
    if not rest:
        segments, metadata = expand(first)
        if isinstance(first, CompositeEntity):
            return first
        return CompositeEntity(segments=segments, metadata=metadata)
    return reduce(concat, rest, first)
