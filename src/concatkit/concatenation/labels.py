"""Aggregate accessible-label composition.

Each segment yields one label; the labels are joined according to the
composite's semantic structure. Mixed content uses a sentence-boundary
heuristic (terminal punctuation, leading capital) that only understands
Latin-script text.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional, Sequence

from .kinds import SegmentKind, profile_for
from .lattice import SemanticStructure
from .models import CompositeEntity, Segment
from .optimizer import text_of

_TERMINAL_PUNCTUATION = re.compile(r"[.!?:;]$")
_LEADING_CAPITAL = re.compile(r"^[A-Z]")

INLINE_SEPARATOR = " "
BLOCK_SEPARATOR = ". "


def _first_text(*values: Any) -> Optional[str]:
    for value in values:
        if isinstance(value, str) and value:
            return value
    return None


def extract_label(segment: Segment) -> str:
    component = segment.component
    kind = segment.kind
    accessible_name = getattr(component, "accessibility_label", None)
    if kind is SegmentKind.TEXT:
        return _first_text(text_of(segment), getattr(component, "title", None)) or ""
    if kind is SegmentKind.IMAGE:
        return (
            _first_text(getattr(component, "alt", None), accessible_name)
            or profile_for(kind).label_fallback
        )
    if kind in (SegmentKind.BUTTON, SegmentKind.LINK):
        return (
            _first_text(getattr(component, "title", None), accessible_name)
            or profile_for(kind).label_fallback
        )
    if kind is SegmentKind.COMPOSITE and isinstance(component, CompositeEntity):
        return component.accessibility_label()
    return _first_text(accessible_name) or profile_for(kind).label_fallback


def needs_sentence_break(left: str, right: str) -> bool:
    return not _TERMINAL_PUNCTUATION.search(left.strip()) and bool(
        _LEADING_CAPITAL.match(right.strip())
    )


def _smart_join(labels: Sequence[str]) -> str:
    parts: list[str] = [labels[0]]
    for previous, current in zip(labels, labels[1:]):
        if needs_sentence_break(previous, current):
            parts.append(BLOCK_SEPARATOR)
        else:
            parts.append(INLINE_SEPARATOR)
        parts.append(current)
    return "".join(parts)


def join_labels(labels: Iterable[str], structure: SemanticStructure) -> str:
    cleaned = [label.strip() for label in labels if label and label.strip()]
    if not cleaned:
        return ""
    if len(cleaned) == 1:
        return cleaned[0]
    if structure is SemanticStructure.BLOCK:
        return BLOCK_SEPARATOR.join(cleaned)
    if structure is SemanticStructure.MIXED:
        return _smart_join(cleaned)
    return INLINE_SEPARATOR.join(cleaned)


def compose_label(segments: Sequence[Segment], structure: SemanticStructure) -> str:
    return join_labels((extract_label(segment) for segment in segments), structure)
