"""Segment and composite value types.

Both types are frozen. Structural equality ignores identity data (ids and
render thunks), so two composites built from equal components compare equal
segment-for-segment.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Optional,
    Protocol,
    Sequence,
    Union,
    runtime_checkable,
)

from ..core.exceptions import ConstructionError
from .kinds import SegmentKind, profile_for
from .lattice import Metadata, join_all
from .modifiers import Modifier, has_modifier
from .nodes import Node

if TYPE_CHECKING:
    from .renderer import AccessibilityNode, CompositeRenderer

RenderResult = Union[Node, Sequence[Node]]


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class Segment:
    """Atomic renderable unit: a component, its kind and its style directives."""

    id: str = field(compare=False)
    component: Any
    kind: SegmentKind
    render: Callable[[], RenderResult] = field(compare=False, repr=False)
    modifiers: tuple[Modifier, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.kind, SegmentKind):
            raise ConstructionError(
                f"Segment kind must be a SegmentKind, got {self.kind!r}",
                operand=self.component,
            )
        if not callable(self.render):
            raise ConstructionError(
                f"Segment {self.id} has no callable render thunk",
                operand=self.component,
            )
        if not isinstance(self.modifiers, tuple):
            object.__setattr__(self, "modifiers", tuple(self.modifiers))


@runtime_checkable
class Concatenatable(Protocol):
    """Contract for entities that can take part in concatenation."""

    def to_segment(self) -> Segment: ...

    def concat(self, other: Any) -> "CompositeEntity": ...

    def is_concatenatable(self) -> bool: ...


@dataclass(frozen=True)
class CompositeEntity:
    """Flat, ordered list of segments plus their joined metadata."""

    segments: tuple[Segment, ...]
    metadata: Metadata
    modifiers: tuple[Modifier, ...] = ()
    id: str = field(default_factory=lambda: new_id("concat"), compare=False)

    def __post_init__(self) -> None:
        segments = tuple(self.segments)
        if not segments:
            raise ConstructionError("A composite needs at least one segment")
        for segment in segments:
            if not isinstance(segment, Segment):
                raise ConstructionError(
                    f"Composite segments must be Segment values, got {segment!r}",
                    operand=segment,
                )
            if segment.kind is SegmentKind.COMPOSITE or isinstance(
                segment.component, CompositeEntity
            ):
                raise ConstructionError(
                    "Composite segments must be flat; nested composite "
                    f"{segment.id} must be expanded first",
                    operand=segment,
                )
        profiles = [profile_for(segment.kind) for segment in segments]
        expected = join_all(Metadata(p.role, p.structure) for p in profiles)
        if self.metadata != expected:
            raise ConstructionError(
                f"Composite metadata {self.metadata!r} does not match the join "
                f"of its segments {expected!r}",
                operand=self.metadata,
            )
        object.__setattr__(self, "segments", segments)
        object.__setattr__(self, "modifiers", tuple(self.modifiers))

    @property
    def total_segments(self) -> int:
        return len(self.segments)

    @property
    def kind(self) -> SegmentKind:
        return SegmentKind.COMPOSITE

    def is_concatenatable(self) -> bool:
        return True

    def concat(self, other: Any) -> "CompositeEntity":
        from .engine import concat

        return concat(self, other)

    def __add__(self, other: Any) -> "CompositeEntity":
        return self.concat(other)

    def to_segment(self) -> Segment:
        """Wrap this composite so it can be embedded as a single segment."""
        return Segment(
            id=self.id,
            component=self,
            kind=SegmentKind.COMPOSITE,
            render=self.render,
        )

    def with_modifiers(self, *modifiers: Modifier) -> "CompositeEntity":
        return CompositeEntity(
            segments=self.segments,
            metadata=self.metadata,
            modifiers=self.modifiers + tuple(modifiers),
        )

    def has_modifier(self, modifier_type: str) -> bool:
        return has_modifier(self.modifiers, modifier_type)

    def render(self, renderer: Optional["CompositeRenderer"] = None) -> Node:
        from .renderer import get_default_renderer

        return (renderer or get_default_renderer()).render(self)

    def accessibility_label(self) -> str:
        from .labels import compose_label

        return compose_label(self.segments, self.metadata.semantic_structure)

    def accessibility_tree(
        self, renderer: Optional["CompositeRenderer"] = None
    ) -> "AccessibilityNode":
        from .renderer import get_default_renderer

        return (renderer or get_default_renderer()).accessibility_tree(self)
