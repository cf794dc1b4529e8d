"""Composite renderer.

Turns a composite into one container node. The container carries the
accessibility attributes derived from the composite's metadata and an
aggregate label synthesized from its segments; its children are the rendered
(optionally text-run optimized) segments, in order.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from ..core.config import ConcatConfig, default_config
from .kinds import SegmentKind, is_interactive, profile_for
from .labels import compose_label, extract_label
from .lattice import AccessibilityRole, SemanticStructure
from .models import CompositeEntity, RenderResult, Segment
from .modifiers import AS_HTML, Modifier, ModifierContext, apply_modifiers
from .nodes import Node, build
from .optimizer import TextRunOptimizer

CONTAINER_TAG = "span"
CONTAINER_CLASS = "concatkit-composite"
COMPOSITE_ROLE_DESCRIPTION = "interactive content group"
INTERACTIVE_DESCRIPTION = "Contains interactive elements. Use Tab to navigate."

Builder = Callable[..., Node]
ModifierApplier = Callable[
    [Node, Sequence[Modifier], Optional[ModifierContext]], Node
]


@dataclass(frozen=True)
class AccessibilityNode:
    role: str
    label: str
    children: tuple["AccessibilityNode", ...] = field(default_factory=tuple)


def _as_nodes(result: RenderResult) -> list[Node]:
    if isinstance(result, Node):
        return [result]
    return list(result)


def has_interactive_content(segments: Sequence[Segment]) -> bool:
    return any(is_interactive(segment.kind) for segment in segments)


def unique_type_labels(segments: Sequence[Segment]) -> list[str]:
    seen: list[str] = []
    for segment in segments:
        label = profile_for(segment.kind).type_label
        if label not in seen:
            seen.append(label)
    return seen


def group_description(segments: Sequence[Segment]) -> str:
    types = unique_type_labels(segments)
    if len(types) == 1:
        return f"Group of {len(segments)} {types[0]} elements"
    return f"Group containing {', '.join(types)} elements"


def container_class(segments: Sequence[Segment]) -> str:
    kinds = {segment.kind for segment in segments}
    has_images = SegmentKind.IMAGE in kinds
    has_text = SegmentKind.TEXT in kinds
    has_controls = SegmentKind.BUTTON in kinds or SegmentKind.LINK in kinds
    if has_images and has_text and has_controls:
        return "mixed-content"
    if has_images and has_text:
        return "image-text-composition"
    if has_images:
        return "image-composition"
    if has_text:
        return "text-composition"
    return "generic-composition"


def flow_targets(nodes: Sequence[Node]) -> str:
    """Reading-order hint from child ids; empty when none are known statically."""
    ids = [node.get("id") for node in nodes]
    return " ".join(node_id for node_id in ids if node_id)


class CompositeRenderer:
    def __init__(
        self,
        optimizer: Optional[TextRunOptimizer] = None,
        *,
        config: Optional[ConcatConfig] = None,
        build: Builder = build,
        apply_modifiers: ModifierApplier = apply_modifiers,
    ) -> None:
        self._config = config or default_config()
        if optimizer is None:
            optimizer = TextRunOptimizer(config=self._config)
        self._optimizer = optimizer
        self._build = build
        self._apply_modifiers = apply_modifiers

    @property
    def optimizer(self) -> TextRunOptimizer:
        return self._optimizer

    def optimized_segments(self, entity: CompositeEntity) -> tuple[Segment, ...]:
        if not self._config.enable_optimization:
            return entity.segments
        return self._optimizer.optimize(entity.segments)

    def render(self, entity: CompositeEntity) -> Node:
        segments = self.optimized_segments(entity)
        raw_content = [m for m in entity.modifiers if m.type == AS_HTML]
        children: list[Node] = []
        for segment in segments:
            nodes = _as_nodes(segment.render())
            if raw_content and segment.kind is SegmentKind.TEXT and nodes:
                context = ModifierContext(
                    component_id=segment.id, component=segment.component
                )
                nodes[0] = self._apply_modifiers(nodes[0], raw_content, context)
            children.extend(nodes)

        attributes = {
            "class": f"{CONTAINER_CLASS} {container_class(segments)}",
            **self.accessibility_attributes(entity, segments, children),
        }
        label = compose_label(segments, entity.metadata.semantic_structure)
        if label:
            attributes["aria-label"] = label
        if self._config.debug:
            attributes["data-concatenated-segments"] = str(len(segments))
            attributes["data-semantic-structure"] = (
                entity.metadata.semantic_structure.value
            )
            attributes["data-accessibility-role"] = (
                entity.metadata.accessibility_role.value
            )
        return self._build(CONTAINER_TAG, attributes, *children)

    def accessibility_attributes(
        self,
        entity: CompositeEntity,
        segments: Sequence[Segment],
        children: Sequence[Node] = (),
    ) -> dict[str, str]:
        attributes: dict[str, str] = {}
        role = entity.metadata.accessibility_role
        if role is AccessibilityRole.GROUP:
            attributes["role"] = "group"
            attributes["aria-describedby"] = group_description(segments)
        elif role is AccessibilityRole.COMPOSITE:
            attributes["role"] = "group"
            attributes["aria-roledescription"] = COMPOSITE_ROLE_DESCRIPTION

        if (
            entity.metadata.semantic_structure is SemanticStructure.MIXED
            and len(segments) > 2
        ):
            targets = flow_targets(children)
            if targets:
                attributes["aria-flowto"] = targets

        if has_interactive_content(segments):
            attributes["aria-live"] = "polite"
            attributes["aria-atomic"] = "true"
            attributes["tabindex"] = "0"
            attributes["aria-description"] = INTERACTIVE_DESCRIPTION
        return attributes

    def accessibility_tree(self, entity: CompositeEntity) -> AccessibilityNode:
        segments = self.optimized_segments(entity)
        return AccessibilityNode(
            role=entity.metadata.accessibility_role.value,
            label=compose_label(segments, entity.metadata.semantic_structure),
            children=tuple(self._segment_node(segment) for segment in segments),
        )

    def _segment_node(self, segment: Segment) -> AccessibilityNode:
        if segment.kind is SegmentKind.COMPOSITE and isinstance(
            segment.component, CompositeEntity
        ):
            return self.accessibility_tree(segment.component)
        return AccessibilityNode(
            role=profile_for(segment.kind).role.value,
            label=extract_label(segment),
        )


_default_renderer: Optional[CompositeRenderer] = None
_default_lock = threading.Lock()


def get_default_renderer() -> CompositeRenderer:
    """Process-wide renderer used by ``CompositeEntity.render()``."""
    global _default_renderer
    with _default_lock:
        if _default_renderer is None:
            _default_renderer = CompositeRenderer()
        return _default_renderer


def set_default_renderer(renderer: Optional[CompositeRenderer]) -> None:
    """Replace (or with ``None``, reset) the process-wide renderer."""
    global _default_renderer
    with _default_lock:
        _default_renderer = renderer
