"""Style directives and the reference modifier-application collaborator.

Only ``{type, properties}`` matter to concatenation: they drive equality for
text-run merging and the optimizer fingerprint. Visual application belongs to
the host framework; :func:`apply_modifiers` only understands the raw-content
directive.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Sequence

from .nodes import Node, RawMarkup

AS_HTML = "as_html"


@dataclass(frozen=True)
class Modifier:
    type: str
    properties: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ModifierContext:
    component_id: str
    component: Any = None
    phase: str = "creation"


def as_html(**properties: Any) -> Modifier:
    return Modifier(AS_HTML, dict(properties))


def has_modifier(modifiers: Sequence[Modifier], modifier_type: str) -> bool:
    return any(modifier.type == modifier_type for modifier in modifiers)


def apply_modifiers(
    node: Node,
    modifiers: Sequence[Modifier],
    context: Optional[ModifierContext] = None,
) -> Node:
    """Apply the directives this collaborator understands to ``node``."""
    _ = context
    result = node
    for modifier in modifiers:
        if modifier.type == AS_HTML:
            result = replace(
                result,
                attributes={**result.attributes, "data-raw-content": "true"},
                children=(RawMarkup(result.text_content()),),
            )
    return result
