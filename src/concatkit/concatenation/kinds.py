"""Closed enumeration of segment kinds and their capability table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .lattice import AccessibilityRole, SemanticStructure


class SegmentKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    BUTTON = "button"
    LINK = "link"
    COMPOSITE = "composite"
    COMPONENT = "component"


@dataclass(frozen=True)
class KindProfile:
    """Per-kind defaults used by the engine, optimizer and renderer.

    ``role`` and ``structure`` are the values a lone segment of this kind
    contributes to the lattice. For ``COMPOSITE`` they are placeholders; the
    wrapped entity's own metadata is used instead.
    """

    role: AccessibilityRole
    structure: SemanticStructure
    label_fallback: str
    type_label: str
    interactive: bool = False
    text_like: bool = False


_PROFILES: Mapping[SegmentKind, KindProfile] = MappingProxyType(
    {
        SegmentKind.TEXT: KindProfile(
            role=AccessibilityRole.TEXT,
            structure=SemanticStructure.INLINE,
            label_fallback="",
            type_label="text",
            text_like=True,
        ),
        SegmentKind.IMAGE: KindProfile(
            role=AccessibilityRole.GROUP,
            structure=SemanticStructure.INLINE,
            label_fallback="Image",
            type_label="image",
        ),
        SegmentKind.BUTTON: KindProfile(
            role=AccessibilityRole.GROUP,
            structure=SemanticStructure.INLINE,
            label_fallback="Button",
            type_label="button",
            interactive=True,
        ),
        SegmentKind.LINK: KindProfile(
            role=AccessibilityRole.GROUP,
            structure=SemanticStructure.INLINE,
            label_fallback="Link",
            type_label="link",
            interactive=True,
        ),
        SegmentKind.COMPOSITE: KindProfile(
            role=AccessibilityRole.COMPOSITE,
            structure=SemanticStructure.MIXED,
            label_fallback="",
            type_label="composite",
        ),
        SegmentKind.COMPONENT: KindProfile(
            role=AccessibilityRole.COMPOSITE,
            structure=SemanticStructure.MIXED,
            label_fallback="",
            type_label="component",
        ),
    }
)


def profile_for(kind: SegmentKind) -> KindProfile:
    return _PROFILES[kind]


def is_interactive(kind: SegmentKind) -> bool:
    return _PROFILES[kind].interactive
