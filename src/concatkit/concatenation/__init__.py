"""Concatenation of renderable segments into accessible composites.

Layers, leaves first: ``kinds`` and ``lattice`` (capability table and
metadata algebra), ``models`` (segments and composites), ``engine``
(``concat``), ``optimizer``/``cache`` (text-run merging), ``labels`` and
``renderer`` (container assembly). ``components``, ``nodes`` and
``modifiers`` are reference implementations of the host collaborators.
"""

from .cache import CacheEntry, CacheStats, OptimizationCache, OptimizationStats
from .components import Button, ConcatenatableMixin, Image, Link, Text
from .engine import concat, concat_all, metadata_of, segments_of
from .kinds import KindProfile, SegmentKind, profile_for
from .labels import compose_label, extract_label, join_labels
from .lattice import (
    AccessibilityRole,
    Metadata,
    SemanticStructure,
    merge_role,
    merge_structure,
)
from .models import CompositeEntity, Concatenatable, Segment
from .modifiers import AS_HTML, Modifier, ModifierContext, apply_modifiers, as_html
from .nodes import Node, RawMarkup, build
from .optimizer import OptimizationAnalysis, TextRunOptimizer
from .renderer import (
    AccessibilityNode,
    CompositeRenderer,
    get_default_renderer,
    set_default_renderer,
)

__all__ = [
    "AS_HTML",
    "AccessibilityNode",
    "AccessibilityRole",
    "Button",
    "CacheEntry",
    "CacheStats",
    "CompositeEntity",
    "CompositeRenderer",
    "Concatenatable",
    "ConcatenatableMixin",
    "Image",
    "KindProfile",
    "Link",
    "Metadata",
    "Modifier",
    "ModifierContext",
    "Node",
    "OptimizationAnalysis",
    "OptimizationCache",
    "OptimizationStats",
    "RawMarkup",
    "Segment",
    "SegmentKind",
    "SemanticStructure",
    "Text",
    "TextRunOptimizer",
    "apply_modifiers",
    "as_html",
    "build",
    "compose_label",
    "concat",
    "concat_all",
    "extract_label",
    "get_default_renderer",
    "join_labels",
    "merge_role",
    "merge_structure",
    "metadata_of",
    "profile_for",
    "segments_of",
    "set_default_renderer",
]
