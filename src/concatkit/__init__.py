"""Composable, accessibility-aware concatenation of renderable UI segments."""

from .concatenation import (
    AccessibilityRole,
    Button,
    CompositeEntity,
    CompositeRenderer,
    Image,
    Link,
    Metadata,
    Modifier,
    OptimizationCache,
    Segment,
    SegmentKind,
    SemanticStructure,
    Text,
    TextRunOptimizer,
    concat,
    concat_all,
)
from .core.config import ConcatConfig, load_config
from .core.exceptions import ConcatError, ConfigError, ConstructionError

__version__ = "0.3.0"

__all__ = [
    "AccessibilityRole",
    "Button",
    "CompositeEntity",
    "CompositeRenderer",
    "ConcatConfig",
    "ConcatError",
    "ConfigError",
    "ConstructionError",
    "Image",
    "Link",
    "Metadata",
    "Modifier",
    "OptimizationCache",
    "Segment",
    "SegmentKind",
    "SemanticStructure",
    "Text",
    "TextRunOptimizer",
    "concat",
    "concat_all",
    "load_config",
]
