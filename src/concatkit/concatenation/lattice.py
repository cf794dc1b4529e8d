"""Accessibility metadata lattice.

Roles and structures form join-semilattices with ``composite`` and ``mixed``
as their top elements. Every operator here is commutative, associative and
idempotent, which is what makes concatenation order-insensitive with respect
to the resulting metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import Iterable


class AccessibilityRole(str, Enum):
    TEXT = "text"
    GROUP = "group"
    COMPOSITE = "composite"


class SemanticStructure(str, Enum):
    INLINE = "inline"
    BLOCK = "block"
    MIXED = "mixed"


_ROLE_RANK = {
    AccessibilityRole.TEXT: 0,
    AccessibilityRole.GROUP: 1,
    AccessibilityRole.COMPOSITE: 2,
}

_STRUCTURE_RANK = {
    SemanticStructure.INLINE: 0,
    SemanticStructure.BLOCK: 0,
    SemanticStructure.MIXED: 1,
}


def role_rank(role: AccessibilityRole) -> int:
    return _ROLE_RANK[role]


def structure_rank(structure: SemanticStructure) -> int:
    return _STRUCTURE_RANK[structure]


def merge_role(a: AccessibilityRole, b: AccessibilityRole) -> AccessibilityRole:
    if a is AccessibilityRole.TEXT and b is AccessibilityRole.TEXT:
        return AccessibilityRole.TEXT
    if AccessibilityRole.COMPOSITE in (a, b):
        return AccessibilityRole.COMPOSITE
    return AccessibilityRole.GROUP


def merge_structure(a: SemanticStructure, b: SemanticStructure) -> SemanticStructure:
    if a is b and a is not SemanticStructure.MIXED:
        return a
    return SemanticStructure.MIXED


@dataclass(frozen=True)
class Metadata:
    """Role/structure pair attached to every composite."""

    accessibility_role: AccessibilityRole
    semantic_structure: SemanticStructure

    def join(self, other: "Metadata") -> "Metadata":
        return Metadata(
            accessibility_role=merge_role(
                self.accessibility_role, other.accessibility_role
            ),
            semantic_structure=merge_structure(
                self.semantic_structure, other.semantic_structure
            ),
        )

    def dominates(self, other: "Metadata") -> bool:
        """True when this metadata ranks at least as high as ``other``."""
        return role_rank(self.accessibility_role) >= role_rank(
            other.accessibility_role
        ) and structure_rank(self.semantic_structure) >= structure_rank(
            other.semantic_structure
        )


def join_all(items: Iterable[Metadata]) -> Metadata:
    values = list(items)
    if not values:
        raise ValueError("join_all requires at least one metadata value")
    return reduce(Metadata.join, values)
