"""Minimal output-node primitive.

Rendering collaborators build trees of :class:`Node` values through
:func:`build`. Children are nodes, plain strings (escaped text) or
:class:`RawMarkup` (trusted markup inserted verbatim by the consumer).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional, Union


@dataclass(frozen=True)
class RawMarkup:
    html: str


Child = Union["Node", str, RawMarkup]


@dataclass(frozen=True)
class Node:
    tag: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    children: tuple[Child, ...] = ()

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(name, default)

    def text_content(self) -> str:
        parts: list[str] = []
        for child in self.children:
            if isinstance(child, Node):
                parts.append(child.text_content())
            elif isinstance(child, RawMarkup):
                parts.append(child.html)
            else:
                parts.append(child)
        return "".join(parts)

    def iter_nodes(self) -> Iterator["Node"]:
        yield self
        for child in self.children:
            if isinstance(child, Node):
                yield from child.iter_nodes()


def _flatten_children(children: Iterable[Any]) -> Iterator[Child]:
    for child in children:
        if child is None:
            continue
        if isinstance(child, (Node, RawMarkup, str)):
            yield child
        elif isinstance(child, (list, tuple)):
            yield from _flatten_children(child)
        else:
            yield str(child)


def build(
    tag: str, attributes: Optional[Mapping[str, Any]] = None, *children: Any
) -> Node:
    """Create a node; ``None`` attribute values and ``None`` children are dropped."""
    attrs: dict[str, str] = {}
    for key, value in (attributes or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            attrs[key] = "true" if value else "false"
        else:
            attrs[key] = str(value)
    return Node(tag=tag, attributes=attrs, children=tuple(_flatten_children(children)))
