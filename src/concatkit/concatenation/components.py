"""Reference atomic components.

These are thin stand-ins for a host framework's visual components: they know
their kind, their accessible text and how to render a single node. Styling is
carried as opaque modifiers and never applied here.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Optional

from .kinds import SegmentKind
from .modifiers import Modifier
from .models import CompositeEntity, Segment, new_id
from .nodes import Node, build


def resolve_content(value: Any) -> str:
    """Read text from a string, a zero-arg callable or a signal with ``peek()``."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    peek = getattr(value, "peek", None)
    if callable(peek):
        return str(peek() or "")
    if callable(value):
        return str(value() or "")
    return str(value)


class ConcatenatableMixin:
    """Shared concatenation surface for atomic components.

    Subclasses are frozen dataclasses declaring ``id`` and ``modifiers``
    fields and a ``kind`` class attribute, and implement ``render``.
    """

    kind: ClassVar[SegmentKind]
    id: str
    modifiers: tuple[Modifier, ...]

    def render(self) -> Node:
        raise NotImplementedError

    def to_segment(self) -> Segment:
        return Segment(
            id=self.id,
            component=self,
            kind=self.kind,
            render=self.render,
            modifiers=tuple(self.modifiers),
        )

    def is_concatenatable(self) -> bool:
        return True

    def concat(self, other: Any) -> CompositeEntity:
        from .engine import concat

        return concat(self, other)

    def __add__(self, other: Any) -> CompositeEntity:
        return self.concat(other)

    def with_modifiers(self, *modifiers: Modifier):
        return replace(
            self,
            modifiers=tuple(self.modifiers) + modifiers,
            id=new_id(self.kind.value),
        )


@dataclass(frozen=True)
class Text(ConcatenatableMixin):
    kind: ClassVar[SegmentKind] = SegmentKind.TEXT

    content: Any = ""
    title: Optional[str] = None
    accessibility_label: Optional[str] = None
    element: str = "span"
    dom_id: Optional[str] = None
    modifiers: tuple[Modifier, ...] = ()
    id: str = field(
        default_factory=lambda: new_id("text"), compare=False, repr=False
    )

    def text_content(self) -> str:
        return resolve_content(self.content)

    def with_content(self, content: str) -> "Text":
        return replace(self, content=content, id=new_id("text"))

    def render(self) -> Node:
        return build(
            self.element,
            {"id": self.dom_id, "class": "concatkit-text", "title": self.title},
            self.text_content(),
        )


@dataclass(frozen=True)
class Image(ConcatenatableMixin):
    kind: ClassVar[SegmentKind] = SegmentKind.IMAGE

    src: str = ""
    alt: Optional[str] = None
    accessibility_label: Optional[str] = None
    dom_id: Optional[str] = None
    modifiers: tuple[Modifier, ...] = ()
    id: str = field(
        default_factory=lambda: new_id("image"), compare=False, repr=False
    )

    def render(self) -> Node:
        return build(
            "img",
            {
                "id": self.dom_id,
                "class": "concatkit-image",
                "src": self.src,
                "alt": self.alt if self.alt is not None else "",
            },
        )


@dataclass(frozen=True)
class Button(ConcatenatableMixin):
    kind: ClassVar[SegmentKind] = SegmentKind.BUTTON

    title: str = ""
    accessibility_label: Optional[str] = None
    disabled: bool = False
    dom_id: Optional[str] = None
    modifiers: tuple[Modifier, ...] = ()
    id: str = field(
        default_factory=lambda: new_id("button"), compare=False, repr=False
    )

    def render(self) -> Node:
        return build(
            "button",
            {
                "id": self.dom_id,
                "class": "concatkit-button",
                "type": "button",
                "aria-label": self.accessibility_label,
                "disabled": "disabled" if self.disabled else None,
            },
            self.title,
        )


@dataclass(frozen=True)
class Link(ConcatenatableMixin):
    kind: ClassVar[SegmentKind] = SegmentKind.LINK

    title: str = ""
    href: str = "#"
    accessibility_label: Optional[str] = None
    dom_id: Optional[str] = None
    modifiers: tuple[Modifier, ...] = ()
    id: str = field(
        default_factory=lambda: new_id("link"), compare=False, repr=False
    )

    def render(self) -> Node:
        return build(
            "a",
            {
                "id": self.dom_id,
                "class": "concatkit-link",
                "href": self.href,
                "aria-label": self.accessibility_label,
            },
            self.title,
        )
