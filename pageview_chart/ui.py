"""Headless UI host for the chart: a tiny node tree, a document, and the tooltip.

The chart runs without a browser, so the pieces the interaction layer needs
(hit-testing a click target against a subtree, scroll offsets, a listener
registry, a positioned tooltip box) are modelled here explicitly.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class Rect:
    """On-screen bounding box in viewport coordinates."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


class Node:
    """Minimal element: tag, classes, style and a parent/children tree."""

    def __init__(self, tag: str = "div", *, classes: tuple[str, ...] = ()) -> None:
        self.tag = tag
        self.classes = set(classes)
        self.style: Dict[str, str] = {}
        self.parent: Optional[Node] = None
        self.children: List[Node] = []
        self.inner_html = ""

    def append(self, child: "Node") -> "Node":
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove(self, child: "Node") -> None:
        if child in self.children:
            self.children.remove(child)
            child.parent = None

    def contains(self, other: Optional["Node"]) -> bool:
        """True when ``other`` is this node or one of its descendants."""
        node = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    @property
    def attached(self) -> bool:
        return self.parent is not None

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"<Node {self.tag} classes={sorted(self.classes)}>"


@dataclass(slots=True)
class ClickEvent:
    target: Optional[Node]
    type: str = "click"


Listener = Callable[[ClickEvent], None]


@dataclass(slots=True)
class Document:
    """Body node, viewport scroll offsets and document-level click listeners."""

    body: Node = field(default_factory=lambda: Node("body"))
    scroll_x: float = 0.0
    scroll_y: float = 0.0
    _listeners: List[Listener] = field(default_factory=list)

    def add_listener(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def dispatch_click(self, target: Optional[Node]) -> ClickEvent:
        event = ClickEvent(target=target)
        for listener in list(self._listeners):
            listener(event)
        return event


@dataclass(frozen=True, slots=True)
class TooltipContent:
    heading: str
    visitors: int
    pageviews: int
    visitors_label: str
    pageviews_label: str

    def to_html(self) -> str:
        return (
            '<div class="tooltip-inner">'
            f'<div class="heading">{html.escape(self.heading)}</div>'
            '<div class="content">'
            f'<div class="visitors"><div class="amount">{self.visitors}</div>'
            f"<div>{html.escape(self.visitors_label)}</div></div>"
            f'<div class="pageviews"><div class="amount">{self.pageviews}</div>'
            f"<div>{html.escape(self.pageviews_label)}</div></div>"
            "</div></div>"
            '<div class="tooltip-arrow"></div>'
        )


class Tooltip(Node):
    """Singleton tooltip box owned by one chart view."""

    def __init__(self, width: float, height: float) -> None:
        super().__init__("div", classes=("tooltip",))
        self.client_width = float(width)
        self.client_height = float(height)
        self.content: Optional[TooltipContent] = None
        self.anchor: Optional[Rect] = None
        self.left = 0.0
        self.top = 0.0
        self.style["display"] = "none"

    @property
    def visible(self) -> bool:
        return self.style.get("display") == "block"

    def show(self, content: TooltipContent, anchor: Rect, *, left: float, top: float) -> None:
        """Fill the box and place its top-left corner at (left, top) in page coordinates."""
        self.content = content
        self.anchor = anchor
        self.inner_html = content.to_html()
        self.left = left
        self.top = top
        self.style.update({"display": "block", "left": f"{left:g}px", "top": f"{top:g}px"})

    def hide(self) -> None:
        self.style["display"] = "none"

    def render(self) -> str:
        style = ";".join(f"{key}:{value}" for key, value in self.style.items())
        return f'<div class="tooltip" style="{html.escape(style)}">{self.inner_html}</div>'


__all__ = ["ClickEvent", "Document", "Node", "Rect", "Tooltip", "TooltipContent"]
