"""Hover/tooltip state machine for the bar chart.

``IDLE`` -> ``HOVERING`` on pointer-enter or click of a bar; ``HOVERING`` ->
``HOVERING`` when another bar is entered; back to ``IDLE`` on pointer-leave
(unless a click pinned the tooltip) or on a document click outside the chart
and tooltip subtrees.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .buckets import DayBucket
from .config import ChartLabels
from .dates import format_long
from .ui import ClickEvent, Document, Node, Rect, Tooltip, TooltipContent

logger = logging.getLogger(__name__)


class HoverPhase(str, Enum):
    IDLE = "idle"
    HOVERING = "hovering"


@dataclass(slots=True)
class HoverState:
    active_bucket: Optional[DayBucket] = None
    anchor: Optional[Rect] = None
    visible: bool = False
    pinned: bool = False


class InteractionController:
    """Owns the tooltip node and the document click listener of one chart."""

    def __init__(
        self,
        chart_root: Node,
        labels: ChartLabels,
        *,
        tooltip_width: float = 150.0,
        tooltip_height: float = 64.0,
    ) -> None:
        self._chart_root = chart_root
        self._labels = labels
        self._tooltip = Tooltip(tooltip_width, tooltip_height)
        self._document: Optional[Document] = None
        self.state = HoverState()

    @property
    def tooltip(self) -> Tooltip:
        return self._tooltip

    @property
    def phase(self) -> HoverPhase:
        return HoverPhase.HOVERING if self.state.visible else HoverPhase.IDLE

    @property
    def attached(self) -> bool:
        return self._document is not None

    def attach(self, document: Document) -> None:
        """Append the tooltip to the document body and listen for outside clicks."""
        if self._document is not None:
            return
        document.body.append(self._tooltip)
        document.add_listener(self.handle_document_click)
        self._document = document

    def detach(self) -> None:
        """Release the listener and the tooltip node. Safe to call twice."""
        document = self._document
        if document is None:
            return
        document.remove_listener(self.handle_document_click)
        document.body.remove(self._tooltip)
        self._document = None
        self._hide()

    def pointer_enter(self, bucket: DayBucket, anchor: Rect, bar_width: float) -> bool:
        if self.state.active_bucket is not bucket:
            self.state.pinned = False
        return self._show(bucket, anchor, bar_width)

    def click(self, bucket: DayBucket, anchor: Rect, bar_width: float) -> bool:
        shown = self._show(bucket, anchor, bar_width)
        if shown:
            self.state.pinned = True
        return shown

    def pointer_leave(self) -> None:
        if self.state.pinned:
            return
        self._hide()

    def handle_document_click(self, event: ClickEvent) -> None:
        target = event.target
        if self._chart_root.contains(target) or self._tooltip.contains(target):
            return
        self._hide()

    def reset(self) -> None:
        self._hide()

    def tooltip_position(self, anchor: Rect, bar_width: float) -> Tuple[float, float]:
        """Top-left page coordinates centring the tooltip above the bar pair."""
        scroll_x = self._document.scroll_x if self._document else 0.0
        scroll_y = self._document.scroll_y if self._document else 0.0
        left = anchor.left + scroll_x - 0.5 * self._tooltip.client_width + bar_width
        top = anchor.top + scroll_y - self._tooltip.client_height
        return max(left, scroll_x), max(top, scroll_y)

    def _content_for(self, bucket: DayBucket) -> TooltipContent:
        return TooltipContent(
            heading=format_long(bucket.date),
            visitors=bucket.visitors,
            pageviews=bucket.pageviews,
            visitors_label=self._labels.visitors,
            pageviews_label=self._labels.pageviews,
        )

    def _show(self, bucket: DayBucket, anchor: Rect, bar_width: float) -> bool:
        if self._document is None:
            logger.debug("Ignoring hover on detached chart", extra={"date": bucket.key})
            return False
        left, top = self.tooltip_position(anchor, bar_width)
        self._tooltip.show(self._content_for(bucket), anchor, left=left, top=top)
        self.state.active_bucket = bucket
        self.state.anchor = anchor
        self.state.visible = True
        return True

    def _hide(self) -> None:
        self._tooltip.hide()
        self.state = HoverState()


__all__ = ["HoverPhase", "HoverState", "InteractionController"]
