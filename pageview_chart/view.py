"""Chart view: composes bucket building, merging, geometry, interaction and refresh.

The view owns the only fetch call. A range change rebuilds the skeleton and
bumps a generation counter; each fetch is tagged with the generation it was
dispatched for and its response is dropped if the range moved on meanwhile.
Only one fetch runs at a time: calls that arrive while one is in flight are
coalesced into a single follow-up fetch.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple

from .buckets import DateRange, Dataset, build_skeleton
from .client import StatsClient, StatsFetchError
from .config import ChartLabels, Settings, get_settings
from .geometry import ChartLayout, Padding, compute_layout, default_height
from .interaction import InteractionController
from .logging_setup import bind_view_id
from .merge import merge_samples
from .scheduler import RefreshScheduler, utc_now
from .svg import render_svg
from .ui import Document, Node, Rect

logger = logging.getLogger(__name__)


class ChartView:
    """Renderable daily pageview/visitor chart for one date range at a time."""

    def __init__(
        self,
        client: StatsClient,
        *,
        labels: ChartLabels | None = None,
        document: Document | None = None,
        width: float | None = None,
        height: float | None = None,
        padding: Padding | None = None,
        origin: Tuple[float, float] = (0.0, 0.0),
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utc_now,
        view_id: str | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._client = client
        self.labels = labels or ChartLabels.from_settings(settings)
        self.document = document or Document()
        self.width = float(width if width is not None else settings.viewport_width)
        self.height = float(
            height or settings.chart_height or default_height(settings.viewport_width, settings.viewport_height)
        )
        self.padding = padding or Padding()
        self.origin = origin
        self.view_id = view_id or uuid.uuid4().hex[:12]

        self.root = Node("svg", classes=("chart",))
        self.interaction = InteractionController(
            self.root,
            self.labels,
            tooltip_width=settings.tooltip_width,
            tooltip_height=settings.tooltip_height,
        )
        self.scheduler = RefreshScheduler(
            self.load_data,
            lambda: self._range,
            interval=settings.refresh_interval_s,
            clock=clock,
        )

        self._range: Optional[DateRange] = None
        self._skeleton: Optional[Dataset] = None
        self._dataset: Optional[Dataset] = None
        self._generation = 0
        self._loading = False
        self._reload_requested = False
        self._active = False
        self._bar_nodes: Dict[int, Node] = {}

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    @property
    def active(self) -> bool:
        return self._active

    async def activate(self, date_range: DateRange) -> None:
        """Attach the tooltip and click listener, start the timer, and load ``date_range``.

        Always rebuilds and fetches, even when ``date_range`` matches the range
        shown before the last :meth:`deactivate`.
        """

        if not self._active:
            self._active = True
            self.interaction.attach(self.document)
            self.scheduler.start()
        self._rebuild(date_range)
        await self.load_data()

    async def deactivate(self) -> None:
        """Release the timer, listener and tooltip together."""

        if not self._active:
            return
        self._active = False
        await self.scheduler.stop()
        self.interaction.detach()

    # ------------------------------------------------------------------ #
    # Data
    # ------------------------------------------------------------------ #

    @property
    def date_range(self) -> Optional[DateRange]:
        return self._range

    @property
    def dataset(self) -> Optional[Dataset]:
        return self._dataset

    @property
    def generation(self) -> int:
        return self._generation

    async def set_range(self, date_range: DateRange) -> bool:
        """Rebuild and reload when the range bounds changed. Returns True on rebuild."""

        if date_range.same_bounds(self._range):
            return False
        self._rebuild(date_range)
        await self.load_data()
        return True

    def _rebuild(self, date_range: DateRange) -> None:
        self.interaction.reset()
        self._clear_bar_nodes()
        self._range = date_range
        self._skeleton = build_skeleton(date_range)
        self._dataset = self._skeleton.copy()
        self._generation += 1

    async def load_data(self) -> None:
        """Fetch and merge stats for the current range (coalescing concurrent calls)."""

        if self._range is None:
            return
        if self._loading:
            self._reload_requested = True
            return
        self._loading = True
        try:
            with bind_view_id(self.view_id):
                while True:
                    self._reload_requested = False
                    await self._fetch_and_merge()
                    if not self._reload_requested:
                        break
        finally:
            self._loading = False

    async def _fetch_and_merge(self) -> None:
        generation = self._generation
        date_range = self._range
        skeleton = self._skeleton
        if date_range is None or skeleton is None:
            return
        try:
            samples = await self._client.fetch_stats(date_range)
        except StatsFetchError as exc:
            logger.warning("Stats fetch failed; keeping previous dataset: %s", exc)
            return
        if generation != self._generation:
            logger.debug(
                "Discarding stale stats response",
                extra={"generation": generation, "current_generation": self._generation},
            )
            return
        self._dataset = merge_samples(skeleton, samples)

    # ------------------------------------------------------------------ #
    # Rendering
    # ------------------------------------------------------------------ #

    def layout(self) -> Optional[ChartLayout]:
        if self._dataset is None:
            return None
        return compute_layout(self._dataset, self.width, self.height, self.padding)

    def render(self) -> str:
        """SVG markup for the current dataset; empty when the chart is suppressed."""
        return render_svg(self.layout())

    def bar_node(self, index: int) -> Node:
        """Node standing in for the bar group of day ``index`` inside the chart subtree."""
        node = self._bar_nodes.get(index)
        if node is None:
            node = self.root.append(Node("g", classes=("bar",)))
            self._bar_nodes[index] = node
        return node

    def _clear_bar_nodes(self) -> None:
        for node in self._bar_nodes.values():
            self.root.remove(node)
        self._bar_nodes.clear()

    def bar_rect(self, index: int) -> Optional[Rect]:
        """On-screen bounding box of the bar pair for day ``index``."""
        layout = self.layout()
        if layout is None:
            return None
        bar = layout.bar_for(index)
        if bar is None:
            return None
        top = bar.top
        return Rect(
            left=self.origin[0] + layout.padding.left + bar.x,
            top=self.origin[1] + layout.padding.top + top,
            width=2 * bar.width,
            height=layout.inner_height - top,
        )

    # ------------------------------------------------------------------ #
    # Pointer events
    # ------------------------------------------------------------------ #

    def hover(self, index: int) -> bool:
        return self._bar_event(index, pinned=False)

    def click(self, index: int) -> bool:
        """Pin the tooltip on day ``index``, then let the click bubble to the document."""
        shown = self._bar_event(index, pinned=True)
        self.document.dispatch_click(self.bar_node(index))
        return shown

    def leave(self) -> None:
        self.interaction.pointer_leave()

    def _bar_event(self, index: int, *, pinned: bool) -> bool:
        layout = self.layout()
        rect = self.bar_rect(index)
        if layout is None or rect is None:
            return False
        bar = layout.bar_for(index)
        if pinned:
            return self.interaction.click(bar.bucket, rect, layout.bar_width)
        return self.interaction.pointer_enter(bar.bucket, rect, layout.bar_width)


__all__ = ["ChartView"]
