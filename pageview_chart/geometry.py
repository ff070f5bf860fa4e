"""Pixel geometry for the daily bar chart.

All coordinates are relative to the inner plotting area (inside the padding),
except gridline endpoints which span the full SVG width like the axis labels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .axis import TICK_COUNT, gridline_values, tick_step
from .buckets import Dataset, DayBucket
from .dates import format_long, format_short
from .numbers import format_pretty

BAR_GROUP_FILL = 0.9
BAR_PADDING_RATIO = 0.05
DENSE_RANGE_DAYS = 90
DENSE_TICK_EVERY = 7
GRIDLINE_X_START = 30
GRIDLINE_LABEL_X = 24
MIN_HEIGHT = 240
MAX_HEIGHT = 360


@dataclass(frozen=True, slots=True)
class Padding:
    left: float = 36
    right: float = 12
    top: float = 6
    bottom: float = 26


@dataclass(frozen=True, slots=True)
class GridLine:
    value: int
    y: float
    x1: float
    x2: float
    label: str


@dataclass(frozen=True, slots=True)
class AxisTick:
    index: int
    x: float
    show_mark: bool
    label: Optional[str] = None


@dataclass(frozen=True, slots=True)
class BarPair:
    """Visitors and pageviews rects for one day, side by side."""

    index: int
    bucket: DayBucket
    x: float
    width: float
    visitors_y: float
    visitors_height: float
    pageviews_y: float
    pageviews_height: float

    @property
    def pageviews_x(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return min(self.visitors_y, self.pageviews_y)


@dataclass(frozen=True, slots=True)
class ChartLayout:
    width: float
    height: float
    padding: Padding
    inner_width: float
    inner_height: float
    tick_width: float
    bar_width: float
    bar_padding: float
    y_max: int
    step: int
    gridlines: Tuple[GridLine, ...]
    ticks: Tuple[AxisTick, ...]
    bars: Tuple[BarPair, ...]

    def x(self, index: int) -> float:
        return index * self.tick_width

    def y(self, value: float) -> float:
        return _scale_y(value, self.y_max, self.inner_height)

    def bar_for(self, index: int) -> Optional[BarPair]:
        for bar in self.bars:
            if bar.index == index:
                return bar
        return None


def _scale_y(value: float, y_max: int, inner_height: float) -> float:
    if y_max <= 0:
        return inner_height
    return inner_height * (1 - value / y_max)


def default_height(viewport_width: float, viewport_height: float) -> float:
    """Chart height when none is configured, bounded to [240, 360]."""
    return max(MIN_HEIGHT, min(viewport_height / 3, viewport_width / 2, MAX_HEIGHT))


def _axis_ticks(dataset: Dataset, tick_width: float) -> Tuple[AxisTick, ...]:
    count = len(dataset)
    ticks = []
    for index, bucket in enumerate(dataset):
        label = None
        if index == 0:
            label = format_long(bucket.date)
        elif index == count - 1:
            label = format_short(bucket.date)
        ticks.append(
            AxisTick(
                index=index,
                x=index * tick_width + 0.5 * tick_width,
                show_mark=count < DENSE_RANGE_DAYS or index % DENSE_TICK_EVERY == 0,
                label=label,
            )
        )
    return tuple(ticks)


def compute_layout(
    dataset: Dataset,
    width: float,
    height: float,
    padding: Padding | None = None,
    *,
    format_tick: Callable[[int], str] = format_pretty,
) -> Optional[ChartLayout]:
    """Return the chart geometry, or ``None`` when nothing should be drawn.

    Zero or one bucket, a non-positive width, or an empty plotting area all
    suppress the chart entirely.
    """

    padding = padding or Padding()
    count = len(dataset)
    if count <= 1 or width <= 0:
        return None
    inner_width = width - padding.left - padding.right
    inner_height = height - padding.top - padding.bottom
    if inner_width <= 0 or inner_height <= 0:
        return None

    y_max = max(int(dataset.y_max), 0)
    tick_width = inner_width / count
    bar_width = BAR_GROUP_FILL * tick_width * 0.5
    bar_padding = BAR_PADDING_RATIO * tick_width

    gridlines = tuple(
        GridLine(
            value=value,
            y=_scale_y(value, y_max, inner_height),
            x1=GRIDLINE_X_START,
            x2=width,
            label=format_tick(value),
        )
        for value in gridline_values(y_max, TICK_COUNT)
    )

    bars = []
    for index, bucket in enumerate(dataset):
        if bucket.pageviews == 0:
            continue
        x = index * tick_width + bar_padding
        bars.append(
            BarPair(
                index=index,
                bucket=bucket,
                x=x,
                width=bar_width,
                visitors_y=_scale_y(bucket.visitors, y_max, inner_height),
                visitors_height=bucket.visitors / y_max * inner_height if y_max else 0.0,
                pageviews_y=_scale_y(bucket.pageviews, y_max, inner_height),
                pageviews_height=bucket.pageviews / y_max * inner_height if y_max else 0.0,
            )
        )

    return ChartLayout(
        width=width,
        height=height,
        padding=padding,
        inner_width=inner_width,
        inner_height=inner_height,
        tick_width=tick_width,
        bar_width=bar_width,
        bar_padding=bar_padding,
        y_max=y_max,
        step=tick_step(y_max, TICK_COUNT),
        gridlines=gridlines,
        ticks=_axis_ticks(dataset, tick_width),
        bars=tuple(bars),
    )


__all__ = [
    "AxisTick",
    "BarPair",
    "ChartLayout",
    "GridLine",
    "Padding",
    "compute_layout",
    "default_height",
]
