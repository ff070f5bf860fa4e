"""SVG markup for a computed :class:`ChartLayout`."""

from __future__ import annotations

import html
from typing import List, Optional

from .geometry import GRIDLINE_LABEL_X, ChartLayout

GRID_STROKE = "#DDD"
LABEL_FILL = "#999"


def _num(value: float) -> str:
    """Compact coordinate formatting (``12.0`` -> ``12``)."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _y_axis(layout: ChartLayout) -> List[str]:
    parts = [f'<g class="axes-y" transform="translate(0, {_num(layout.padding.top)})" text-anchor="end">']
    for line in layout.gridlines:
        y = _num(line.y)
        parts.append(
            f'<g><line stroke="{GRID_STROKE}" x1="{_num(line.x1)}" x2="{_num(line.x2)}" y1="{y}" y2="{y}" />'
            f'<text fill="{LABEL_FILL}" x="{GRIDLINE_LABEL_X}" y="{y}" dy="0.33em">{html.escape(line.label)}</text></g>'
        )
    parts.append("</g>")
    return parts


def _x_axis(layout: ChartLayout) -> List[str]:
    pad = layout.padding
    parts = [
        f'<g class="axes-x" transform="translate({_num(pad.left)}, {_num(pad.top + layout.inner_height)})" '
        'text-anchor="middle">'
    ]
    for tick in layout.ticks:
        x = _num(tick.x)
        inner = []
        if tick.show_mark:
            inner.append(f'<line stroke="{GRID_STROKE}" x1="{x}" x2="{x}" y1="0" y2="6" />')
        if tick.label:
            inner.append(f'<text fill="{LABEL_FILL}" x="{x}" y="10" dy="1em">{html.escape(tick.label)}</text>')
        if inner:
            parts.append("<g>" + "".join(inner) + "</g>")
    parts.append("</g>")
    return parts


def _bars(layout: ChartLayout) -> List[str]:
    pad = layout.padding
    parts = [f'<g class="bars" transform="translate({_num(pad.left)}, {_num(pad.top)})">']
    for bar in layout.bars:
        width = _num(bar.width)
        parts.append(
            f'<g class="bar" data-index="{bar.index}" data-date="{bar.bucket.key}">'
            f'<rect class="visitors" height="{_num(bar.visitors_height)}" width="{width}" '
            f'x="{_num(bar.x)}" y="{_num(bar.visitors_y)}" />'
            f'<rect class="pageviews" height="{_num(bar.pageviews_height)}" width="{width}" '
            f'x="{_num(bar.pageviews_x)}" y="{_num(bar.pageviews_y)}" />'
            "</g>"
        )
    parts.append("</g>")
    return parts


def render_svg(layout: Optional[ChartLayout]) -> str:
    """Return the chart markup, or an empty string when the chart is suppressed."""
    if layout is None:
        return ""
    parts = [
        '<div class="box"><div class="chart-container">',
        f'<svg class="chart" xmlns="http://www.w3.org/2000/svg" width="100%" height="{_num(layout.height)}">',
        '<g class="axes">',
        *_y_axis(layout),
        *_x_axis(layout),
        "</g>",
        *_bars(layout),
        "</svg></div></div>",
    ]
    return "".join(parts)


__all__ = ["render_svg"]
