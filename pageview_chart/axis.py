"""Vertical axis scaling: a round step for up to four labelled gridlines."""

from __future__ import annotations

from typing import List

TICK_COUNT = 3
_START_ROUND = 1_000_000


def step(max_value: int, tick_count: int = TICK_COUNT) -> int:
    """Return a "nice" step <= ``max_value / tick_count``.

    The naive step is truncated down to a multiple of the largest power of ten
    (capped at one million) for which ``round * tick_count <= max_value``.
    Returns 0 for a flat axis; see :func:`tick_step` for the caller fallback.
    """
    max_value = int(max_value)
    if max_value <= 0 or tick_count <= 0:
        return 0
    naive = max_value // tick_count
    if naive == 0:
        return 0

    round_to = _START_ROUND
    # naive > 0 implies max_value >= tick_count, so this stops at 1 at the latest
    while round_to > 1 and max_value < round_to * tick_count:
        round_to //= 10
    return (naive // round_to) * round_to


def tick_step(y_max: int, tick_count: int = TICK_COUNT) -> int:
    """Step used for drawing; never 0 so the axis cannot collapse."""
    return step(y_max, tick_count) or 1


def gridline_values(y_max: int, tick_count: int = TICK_COUNT) -> List[int]:
    """Values ``0, step, 2*step, ...`` up to ``tick_count * step``, keeping only those <= ``y_max``."""
    increment = tick_step(y_max, tick_count)
    values: List[int] = []
    for multiple in range(tick_count + 1):
        value = multiple * increment
        if value > y_max:
            break
        values.append(value)
    return values


__all__ = ["TICK_COUNT", "gridline_values", "step", "tick_step"]
