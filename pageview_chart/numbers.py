from __future__ import annotations

from typing import Any


def _trim(value: float) -> str:
    text = f"{value:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return text


def format_pretty(value: Any) -> str:
    """Abbreviate large counts for axis labels (``12500`` -> ``12.5K``)."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    sign = "-" if number < 0 else ""
    number = abs(number)
    if number < 10_000:
        return f"{sign}{int(number)}"
    if number < 1_000_000:
        return f"{sign}{_trim(number / 1_000)}K"
    return f"{sign}{_trim(number / 1_000_000)}M"


__all__ = ["format_pretty"]
