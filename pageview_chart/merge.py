"""Fold sparse stats samples into a dense daily skeleton."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Mapping

from .buckets import Dataset
from .telemetry import record_merge_anomaly

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_count(value: Any) -> int:
    """Coerce a wire count to a non-negative int; malformed values become 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return max(int(value), 0)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            return 0
        return max(int(match.group(1)), 0)
    return 0


def merge_samples(skeleton: Dataset, samples: Iterable[Mapping[str, Any]]) -> Dataset:
    """Return a new dataset with sample counts written over ``skeleton``.

    Counts are overwritten, never summed, so merging the same samples twice is
    a no-op. ``y_max`` is the largest pageview count among merged samples.
    Samples whose date has no bucket are logged and skipped.
    """

    dataset = skeleton.copy()
    y_max = 0
    for sample in samples or ():
        if not isinstance(sample, Mapping):
            logger.warning("Ignoring malformed stats sample", extra={"sample": repr(sample)})
            record_merge_anomaly()
            continue
        key = str(sample.get("date") or "").strip()
        bucket = dataset.get(key)
        if bucket is None:
            logger.warning(
                "Unexpected date in response data: %s",
                key or "<missing>",
                extra={
                    "range_start": dataset.range.start_date.isoformat(),
                    "range_end": dataset.range.end_date.isoformat(),
                },
            )
            record_merge_anomaly()
            continue

        pageviews = parse_count(sample.get("pageviews"))
        visitors = parse_count(sample.get("visitors"))
        bucket.pageviews = pageviews
        bucket.visitors = visitors
        if pageviews > y_max:
            y_max = pageviews

    dataset.y_max = y_max
    return dataset


__all__ = ["merge_samples", "parse_count"]
