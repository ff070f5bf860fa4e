"""Dense daily skeleton for a date range.

Every calendar day between the range's start and end (inclusive) gets exactly
one zeroed :class:`DayBucket`. Days are generated by calendar stepping over
plain ``date`` values, so month/year rollovers and DST transitions in the
display timezone never skip or duplicate a day.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Dict, Iterator, List, Optional

import pandas as pd

from .dates import day_key, end_of_day, resolve_timezone, start_of_day


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive displayed range. ``start``/``end`` are timezone-aware instants."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("DateRange bounds must be timezone-aware.")
        if self.start > self.end:
            raise ValueError(f"Range start {self.start.isoformat()} is after end {self.end.isoformat()}.")

    @classmethod
    def from_dates(cls, start: date, end: date, tz_name: str | None = None) -> "DateRange":
        """Span whole days: midnight of ``start`` through the last instant of ``end``."""

        tz = resolve_timezone(tz_name)
        return cls(start=start_of_day(start, tz), end=end_of_day(end, tz))

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    def days(self) -> List[date]:
        index = pd.date_range(start=self.start_date, end=self.end_date, freq="D")
        return [stamp.date() for stamp in index]

    def contains(self, instant: datetime) -> bool:
        """True when ``instant`` falls strictly inside the range."""
        return self.start < instant < self.end

    def same_bounds(self, other: Optional["DateRange"]) -> bool:
        if other is None:
            return False
        return self.start == other.start and self.end == other.end


@dataclass(slots=True)
class DayBucket:
    date: date
    pageviews: int = 0
    visitors: int = 0

    @property
    def key(self) -> str:
        return day_key(self.date)


@dataclass(slots=True)
class Dataset:
    """Ordered buckets for one range plus the explicit key -> position index."""

    range: DateRange
    buckets: List[DayBucket] = field(default_factory=list)
    y_max: int = 0
    index: Dict[str, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.buckets)

    def __iter__(self) -> Iterator[DayBucket]:
        return iter(self.buckets)

    def __getitem__(self, position: int) -> DayBucket:
        return self.buckets[position]

    def get(self, key: str) -> Optional[DayBucket]:
        position = self.index.get(key)
        if position is None:
            return None
        return self.buckets[position]

    def copy(self) -> "Dataset":
        """Deep-enough copy: fresh bucket objects, fresh index."""
        return Dataset(
            range=self.range,
            buckets=[replace(bucket) for bucket in self.buckets],
            y_max=self.y_max,
            index=dict(self.index),
        )


def build_skeleton(date_range: DateRange) -> Dataset:
    """Return a zero-filled dataset with one bucket per calendar day."""

    buckets: List[DayBucket] = []
    index: Dict[str, int] = {}
    for day in date_range.days():
        index[day_key(day)] = len(buckets)
        buckets.append(DayBucket(date=day))
    return Dataset(range=date_range, buckets=buckets, y_max=0, index=index)


__all__ = ["DateRange", "DayBucket", "Dataset", "build_skeleton"]
