from datetime import date, datetime, timezone

import pytest

from pageview_chart.buckets import DateRange, build_skeleton


def test_skeleton_has_one_zeroed_bucket_per_day():
    dataset = build_skeleton(DateRange.from_dates(date(2024, 1, 1), date(2024, 1, 3)))

    assert [bucket.key for bucket in dataset] == ["2024-01-01", "2024-01-02", "2024-01-03"]
    assert all(bucket.pageviews == 0 and bucket.visitors == 0 for bucket in dataset)
    assert dataset.y_max == 0
    assert dataset.index == {"2024-01-01": 0, "2024-01-02": 1, "2024-01-03": 2}


def test_skeleton_crosses_month_and_year_boundaries():
    dataset = build_skeleton(DateRange.from_dates(date(2023, 12, 30), date(2024, 3, 1)))

    days = [bucket.date for bucket in dataset]
    assert len(days) == 2 + 31 + 29 + 1  # Dec 30-31, Jan, Feb (leap year), Mar 1
    assert days == sorted(set(days))
    assert days[0] == date(2023, 12, 30)
    assert days[-1] == date(2024, 3, 1)


@pytest.mark.parametrize(
    "start, end",
    [
        (date(2024, 3, 9), date(2024, 3, 12)),  # US spring forward on Mar 10
        (date(2024, 11, 2), date(2024, 11, 5)),  # US fall back on Nov 3
    ],
)
def test_skeleton_is_dst_safe(start, end):
    date_range = DateRange.from_dates(start, end, "America/New_York")
    dataset = build_skeleton(date_range)

    assert len(dataset) == 4
    assert [bucket.date.day for bucket in dataset] == [start.day + offset for offset in range(4)]


def test_single_day_range_yields_one_bucket():
    dataset = build_skeleton(DateRange.from_dates(date(2024, 5, 5), date(2024, 5, 5)))
    assert len(dataset) == 1


def test_rebuild_is_idempotent_but_not_shared():
    date_range = DateRange.from_dates(date(2024, 1, 1), date(2024, 1, 10))
    first = build_skeleton(date_range)
    second = build_skeleton(date_range)

    assert first.buckets == second.buckets
    assert all(a is not b for a, b in zip(first.buckets, second.buckets))


def test_from_dates_spans_whole_days():
    date_range = DateRange.from_dates(date(2024, 1, 1), date(2024, 1, 3))

    assert date_range.start == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert date_range.end.date() == date(2024, 1, 3)
    assert date_range.end.hour == 23 and date_range.end.minute == 59


def test_range_rejects_reversed_or_naive_bounds():
    with pytest.raises(ValueError):
        DateRange.from_dates(date(2024, 1, 3), date(2024, 1, 1))
    with pytest.raises(ValueError):
        DateRange(start=datetime(2024, 1, 1), end=datetime(2024, 1, 2))


def test_contains_is_strict():
    date_range = DateRange.from_dates(date(2024, 1, 1), date(2024, 1, 3))

    assert date_range.contains(datetime(2024, 1, 2, 12, tzinfo=timezone.utc))
    assert not date_range.contains(date_range.start)
    assert not date_range.contains(date_range.end)
    assert not date_range.contains(datetime(2024, 1, 4, tzinfo=timezone.utc))


def test_copy_produces_independent_buckets():
    dataset = build_skeleton(DateRange.from_dates(date(2024, 1, 1), date(2024, 1, 2)))
    clone = dataset.copy()
    clone.buckets[0].pageviews = 5

    assert dataset.buckets[0].pageviews == 0
    assert clone.get("2024-01-01").pageviews == 5
    assert clone.get("2024-02-01") is None
