import logging
from datetime import date

import pytest

from pageview_chart.buckets import DateRange, build_skeleton
from pageview_chart.merge import merge_samples, parse_count


def _skeleton(start=date(2024, 1, 1), end=date(2024, 1, 3)):
    return build_skeleton(DateRange.from_dates(start, end))


def test_merge_fills_matching_bucket_and_tracks_max():
    skeleton = _skeleton()
    dataset = merge_samples(skeleton, [{"date": "2024-01-02", "pageviews": "10", "visitors": "4"}])

    assert [(b.key, b.pageviews, b.visitors) for b in dataset] == [
        ("2024-01-01", 0, 0),
        ("2024-01-02", 10, 4),
        ("2024-01-03", 0, 0),
    ]
    assert dataset.y_max == 10
    # the skeleton itself stays zeroed
    assert skeleton.get("2024-01-02").pageviews == 0


def test_visitors_never_drive_y_max():
    dataset = merge_samples(
        _skeleton(),
        [
            {"date": "2024-01-01", "pageviews": 3, "visitors": 50},
            {"date": "2024-01-03", "pageviews": 7, "visitors": 2},
        ],
    )
    assert dataset.y_max == 7


def test_merge_is_idempotent():
    samples = [
        {"date": "2024-01-01", "pageviews": "5", "visitors": "1"},
        {"date": "2024-01-03", "pageviews": "8", "visitors": "6"},
    ]
    first = merge_samples(_skeleton(), samples)
    second = merge_samples(_skeleton(), samples)
    again = merge_samples(first, samples)

    assert first.buckets == second.buckets == again.buckets
    assert first.y_max == second.y_max == again.y_max == 8


def test_out_of_range_sample_is_dropped_and_logged(caplog):
    samples = [
        {"date": "2023-12-31", "pageviews": "99", "visitors": "9"},
        {"date": "2024-01-02", "pageviews": "4", "visitors": "2"},
    ]
    with caplog.at_level(logging.WARNING, logger="pageview_chart.merge"):
        dataset = merge_samples(_skeleton(), samples)

    assert [b.pageviews for b in dataset] == [0, 4, 0]
    assert dataset.y_max == 4
    assert "Unexpected date in response data: 2023-12-31" in caplog.text


def test_malformed_counts_are_coerced_to_zero():
    dataset = merge_samples(
        _skeleton(),
        [
            {"date": "2024-01-01", "pageviews": "abc", "visitors": None},
            {"date": "2024-01-02", "pageviews": "-5", "visitors": "3"},
            "not-a-sample",
        ],
    )
    assert [(b.pageviews, b.visitors) for b in dataset] == [(0, 0), (0, 3), (0, 0)]
    assert dataset.y_max == 0


@pytest.mark.parametrize(
    "raw, expected",
    [
        (7, 7),
        ("12", 12),
        (" 42 ", 42),
        ("12abc", 12),
        (3.9, 3),
        ("", 0),
        ("x1", 0),
        (-4, 0),
        (None, 0),
        (True, 0),
        (float("nan"), 0),
    ],
)
def test_parse_count(raw, expected):
    assert parse_count(raw) == expected
