from datetime import date

from pageview_chart.buckets import DateRange, build_skeleton
from pageview_chart.geometry import compute_layout
from pageview_chart.merge import merge_samples
from pageview_chart.svg import render_svg


def _layout():
    skeleton = build_skeleton(DateRange.from_dates(date(2024, 1, 1), date(2024, 1, 4)))
    dataset = merge_samples(
        skeleton,
        [
            {"date": "2024-01-02", "pageviews": "10", "visitors": "4"},
            {"date": "2024-01-04", "pageviews": "5", "visitors": "5"},
        ],
    )
    return compute_layout(dataset, 448, 232)


def test_render_svg_empty_for_suppressed_chart():
    assert render_svg(None) == ""


def test_render_svg_draws_axes_and_bars():
    markup = render_svg(_layout())

    assert '<svg class="chart"' in markup
    assert 'height="232"' in markup
    assert '<g class="axes-y" transform="translate(0, 6)"' in markup
    assert '<g class="axes-x" transform="translate(36, 206)"' in markup
    assert '<g class="bars" transform="translate(36, 6)"' in markup
    assert markup.count('class="visitors"') == 2
    assert markup.count('class="pageviews"') == 2
    assert ">Jan 1, 2024</text>" in markup
    assert ">Jan 4</text>" in markup
    # gridlines at 0, 3, 6 and 9 for a max of 10
    assert [f">{label}</text>" in markup for label in ("0", "3", "6", "9")] == [True] * 4


def test_render_svg_bar_coordinates():
    layout = _layout()
    markup = render_svg(layout)

    # day 2: x = 100 + 5, pageviews rect full height from the top
    assert '<rect class="visitors" height="80" width="45" x="105" y="120" />' in markup
    assert '<rect class="pageviews" height="200" width="45" x="150" y="0" />' in markup
