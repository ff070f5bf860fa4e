import asyncio
from datetime import date, datetime, timezone

import pytest

from pageview_chart.buckets import DateRange
from pageview_chart.scheduler import RefreshScheduler

RANGE = DateRange.from_dates(date(2024, 1, 1), date(2024, 1, 31))
INSIDE = datetime(2024, 1, 15, 12, tzinfo=timezone.utc)
AFTER = datetime(2024, 2, 15, 12, tzinfo=timezone.utc)


def _scheduler(calls, *, date_range=RANGE, clock=lambda: INSIDE, interval=60.0, on_refresh=None):
    async def refresh():
        calls.append("refresh")

    return RefreshScheduler(on_refresh or refresh, lambda: date_range, interval=interval, clock=clock)


@pytest.mark.asyncio
async def test_tick_refreshes_while_range_includes_now():
    calls = []
    scheduler = _scheduler(calls)

    assert await scheduler.tick() is True
    assert calls == ["refresh"]


@pytest.mark.asyncio
async def test_tick_is_noop_once_range_has_ended():
    calls = []
    scheduler = _scheduler(calls, clock=lambda: AFTER)

    assert await scheduler.tick() is False
    assert await scheduler.tick(now=RANGE.start) is False
    assert calls == []


@pytest.mark.asyncio
async def test_tick_without_range_is_noop():
    calls = []
    scheduler = _scheduler(calls, date_range=None)
    assert await scheduler.tick() is False
    assert calls == []


@pytest.mark.asyncio
async def test_tick_swallows_refresh_errors():
    async def boom():
        raise RuntimeError("upstream exploded")

    scheduler = _scheduler([], on_refresh=boom)
    assert await scheduler.tick() is False


@pytest.mark.asyncio
async def test_timer_fires_repeatedly_and_stops_cleanly():
    calls = []
    scheduler = _scheduler(calls, interval=0.01)

    scheduler.start()
    scheduler.start()  # second start is ignored
    assert scheduler.running
    await asyncio.sleep(0.08)
    await scheduler.stop()

    assert not scheduler.running
    fired = len(calls)
    assert fired >= 2
    await asyncio.sleep(0.05)
    assert len(calls) == fired

    await scheduler.stop()  # stopping twice is harmless
