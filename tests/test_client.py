from datetime import date

import httpx
import pytest

from pageview_chart.buckets import DateRange
from pageview_chart.client import StatsClient, StatsFetchError
from pageview_chart.config import Settings

RANGE = DateRange.from_dates(date(2024, 1, 1), date(2024, 1, 31))


def _client(handler, **settings_kwargs):
    settings = Settings(stats_base_url="https://example.test/wp-json/zero-pageviews/v1/", **settings_kwargs)
    return StatsClient(settings, transport=httpx.MockTransport(handler), retry_delay=0.0)


@pytest.mark.asyncio
async def test_fetch_stats_sends_range_params_and_nonce():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"date": "2024-01-02", "pageviews": "10", "visitors": "4"}])

    client = _client(handler, stats_nonce="abc123")
    try:
        samples = await client.fetch_stats(RANGE)
    finally:
        await client.close()

    assert samples == [{"date": "2024-01-02", "pageviews": "10", "visitors": "4"}]
    request = seen[0]
    assert request.url.path == "/wp-json/zero-pageviews/v1/stats"
    assert request.url.params["start_date"] == "2024-01-01"
    assert request.url.params["end_date"] == "2024-01-31"
    assert request.headers["X-WP-Nonce"] == "abc123"


@pytest.mark.asyncio
async def test_fetch_stats_accepts_empty_range():
    client = _client(lambda request: httpx.Response(200, json=[]))
    assert await client.fetch_stats(RANGE) == []
    await client.close()


@pytest.mark.asyncio
async def test_fetch_retries_then_succeeds():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json=[])

    client = _client(handler, max_retries=3)
    assert await client.fetch_stats(RANGE) == []
    assert len(attempts) == 3
    await client.close()


@pytest.mark.asyncio
async def test_fetch_raises_after_exhausting_retries():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("refused", request=request)

    client = _client(handler, max_retries=2)
    with pytest.raises(StatsFetchError) as excinfo:
        await client.fetch_stats(RANGE)
    assert excinfo.value.endpoint == "stats"
    assert len(attempts) == 2
    await client.close()


@pytest.mark.asyncio
async def test_fetch_rejects_non_array_payload():
    client = _client(lambda request: httpx.Response(200, json={"code": "rest_forbidden"}))
    with pytest.raises(StatsFetchError):
        await client.fetch_stats(RANGE)
    await client.close()


@pytest.mark.asyncio
async def test_fetch_posts_sorts_by_pageviews_and_coerces_counts():
    payload = [
        {"id": "7", "visitors": "3", "pageviews": "5", "post_title": "Hello", "post_permalink": "https://x/hello"},
        {"id": "9", "visitors": "8", "pageviews": "21", "post_title": "World", "post_permalink": "https://x/world"},
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/posts")
        return httpx.Response(200, json=payload)

    client = _client(handler)
    rows = await client.fetch_posts(RANGE)
    await client.close()

    assert [row.id for row in rows] == [9, 7]
    assert rows[0].to_dict() == {
        "id": 9,
        "visitors": 8,
        "pageviews": 21,
        "post_title": "World",
        "post_permalink": "https://x/world",
    }
