"""HTTP client for the stats and posts endpoints.

Both endpoints take ``start_date``/``end_date`` as ``yyyy-MM-dd`` query
parameters and return JSON arrays. The client adds retry handling and a lazily
created shared ``httpx.AsyncClient``; anything short of a JSON array after the
last attempt surfaces as :class:`StatsFetchError`.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import httpx

from .buckets import DateRange
from .config import Settings, get_settings
from .dates import day_key
from .merge import parse_count
from .telemetry import record_fetch_failure, record_fetch_latency

logger = logging.getLogger(__name__)

NONCE_HEADER = "X-WP-Nonce"


class StatsFetchError(RuntimeError):
    """Raised when an endpoint cannot produce a usable payload."""

    def __init__(self, endpoint: str, message: str) -> None:
        super().__init__(f"{endpoint}: {message}")
        self.endpoint = endpoint


@dataclass(slots=True)
class PostRow:
    id: int
    visitors: int
    pageviews: int
    post_title: str
    post_permalink: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PostRow":
        return cls(
            id=parse_count(payload.get("id")),
            visitors=parse_count(payload.get("visitors")),
            pageviews=parse_count(payload.get("pageviews")),
            post_title=str(payload.get("post_title") or ""),
            post_permalink=str(payload.get("post_permalink") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "visitors": self.visitors,
            "pageviews": self.pageviews,
            "post_title": self.post_title,
            "post_permalink": self.post_permalink,
        }


def range_params(date_range: DateRange) -> Dict[str, str]:
    return {"start_date": day_key(date_range.start_date), "end_date": day_key(date_range.end_date)}


class StatsClient:
    """Client for the stats service with retries and a shared connection pool."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_delay: float = 0.75,
    ) -> None:
        self._settings = settings or get_settings()
        self._base_url = self._settings.stats_base_url.rstrip("/")
        self._timeout = httpx.Timeout(self._settings.request_timeout_s, connect=min(4.0, self._settings.request_timeout_s))
        self._max_retries = max(1, int(self._settings.max_retries))
        self._retry_delay = max(0.0, retry_delay)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            async with self._client_lock:
                if self._client is None or self._client.is_closed:
                    headers = {"Accept": "application/json"}
                    if self._settings.stats_nonce:
                        headers[NONCE_HEADER] = self._settings.stats_nonce
                    self._client = httpx.AsyncClient(
                        base_url=self._base_url,
                        timeout=self._timeout,
                        headers=headers,
                        transport=self._transport,
                    )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _get_list(self, endpoint: str, params: Mapping[str, str]) -> List[Any]:
        client = await self._get_client()
        last_error: Optional[str] = None
        for attempt in range(1, self._max_retries + 1):
            started = time.perf_counter()
            try:
                resp = await client.get(f"/{endpoint}", params=dict(params))
                resp.raise_for_status()
                payload = resp.json()
            except httpx.HTTPError as exc:
                last_error = str(exc) or exc.__class__.__name__
                logger.warning("%s fetch failed (attempt %d): %s", endpoint, attempt, last_error)
            except ValueError as exc:
                last_error = f"invalid JSON: {exc}"
                logger.warning("%s returned invalid JSON (attempt %d)", endpoint, attempt)
            else:
                record_fetch_latency(endpoint, (time.perf_counter() - started) * 1000.0)
                if isinstance(payload, list):
                    return payload
                record_fetch_failure(endpoint)
                raise StatsFetchError(endpoint, f"expected a JSON array, got {type(payload).__name__}")
            if attempt < self._max_retries and self._retry_delay:
                await asyncio.sleep(self._retry_delay * attempt)
        record_fetch_failure(endpoint)
        raise StatsFetchError(endpoint, last_error or "request failed")

    async def fetch_stats(self, date_range: DateRange) -> List[Dict[str, Any]]:
        """Return the sparse daily samples for ``date_range``."""

        payload = await self._get_list("stats", range_params(date_range))
        return [item for item in payload if isinstance(item, dict)]

    async def fetch_posts(self, date_range: DateRange) -> List[PostRow]:
        """Return per-post totals for ``date_range``, most viewed first."""

        payload = await self._get_list("posts", range_params(date_range))
        rows = [PostRow.from_payload(item) for item in payload if isinstance(item, Mapping)]
        rows.sort(key=lambda row: row.pageviews, reverse=True)
        return rows


__all__ = ["PostRow", "StatsClient", "StatsFetchError", "range_params"]
