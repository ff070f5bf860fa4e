"""FastAPI surface: rendered chart page, post ranking passthrough, health and metrics."""

from __future__ import annotations

import html
import logging
import uuid
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .buckets import DateRange
from .client import StatsClient, StatsFetchError
from .config import ChartLabels, get_settings
from .dates import default_bounds, parse_date_param
from .logging_setup import REQUEST_ID_CONTEXT, setup_logging
from .telemetry import prometheus_response
from .view import ChartView

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Echo or assign ``X-Request-ID`` and expose it to log records."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = REQUEST_ID_CONTEXT.set(request_id)
        try:
            response = await call_next(request)
        finally:
            REQUEST_ID_CONTEXT.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


app = FastAPI(
    title="Pageview Chart",
    description="Daily pageview/visitor chart rendered from sparse stats.",
    version="0.1.0",
)
app.add_middleware(RequestIdMiddleware)

_STATS_CLIENT: Optional[StatsClient] = None


def get_stats_client() -> StatsClient:
    global _STATS_CLIENT
    if _STATS_CLIENT is None:
        _STATS_CLIENT = StatsClient(get_settings())
    return _STATS_CLIENT


@app.on_event("startup")
async def _startup_tasks() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Pageview chart backend ready", extra={"stats_base_url": settings.stats_base_url})


@app.on_event("shutdown")
async def _shutdown_tasks() -> None:
    global _STATS_CLIENT
    if _STATS_CLIENT is not None:
        try:
            await _STATS_CLIENT.close()
        except Exception:  # pragma: no cover - defensive
            logger.exception("Error closing stats client")
        finally:
            _STATS_CLIENT = None


def _resolve_dates(start_date: Optional[str], end_date: Optional[str]) -> Tuple[date, date]:
    default_start, default_end = default_bounds()
    try:
        start = parse_date_param(start_date) if start_date else default_start
        end = parse_date_param(end_date) if end_date else default_end
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if start > end:
        raise HTTPException(status_code=422, detail="start_date must not be after end_date")
    return start, end


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{html.escape(title)}</title>
    <style>
      .chart .visitors {{ fill: #8eb7da; }}
      .chart .pageviews {{ fill: #4a8fcc; }}
      .tooltip {{ position: absolute; background: #fff; border: 1px solid #ddd; }}
    </style>
  </head>
  <body>
    {body}
  </body>
</html>
"""


@app.get("/healthz", summary="Readiness probe")
async def healthz() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint() -> Response:
    payload, content_type = prometheus_response()
    return Response(content=payload, media_type=content_type)


@app.get("/api/v1/chart", response_class=HTMLResponse, summary="Render the daily chart for a date range")
async def chart_page(
    start_date: Optional[str] = Query(default=None),
    end_date: Optional[str] = Query(default=None),
    width: Optional[float] = Query(default=None, gt=0),
    height: Optional[float] = Query(default=None, gt=0),
) -> HTMLResponse:
    settings = get_settings()
    start, end = _resolve_dates(start_date, end_date)
    view = ChartView(
        get_stats_client(),
        labels=ChartLabels.from_settings(settings),
        width=width,
        height=height,
        settings=settings,
    )
    await view.set_range(DateRange.from_dates(start, end, settings.timezone))
    markup = view.render()
    title = f"Pageviews {start.isoformat()} to {end.isoformat()}"
    return HTMLResponse(content=_page(title, markup))


@app.get("/api/v1/posts", summary="Per-post totals for a date range")
async def posts(
    start_date: Optional[str] = Query(default=None),
    end_date: Optional[str] = Query(default=None),
) -> List[Dict[str, Any]]:
    settings = get_settings()
    start, end = _resolve_dates(start_date, end_date)
    try:
        rows = await get_stats_client().fetch_posts(DateRange.from_dates(start, end, settings.timezone))
    except StatsFetchError as exc:
        logger.warning("Posts fetch failed: %s", exc)
        raise HTTPException(status_code=502, detail="Upstream stats service unavailable") from exc
    return [row.to_dict() for row in rows]


__all__ = ["RequestIdMiddleware", "app", "get_stats_client"]
