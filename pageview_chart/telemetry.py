"""Prometheus metrics helpers for the pageview chart."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


FETCH_LATENCY_MS = Histogram(
    "pageview_fetch_latency_ms",
    "Latency of upstream stats/posts requests in milliseconds.",
    labelnames=("endpoint",),
    buckets=(10, 25, 50, 100, 200, 400, 800, 1600, 3200),
)

FETCH_FAILURES = Counter(
    "pageview_fetch_failures_total",
    "Upstream requests that exhausted their retries.",
    labelnames=("endpoint",),
)

MERGE_ANOMALIES = Counter(
    "pageview_merge_anomalies_total",
    "Samples dropped because their date had no matching bucket.",
)

REFRESH_TICKS = Counter(
    "pageview_refresh_ticks_total",
    "Auto-refresh timer ticks broken out by outcome.",
    labelnames=("outcome",),
)


def record_fetch_latency(endpoint: str, duration_ms: float) -> None:
    FETCH_LATENCY_MS.labels(endpoint=endpoint or "unknown").observe(max(0.0, float(duration_ms)))


def record_fetch_failure(endpoint: str) -> None:
    FETCH_FAILURES.labels(endpoint=endpoint or "unknown").inc()


def record_merge_anomaly() -> None:
    MERGE_ANOMALIES.inc()


def record_refresh_tick(outcome: str) -> None:
    REFRESH_TICKS.labels(outcome=outcome or "unknown").inc()


def prometheus_response() -> tuple[bytes, str]:
    """Return the latest metrics payload and content type."""

    return generate_latest(), CONTENT_TYPE_LATEST


__all__ = [
    "record_fetch_latency",
    "record_fetch_failure",
    "record_merge_anomaly",
    "record_refresh_tick",
    "prometheus_response",
]
