"""Console entrypoint for the pageview chart backend.

``HOST`` and ``PORT`` come straight from the environment; a missing, empty or
non-numeric ``PORT`` binds the default port and logs a warning instead of
failing at startup.
"""

from __future__ import annotations

import logging
import os

import uvicorn

from .config import get_settings
from .logging_setup import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000
APP_PATH = "pageview_chart.server:app"


def _resolve_port(default: int = DEFAULT_PORT) -> int:
    raw = (os.environ.get("PORT") or "").strip()
    if not raw:
        return default
    if raw.isdigit() and int(raw) > 0:
        return int(raw)
    logger.warning("Ignoring PORT=%r, binding %d", raw, default)
    return default


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    host = os.environ.get("HOST") or DEFAULT_HOST
    port = _resolve_port()
    logger.info(
        "Starting pageview chart server",
        extra={"host": host, "port": port, "stats_base_url": settings.stats_base_url},
    )
    uvicorn.run(APP_PATH, host=host, port=port)


if __name__ == "__main__":
    main()
