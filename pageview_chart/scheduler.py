"""Auto-refresh timer for a chart whose range includes "now"."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from .buckets import DateRange
from .telemetry import record_refresh_tick

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL_S = 60.0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RefreshScheduler:
    """Owned, cancellable periodic task that re-fetches while the range is live.

    A tick fires ``on_refresh`` only when the current instant lies strictly
    between the range's start and end; otherwise it is a no-op.
    """

    def __init__(
        self,
        on_refresh: Callable[[], Awaitable[object]],
        get_range: Callable[[], Optional[DateRange]],
        *,
        interval: float = DEFAULT_REFRESH_INTERVAL_S,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._on_refresh = on_refresh
        self._get_range = get_range
        self._interval = max(float(interval), 0.01)
        self._clock = clock
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            return
        logger.info("Starting chart auto-refresh every %.0fs", self._interval)
        self._task = asyncio.create_task(self._run(), name="pageview-chart-refresh")

    async def stop(self) -> None:
        if self._task is None:
            return
        logger.info("Stopping chart auto-refresh")
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None

    def is_live(self, now: Optional[datetime] = None) -> bool:
        date_range = self._get_range()
        if date_range is None:
            return False
        return date_range.contains(now or self._clock())

    async def tick(self, now: Optional[datetime] = None) -> bool:
        """Run one timer tick. Returns True when a refresh was dispatched."""

        if not self.is_live(now):
            record_refresh_tick("idle")
            return False
        try:
            await self._on_refresh()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Chart auto-refresh failed")
            record_refresh_tick("error")
            return False
        record_refresh_tick("refreshed")
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.tick()


__all__ = ["DEFAULT_REFRESH_INTERVAL_S", "RefreshScheduler", "utc_now"]
