"""Calendar-day helpers shared by the bucket builder, tooltip and HTTP layer."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DAY_KEY_FORMAT = "%Y-%m-%d"


def resolve_timezone(name: str | None) -> ZoneInfo | timezone:
    """Return a tzinfo for ``name``, falling back to UTC for unknown zones."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def day_key(value: date | datetime) -> str:
    """ISO ``yyyy-MM-dd`` key used to address a bucket."""
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime(DAY_KEY_FORMAT)


def format_long(value: date | datetime) -> str:
    """``Jan 1, 2024``"""
    return f"{value:%b} {value.day}, {value.year}"


def format_short(value: date | datetime) -> str:
    """``Jan 1``"""
    return f"{value:%b} {value.day}"


def start_of_day(day: date, tz: ZoneInfo | timezone = timezone.utc) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def end_of_day(day: date, tz: ZoneInfo | timezone = timezone.utc) -> datetime:
    return datetime.combine(day, time.max, tzinfo=tz)


def parse_date_param(value: Any) -> date:
    """Parse a request parameter that must denote a calendar date.

    Accepts ``date``/``datetime`` objects, ISO dates (``2024-01-31``) and ISO
    datetimes. Anything else raises ``ValueError``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid date parameter: {value!r}")
    token = value.strip()
    if not token:
        raise ValueError("Date parameter is empty.")
    try:
        return date.fromisoformat(token)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(token.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValueError(f"Invalid date parameter: {value!r}") from None


def default_bounds(today: Optional[date] = None) -> Tuple[date, date]:
    """First day of the current month through today."""
    today = today or datetime.now(timezone.utc).date()
    return today.replace(day=1), today


__all__ = [
    "DAY_KEY_FORMAT",
    "day_key",
    "default_bounds",
    "end_of_day",
    "format_long",
    "format_short",
    "parse_date_param",
    "resolve_timezone",
    "start_of_day",
]
