from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str, *, tz: tzinfo | None = None) -> datetime:
    """Parse an ISO-8601 datetime; naive values are taken to be in ``tz``."""
    dt = datetime.fromisoformat(value.strip())
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz or get_zone(DEFAULT_TIMEZONE))
    return dt


def get_zone(name: str | None) -> tzinfo:
    return ZoneInfo(name or DEFAULT_TIMEZONE)


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def to_local(dt: datetime, tz: tzinfo | None = None) -> datetime:
    # Firestore hands back UTC timestamps; naive values are assumed UTC too.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz or get_zone(DEFAULT_TIMEZONE))


def ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_long_date(dt: datetime, tz: tzinfo | None = None) -> str:
    """``Monday, March 3rd``"""
    local = to_local(dt, tz)
    return f"{local.strftime('%A, %B')} {ordinal(local.day)}"


def format_month_day(dt: datetime, tz: tzinfo | None = None) -> str:
    """``Mar 3rd``"""
    local = to_local(dt, tz)
    return f"{local.strftime('%b')} {ordinal(local.day)}"


def format_short_date(dt: datetime, tz: tzinfo | None = None) -> str:
    """``3/3/25``"""
    local = to_local(dt, tz)
    return f"{local.month}/{local.day}/{local.strftime('%y')}"
