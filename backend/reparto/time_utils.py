from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional


RANGE_KEYWORDS = ("today", "week", "month")


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse "YYYY-MM-DD" (None / "" -> None). Raises ValueError on junk."""
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    return date.fromisoformat(s)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")


def day_window(start_day: date, end_day: date) -> tuple[datetime, datetime]:
    """Half-open [start 00:00, end+1 00:00) window covering both days."""
    return (
        datetime.combine(start_day, time.min),
        datetime.combine(end_day + timedelta(days=1), time.min),
    )


def keyword_window(keyword: str, today: Optional[date] = None) -> tuple[datetime, datetime]:
    """
    Resolve a symbolic range to a half-open datetime window.

    - today: the current day
    - week:  trailing 7 days, today included
    - month: first day of the current month through today

    Raises ValueError for anything else.
    """
    today = today or utcnow().date()
    if keyword == "today":
        return day_window(today, today)
    if keyword == "week":
        return day_window(today - timedelta(days=6), today)
    if keyword == "month":
        return day_window(today.replace(day=1), today)
    raise ValueError(f"Unknown range: {keyword}")
