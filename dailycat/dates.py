"""Calendar helpers for day ids (ISO `YYYY-MM-DD` strings)."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import List, Union

DateLike = Union[str, date]


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_day_id(value: DateLike) -> date:
    """Parse a day id into a date; `date` inputs pass through.

    Raises ValueError for malformed or impossible dates (e.g. 2025-02-30).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()


def format_day_id(value: DateLike) -> str:
    return parse_day_id(value).isoformat()


def add_days(value: DateLike, days: int) -> str:
    return (parse_day_id(value) + timedelta(days=days)).isoformat()


def date_range(start: DateLike, end: DateLike) -> List[str]:
    """Closed, ascending range of day ids; empty when start > end."""
    first = parse_day_id(start)
    last = parse_day_id(end)
    if first > last:
        return []
    n = (last - first).days
    return [(first + timedelta(days=i)).isoformat() for i in range(n + 1)]
