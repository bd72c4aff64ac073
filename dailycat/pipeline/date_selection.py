"""Which dates still need a photo.

The forward window (today and the next 29 days) always has priority; the
backfill window `[processing_min_date, yesterday]` is only considered once the
forward window is fully completed.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from dailycat.dates import DateLike, add_days, date_range, format_day_id, utc_today
from dailycat.storage.day_records import DayStore

logger = logging.getLogger(__name__)

FORWARD_WINDOW_DAYS = 30


def get_dates_needing_photos(day_store: DayStore, start: DateLike, end: DateLike) -> List[str]:
    """Dates in the closed range without a completed record, ascending.

    Dates with no record at all count as needing a photo.
    """
    calendar = date_range(start, end)
    if not calendar:
        return []
    completed = {r.id for r in day_store.get_range(calendar[0], calendar[-1]) if r.is_completed}
    return [d for d in calendar if d not in completed]


def select_dates_needing_photos(
    day_store: DayStore,
    *,
    processing_min_date: DateLike,
    today: Optional[DateLike] = None,
) -> List[str]:
    today_id = format_day_id(today if today is not None else utc_today())

    forward = get_dates_needing_photos(day_store, today_id, add_days(today_id, FORWARD_WINDOW_DAYS - 1))
    if forward:
        logger.info(f"Found {len(forward)} dates in next {FORWARD_WINDOW_DAYS} days needing photos")
        return forward

    logger.info(f"Next {FORWARD_WINDOW_DAYS} days are filled, checking backwards to {format_day_id(processing_min_date)}")
    backward = get_dates_needing_photos(day_store, processing_min_date, add_days(today_id, -1))
    logger.info(f"Found {len(backward)} dates working backwards needing photos")
    return backward
