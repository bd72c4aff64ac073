"""Entry point the page-rendering layer uses to look up a day.

A request for a day with no record creates one in the `created` state, which
is what the day watch picks up to run the on-demand filler.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Optional

from dailycat.dates import format_day_id, parse_day_id, utc_today
from dailycat.storage.day_records import DayRecord

logger = logging.getLogger(__name__)

_DAY_ID_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class InvalidDateError(ValueError):
    """Day id is malformed or not a real calendar date"""
    pass


class DateOutOfRangeError(ValueError):
    """Day is before the configured minimum or after today"""
    pass


def validate_day_id(day_id: str) -> str:
    value = (day_id or "").strip()
    if not _DAY_ID_RE.match(value):
        raise InvalidDateError("Invalid date format. Use YYYY-MM-DD.")
    try:
        parse_day_id(value)
    except ValueError:
        raise InvalidDateError(f"Invalid date: {value}")
    return value


def request_day(day_id: str, *, day_store, config, today: Optional[date] = None) -> DayRecord:
    """Return the record for `day_id`, creating a `created` record if none exists."""
    day_id = validate_day_id(day_id)
    if day_id < config.min_date:
        raise DateOutOfRangeError(f"Dates before {config.min_date} are not allowed.")
    today_id = format_day_id(today if today is not None else utc_today())
    if day_id > today_id:
        raise DateOutOfRangeError("Future dates are not available.")

    record = day_store.get(day_id)
    if record is not None:
        return record
    logger.info(f"Creating new day record for date: {day_id}")
    return day_store.create_new_day_record(day_id)
