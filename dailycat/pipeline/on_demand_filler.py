"""On-demand filler: assigns a photo to one freshly requested day.

Invoked when a day record is first seen in the `created` state. The record is
moved to `processing` (a best-effort marker against re-entry, not a lock), then
up to `max_attempts` catalog pages are scanned for the first candidate that is
not in the ledger and whose detail resolves. Between attempts the filler
sleeps `min(1000 * 2**(attempt - 1), 10000)` milliseconds.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from dailycat.catalog.photo_types import PhotoDetail
from dailycat.storage.day_records import DayRecord, DayStatus

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10
BASE_DELAY_MS = 1000
MAX_DELAY_MS = 10000


def backoff_delay_ms(attempt: int) -> int:
    """Delay after a failed `attempt` (numbered from 1)."""
    return min(BASE_DELAY_MS * 2 ** (max(attempt, 1) - 1), MAX_DELAY_MS)


def _select_photo(candidates, *, catalog, ledger, day_id: str, attempt: int) -> Optional[PhotoDetail]:
    for candidate in candidates:
        if ledger.contains(candidate.id):
            logger.info(f"Photo {candidate.id} already used, skipping")
            continue
        logger.info(f"Fetching complete photo details for {candidate.id}")
        try:
            detail = catalog.get_detail(candidate.id)
        except Exception as e:
            logger.error(f"Failed to fetch complete photo details for {candidate.id}: {e}")
            continue
        logger.info(f"Selected unused photo {candidate.id} for day {day_id} on attempt {attempt}")
        return detail
    return None


def process_photo_for_day(
    day_id: str,
    *,
    catalog,
    day_store,
    ledger,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    page: int = 1,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Try to complete `day_id`; True on success, False after all attempts fail."""
    for attempt in range(1, max_attempts + 1):
        logger.info(f"Attempt {attempt}/{max_attempts}: fetching candidates for day {day_id}")
        try:
            search = catalog.list_candidates(page)
            logger.info(f"Received {len(search.results)} candidates on attempt {attempt}")
            selected = _select_photo(search.results, catalog=catalog, ledger=ledger, day_id=day_id, attempt=attempt)
            if selected is not None:
                day_store.complete_photo_for_day(day_id, selected)
                logger.info(f"Successfully updated day record {day_id} with photo {selected.id} on attempt {attempt}")
                return True
            logger.warning(
                f"Attempt {attempt}/{max_attempts}: no unused photos found for day {day_id} "
                f"among {len(search.results)} candidates"
            )
        except Exception as e:
            logger.error(f"Error on attempt {attempt}/{max_attempts} for day {day_id}: {e}")

        if attempt < max_attempts:
            delay = backoff_delay_ms(attempt)
            logger.info(f"Waiting {delay}ms before retry")
            sleep(delay / 1000.0)

    logger.error(f"Failed to find unused photo for day {day_id} after {max_attempts} attempts")
    return False


def handle_day_record_created(
    day_id: str,
    record: Optional[DayRecord],
    *,
    catalog,
    day_store,
    ledger,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Trigger entry point for a newly observed day record.

    Only `created` records are handled. On failure the record stays in
    `processing`; a later batch run or a fresh trigger fills it.
    """
    if record is None:
        logger.warning(f"No data associated with day {day_id}")
        return False
    if record.status != DayStatus.CREATED:
        logger.info(f"Day {day_id} is {record.status}, nothing to do")
        return False

    logger.info(f"Processing new day record for date: {day_id}")
    try:
        day_store.set_processing(day_id)
        success = process_photo_for_day(
            day_id,
            catalog=catalog,
            day_store=day_store,
            ledger=ledger,
            max_attempts=max_attempts,
            sleep=sleep,
        )
    except Exception as e:
        logger.error(f"Error processing day record creation for {day_id}: {e}")
        return False
    if not success:
        logger.error(f"Failed to assign photo to day record {day_id} after {max_attempts} attempts")
    return success
