"""Scheduled batch filler: drains the available pool into dates needing photos.

Pool ids that are already in the ledger, or that the catalog reports as
missing, are discarded. Any other detail-resolution error aborts the run
(progress made so far is already persisted) so the scheduler retries it.
This path never claims a day via `processing`; it completes days directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from dailycat.catalog.errors import NotFoundError
from dailycat.pipeline.date_selection import select_dates_needing_photos

logger = logging.getLogger(__name__)


@dataclass
class BatchFillResult:
    assigned: List[Tuple[str, str]] = field(default_factory=list)  # (date, photo_id)
    discarded: List[str] = field(default_factory=list)
    dates_remaining: List[str] = field(default_factory=list)


def process_available_photos(
    *,
    config_store,
    day_store,
    pool,
    ledger,
    catalog,
    today: Optional[date] = None,
) -> BatchFillResult:
    logger.info("Starting process available photos task")
    config = config_store.get_config()
    result = BatchFillResult()

    photo_ids = pool.get_next(config.process_limit)
    logger.info(f"Retrieved {len(photo_ids)} available photo IDs")
    if not photo_ids:
        logger.info("No available photo IDs to process")
        return result

    dates = select_dates_needing_photos(day_store, processing_min_date=config.processing_min_date, today=today)
    logger.info(f"Found {len(dates)} dates needing photos")
    if not dates:
        logger.info("No dates need photos at this time")
        return result

    date_index = 0
    for photo_id in photo_ids:
        if date_index >= len(dates):
            break

        if ledger.contains(photo_id):
            logger.info(f"Photo ID {photo_id} is already used, removing from available list")
            pool.remove(photo_id)
            result.discarded.append(photo_id)
            continue

        logger.info(f"Fetching complete photo details for {photo_id}")
        try:
            detail = catalog.get_detail(photo_id)
        except NotFoundError:
            logger.warning(f"Photo ID {photo_id} no longer exists upstream, removing from available list")
            pool.remove(photo_id)
            result.discarded.append(photo_id)
            continue
        except Exception as e:
            logger.error(f"Error fetching photo details for {photo_id}, aborting run: {e}")
            raise

        target = dates[date_index]
        logger.info(f"Assigning photo {photo_id} to date {target}")
        day_store.complete_photo_for_day(target, detail)
        pool.remove(photo_id)
        result.assigned.append((target, photo_id))
        date_index += 1

    result.dates_remaining = dates[date_index:]
    if not result.dates_remaining:
        logger.info("All dates needing photos have been filled")
    else:
        logger.info(f"Available photo pool exhausted with {len(result.dates_remaining)} dates still needing photos")
    logger.info(f"Process available photos task completed. Processed {len(result.assigned)} photos")
    return result
