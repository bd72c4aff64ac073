"""Records assigned photo ids in the used-photo ledger on every day write."""

from __future__ import annotations

import logging
from typing import Optional

from dailycat.storage.day_records import DayRecord, DayStore

logger = logging.getLogger(__name__)


def record_photo_id_on_day_write(day_id: str, before: Optional[DayRecord], after: Optional[DayRecord], ledger) -> bool:
    """Append `after`'s photo id to the ledger when it is new or changed.

    Returns True when a ledger write happened. Ledger failures are logged and
    swallowed: the day write itself already succeeded.
    """
    if after is None:
        logger.info(f"Day record {day_id} was deleted, no action needed")
        return False

    photo_id = after.photo_id
    if not photo_id:
        return False

    if before is not None and before.photo_id == photo_id:
        logger.info(f"Photo ID {photo_id} already recorded for day {day_id}")
        return False

    try:
        logger.info(f"Recording photo ID {photo_id} for day {day_id}")
        ledger.add(photo_id)
    except Exception as e:
        logger.error(f"Error recording photo ID {photo_id} for day {day_id}: {e}")
        return False
    return True


def attach_ledger_writer(day_store: DayStore, ledger) -> None:
    """Register the ledger writer as a write listener on `day_store`."""

    def listener(day_id: str, before: Optional[DayRecord], after: Optional[DayRecord]) -> None:
        record_photo_id_on_day_write(day_id, before, after, ledger)

    day_store.add_write_listener(listener)
