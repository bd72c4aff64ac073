"""Day records and the day-store state machine.

A day record is keyed by its ISO date and moves through
`created -> processing -> completed` (the batch filler jumps straight to
`completed`). Backends implement `_mutate`, `get`, `get_range`,
`list_by_status`, `get_most_recent` and `_delete`; every write goes through
this base class so registered write listeners see `(day_id, before, after)`
once the write is committed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from dailycat.catalog.photo_types import PhotoDetail
from dailycat.dates import utc_now

logger = logging.getLogger(__name__)


class DayStatus:
    CREATED = "created"
    PROCESSING = "processing"
    COMPLETED = "completed"

    ALL = (CREATED, PROCESSING, COMPLETED)


class DayRecordNotFoundError(Exception):
    """Update of a day record that does not exist"""
    pass


@dataclass(frozen=True)
class DayRecord:
    id: str
    status: str
    photo: Optional[PhotoDetail]
    created_at: datetime
    updated_at: datetime

    @property
    def is_completed(self) -> bool:
        return self.status == DayStatus.COMPLETED and self.photo is not None

    @property
    def photo_id(self) -> Optional[str]:
        return self.photo.id if self.photo is not None else None

    def is_consistent(self) -> bool:
        """completed <=> photo present; created => no photo."""
        if self.status not in DayStatus.ALL:
            return False
        if (self.status == DayStatus.COMPLETED) != (self.photo is not None):
            return False
        return True


WriteListener = Callable[[str, Optional[DayRecord], Optional[DayRecord]], None]
Mutation = Callable[[Optional[DayRecord]], DayRecord]


class DayStore:
    def __init__(self) -> None:
        self._listeners: List[WriteListener] = []

    def add_write_listener(self, listener: WriteListener) -> None:
        self._listeners.append(listener)

    # -- reads -------------------------------------------------------------

    def get(self, day_id: str) -> Optional[DayRecord]:
        raise NotImplementedError

    def get_range(self, start: str, end: str) -> List[DayRecord]:
        """All records with start <= id <= end, ascending by id."""
        raise NotImplementedError

    def list_by_status(self, status: str, *, limit: int = 100) -> List[DayRecord]:
        raise NotImplementedError

    def get_most_recent(self) -> Optional[DayRecord]:
        raise NotImplementedError

    # -- backend primitives ------------------------------------------------

    def _mutate(self, day_id: str, mutation: Mutation) -> Tuple[Optional[DayRecord], DayRecord]:
        """Atomically read the current record, store `mutation(before)`."""
        raise NotImplementedError

    def _delete(self, day_id: str) -> Optional[DayRecord]:
        raise NotImplementedError

    # -- writes ------------------------------------------------------------

    def create_new_day_record(self, day_id: str) -> DayRecord:
        """Store a fresh `created` record; an existing record is left as is."""
        def mutation(before: Optional[DayRecord]) -> DayRecord:
            if before is not None:
                return before
            now = utc_now()
            return DayRecord(id=day_id, status=DayStatus.CREATED, photo=None, created_at=now, updated_at=now)

        return self._write(day_id, mutation)

    def set_processing(self, day_id: str) -> DayRecord:
        def mutation(before: Optional[DayRecord]) -> DayRecord:
            if before is None:
                raise DayRecordNotFoundError(day_id)
            return replace(before, status=DayStatus.PROCESSING, updated_at=_later(before))

        return self._write(day_id, mutation)

    def complete_photo_for_day(self, day_id: str, photo: PhotoDetail) -> DayRecord:
        """Mark the day completed with `photo`; creates the record if missing.

        No status check is made first: a concurrent writer completing the same
        day simply wins or loses.
        """
        def mutation(before: Optional[DayRecord]) -> DayRecord:
            if before is None:
                now = utc_now()
                return DayRecord(id=day_id, status=DayStatus.COMPLETED, photo=photo, created_at=now, updated_at=now)
            return replace(before, status=DayStatus.COMPLETED, photo=photo, updated_at=_later(before))

        return self._write(day_id, mutation)

    def update_photo_for_day(self, day_id: str, photo: PhotoDetail) -> DayRecord:
        """Swap the photo on an existing completed day (operator repair)."""
        def mutation(before: Optional[DayRecord]) -> DayRecord:
            if before is None:
                raise DayRecordNotFoundError(day_id)
            return replace(before, status=DayStatus.COMPLETED, photo=photo, updated_at=_later(before))

        return self._write(day_id, mutation)

    def delete(self, day_id: str) -> None:
        before = self._delete(day_id)
        if before is not None:
            self._notify(day_id, before, None)

    def _write(self, day_id: str, mutation: Mutation) -> DayRecord:
        before, after = self._mutate(day_id, mutation)
        self._notify(day_id, before, after)
        return after

    def _notify(self, day_id: str, before: Optional[DayRecord], after: Optional[DayRecord]) -> None:
        for listener in self._listeners:
            listener(day_id, before, after)


def _later(before: DayRecord) -> datetime:
    # updated_at is non-decreasing
    now = utc_now()
    return now if now >= before.updated_at else before.updated_at
