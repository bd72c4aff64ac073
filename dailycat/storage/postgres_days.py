"""Postgres-backed day record store."""

from __future__ import annotations

from typing import List, Optional, Tuple

import psycopg
from psycopg.types.json import Jsonb

from dailycat.catalog.photo_types import PhotoDetail
from dailycat.storage.day_records import DayRecord, DayStore, Mutation

_COLUMNS = "id, status, photo, created_at, updated_at"


class PostgresDayStore(DayStore):
    def __init__(self, pg_dsn: str):
        super().__init__()
        self.pg_dsn = pg_dsn

    def _connect(self, **kwargs):
        return psycopg.connect(self.pg_dsn, **kwargs)

    def get(self, day_id: str) -> Optional[DayRecord]:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT {_COLUMNS} FROM days WHERE id = %s", (day_id,))
                row = cur.fetchone()
        return _row_to_record(row) if row else None

    def get_range(self, start: str, end: str) -> List[DayRecord]:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM days
                    WHERE id >= %s AND id <= %s
                    ORDER BY id ASC
                    """,
                    (start, end),
                )
                rows = cur.fetchall()
        return [_row_to_record(r) for r in rows]

    def list_by_status(self, status: str, *, limit: int = 100) -> List[DayRecord]:
        limit = max(1, min(int(limit), 1000))
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM days
                    WHERE status = %s
                    ORDER BY id ASC
                    LIMIT %s
                    """,
                    (status, limit),
                )
                rows = cur.fetchall()
        return [_row_to_record(r) for r in rows]

    def get_most_recent(self) -> Optional[DayRecord]:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT {_COLUMNS} FROM days ORDER BY id DESC LIMIT 1")
                row = cur.fetchone()
        return _row_to_record(row) if row else None

    def _mutate(self, day_id: str, mutation: Mutation) -> Tuple[Optional[DayRecord], DayRecord]:
        # Row lock only serializes the read-modify-write; there is no version check.
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT {_COLUMNS} FROM days WHERE id = %s FOR UPDATE", (day_id,))
                row = cur.fetchone()
                before = _row_to_record(row) if row else None
                after = mutation(before)
                cur.execute(
                    """
                    INSERT INTO days (id, status, photo, created_at, updated_at)
                    VALUES (%s, %s, %s, %s, %s)
                    ON CONFLICT (id) DO UPDATE SET
                      status = EXCLUDED.status,
                      photo = EXCLUDED.photo,
                      created_at = EXCLUDED.created_at,
                      updated_at = EXCLUDED.updated_at
                    """,
                    (
                        after.id,
                        after.status,
                        Jsonb(after.photo.to_dict()) if after.photo is not None else None,
                        after.created_at,
                        after.updated_at,
                    ),
                )
        return before, after

    def _delete(self, day_id: str) -> Optional[DayRecord]:
        with self._connect(autocommit=True) as conn:
            with conn.cursor() as cur:
                cur.execute(f"DELETE FROM days WHERE id = %s RETURNING {_COLUMNS}", (day_id,))
                row = cur.fetchone()
        return _row_to_record(row) if row else None


def _row_to_record(row) -> DayRecord:
    day_id, status, photo, created_at, updated_at = row
    return DayRecord(
        id=str(day_id),
        status=str(status),
        photo=PhotoDetail.from_dict(photo) if photo else None,
        created_at=created_at,
        updated_at=updated_at,
    )
