"""Postgres sets of photo ids: the available pool and the used-photo ledger.

Both tables carry no payload; a row's existence is the signal. Removal is
delete-by-key so concurrent consumers never double-remove the same id.
"""

from __future__ import annotations

from typing import Iterable, List

import psycopg


class _PhotoIdSet:
    table: str = ""

    def __init__(self, pg_dsn: str):
        self.pg_dsn = pg_dsn

    def contains(self, photo_id: str) -> bool:
        with psycopg.connect(self.pg_dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT 1 FROM {self.table} WHERE photo_id = %s", (photo_id,))
                return cur.fetchone() is not None

    def add(self, photo_id: str) -> None:
        self.add_many([photo_id])

    def add_many(self, photo_ids: Iterable[str]) -> int:
        """Insert ids in one transaction; returns how many were new."""
        ids = [str(p).strip() for p in photo_ids if p and str(p).strip()]
        if not ids:
            return 0
        inserted = 0
        with psycopg.connect(self.pg_dsn) as conn:
            with conn.cursor() as cur:
                for pid in dict.fromkeys(ids):
                    cur.execute(
                        f"""
                        INSERT INTO {self.table} (photo_id)
                        VALUES (%s)
                        ON CONFLICT (photo_id) DO NOTHING
                        """,
                        (pid,),
                    )
                    inserted += cur.rowcount or 0
        return inserted

    def remove(self, photo_id: str) -> None:
        with psycopg.connect(self.pg_dsn, autocommit=True) as conn:
            with conn.cursor() as cur:
                cur.execute(f"DELETE FROM {self.table} WHERE photo_id = %s", (photo_id,))

    def count(self) -> int:
        with psycopg.connect(self.pg_dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT COUNT(*) FROM {self.table}")
                return int(cur.fetchone()[0] or 0)


class PostgresAvailablePool(_PhotoIdSet):
    table = "available_photo_ids"

    def get_next(self, limit: int) -> List[str]:
        """Up to `limit` pool members; order is not part of the contract."""
        limit = max(0, int(limit))
        if limit == 0:
            return []
        with psycopg.connect(self.pg_dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT photo_id FROM {self.table} ORDER BY photo_id LIMIT %s",
                    (limit,),
                )
                return [r[0] for r in cur.fetchall()]


class PostgresPhotoIdLedger(_PhotoIdSet):
    table = "photo_ids"

    def all_ids(self) -> List[str]:
        with psycopg.connect(self.pg_dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT photo_id FROM {self.table} ORDER BY photo_id")
                return [r[0] for r in cur.fetchall()]

    def delete(self, photo_id: str) -> None:
        self.remove(photo_id)
