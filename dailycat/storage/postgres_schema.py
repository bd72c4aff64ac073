"""Postgres schema management for dailycat.

Creates the four tables the photo pipeline relies on. Schema creation is
idempotent (CREATE IF NOT EXISTS) so every worker can call it on startup.
"""

from __future__ import annotations

from typing import Iterable, Optional

import psycopg


SCHEMA_STATEMENTS: list[str] = [
    # One row per calendar date
    """
    CREATE TABLE IF NOT EXISTS days (
      id TEXT PRIMARY KEY,
      status TEXT NOT NULL DEFAULT 'created',
      photo JSONB,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      CONSTRAINT days_status_check CHECK (status IN ('created', 'processing', 'completed'))
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_days_status ON days (status);",
    # Available pool: existence is the signal
    """
    CREATE TABLE IF NOT EXISTS available_photo_ids (
      photo_id TEXT PRIMARY KEY,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    """,
    # Used-photo ledger: existence is the signal
    """
    CREATE TABLE IF NOT EXISTS photo_ids (
      photo_id TEXT PRIMARY KEY,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    """,
    # Pipeline configuration singleton
    """
    CREATE TABLE IF NOT EXISTS pipeline_config (
      id TEXT PRIMARY KEY DEFAULT 'config',
      min_date DATE NOT NULL,
      import_enabled BOOLEAN NOT NULL DEFAULT TRUE,
      last_page INTEGER NOT NULL DEFAULT 1,
      import_limit INTEGER NOT NULL DEFAULT 10,
      process_limit INTEGER NOT NULL DEFAULT 10,
      processing_min_date DATE NOT NULL,
      updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    """,
]


def ensure_postgres_schema(pg_dsn: str, *, statements: Optional[Iterable[str]] = None) -> None:
    """Ensure Postgres schema exists."""
    stmts = list(statements) if statements is not None else SCHEMA_STATEMENTS
    with psycopg.connect(pg_dsn, autocommit=True) as conn:
        with conn.cursor() as cur:
            for s in stmts:
                cur.execute(s)
