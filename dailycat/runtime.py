"""Process wiring shared by the worker scripts (env, logging, stores)."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

from dailycat.catalog.unsplash import UnsplashCatalog
from dailycat.pipeline.ledger_writer import attach_ledger_writer
from dailycat.storage.postgres_config import PostgresConfigStore
from dailycat.storage.postgres_days import PostgresDayStore
from dailycat.storage.postgres_photo_ids import PostgresAvailablePool, PostgresPhotoIdLedger
from dailycat.storage.postgres_schema import ensure_postgres_schema

DEFAULT_PG_DSN = "dbname=dailycat user=dailycat password=dailycat host=localhost port=5432"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(os.environ.get("LOG_FILE", "dailycat.log")),
            logging.StreamHandler(sys.stdout),
        ],
    )


def get_pg_dsn() -> str:
    return os.environ.get("PG_DSN", DEFAULT_PG_DSN)


def build_catalog() -> UnsplashCatalog:
    client_id = os.environ.get("UNSPLASH_CLIENT_ID", "").strip()
    if not client_id:
        raise RuntimeError("UNSPLASH_CLIENT_ID environment variable is not set")
    return UnsplashCatalog(
        client_id=client_id,
        query=os.environ.get("UNSPLASH_QUERY", "cat"),
        timeout=int(os.environ.get("UNSPLASH_TIMEOUT", "30")),
    )


@dataclass
class Stores:
    config: PostgresConfigStore
    days: PostgresDayStore
    pool: PostgresAvailablePool
    ledger: PostgresPhotoIdLedger


def build_stores(pg_dsn: str) -> Stores:
    """Ensure the schema and return stores with the ledger writer attached."""
    ensure_postgres_schema(pg_dsn)
    ledger = PostgresPhotoIdLedger(pg_dsn)
    days = PostgresDayStore(pg_dsn)
    attach_ledger_writer(days, ledger)
    return Stores(
        config=PostgresConfigStore(pg_dsn),
        days=days,
        pool=PostgresAvailablePool(pg_dsn),
        ledger=ledger,
    )
