#!/usr/bin/env python3
"""Photo import worker.

Runs one import cycle (or hourly on a schedule): pages through the Unsplash
cat search from the persisted cursor, drops ids already in the used-photo
ledger, and stores the rest in the available pool.
"""

from __future__ import annotations

import logging
import os
import time

import schedule
from dotenv import load_dotenv

from dailycat.pipeline.importer import import_photos
from dailycat.runtime import build_catalog, build_stores, configure_logging, get_pg_dsn

logger = logging.getLogger("import_photos_worker")


def run_once() -> None:
    load_dotenv()
    stores = build_stores(get_pg_dsn())
    catalog = build_catalog()
    result = import_photos(config_store=stores.config, catalog=catalog, ledger=stores.ledger, pool=stores.pool)
    logger.info(
        f"[import] next_page={result.next_page} imported={result.imported} "
        f"failed_pages={result.failed_pages} pool_size={stores.pool.count()}"
    )


def _run_logged() -> None:
    try:
        run_once()
    except Exception as e:
        logger.error(f"Error in scheduled photo import task: {e}", exc_info=True)


def run_scheduled() -> None:
    interval = int(os.environ.get("IMPORT_INTERVAL_MINUTES", "60"))
    schedule.every(interval).minutes.do(_run_logged)
    while True:
        schedule.run_pending()
        time.sleep(5)


if __name__ == "__main__":
    load_dotenv()
    configure_logging()
    mode = (os.environ.get("IMPORT_MODE") or "once").lower().strip()
    if mode in ("scheduled", "daemon"):
        run_scheduled()
    else:
        run_once()
