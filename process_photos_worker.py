#!/usr/bin/env python3
"""Batch filler worker.

Drains up to `process_limit` ids from the available pool and assigns them to
dates that still need a photo: the next 30 days first, then backwards to
`processing_min_date`. A run that raises exits non-zero so the host retries.
"""

from __future__ import annotations

import logging
import os
import time

import schedule
from dotenv import load_dotenv

from dailycat.pipeline.batch_filler import process_available_photos
from dailycat.runtime import build_catalog, build_stores, configure_logging, get_pg_dsn

logger = logging.getLogger("process_photos_worker")


def main() -> int:
    load_dotenv()
    stores = build_stores(get_pg_dsn())
    catalog = build_catalog()
    result = process_available_photos(
        config_store=stores.config,
        day_store=stores.days,
        pool=stores.pool,
        ledger=stores.ledger,
        catalog=catalog,
    )
    logger.info(
        f"[process] assigned={len(result.assigned)} discarded={len(result.discarded)} "
        f"dates_remaining={len(result.dates_remaining)}"
    )
    return 0


def _run_logged() -> None:
    try:
        main()
    except Exception as e:
        logger.error(f"Error in process available photos task: {e}", exc_info=True)


def run_scheduled() -> None:
    interval = int(os.environ.get("PROCESS_INTERVAL_MINUTES", "60"))
    schedule.every(interval).minutes.do(_run_logged)
    while True:
        schedule.run_pending()
        time.sleep(5)


if __name__ == "__main__":
    load_dotenv()
    configure_logging()
    mode = (os.environ.get("PROCESS_MODE") or "once").lower().strip()
    if mode in ("scheduled", "daemon"):
        run_scheduled()
    else:
        raise SystemExit(main())
