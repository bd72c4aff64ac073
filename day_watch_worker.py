#!/usr/bin/env python3
"""On-demand filler trigger.

Polls for day records in the `created` state and runs the on-demand filler
for each one, synchronously and in date order.
"""

from __future__ import annotations

import logging
import os
import time

import schedule
from dotenv import load_dotenv

from dailycat.pipeline.on_demand_filler import DEFAULT_MAX_ATTEMPTS, handle_day_record_created
from dailycat.runtime import build_catalog, build_stores, configure_logging, get_pg_dsn
from dailycat.storage.day_records import DayStatus

logger = logging.getLogger("day_watch_worker")


def run_once() -> int:
    load_dotenv()
    stores = build_stores(get_pg_dsn())
    catalog = build_catalog()
    max_attempts = int(os.environ.get("ON_DEMAND_MAX_ATTEMPTS", str(DEFAULT_MAX_ATTEMPTS)))

    pending = stores.days.list_by_status(DayStatus.CREATED, limit=int(os.environ.get("WATCH_BATCH", "20")))
    filled = 0
    for record in pending:
        ok = handle_day_record_created(
            record.id,
            record,
            catalog=catalog,
            day_store=stores.days,
            ledger=stores.ledger,
            max_attempts=max_attempts,
        )
        if ok:
            filled += 1
    if pending:
        logger.info(f"[watch] created={len(pending)} filled={filled}")
    return filled


def _run_logged() -> None:
    try:
        run_once()
    except Exception as e:
        logger.error(f"Error in day watch task: {e}", exc_info=True)


def run_scheduled() -> None:
    interval = int(os.environ.get("WATCH_INTERVAL_SECONDS", "60"))
    schedule.every(interval).seconds.do(_run_logged)
    while True:
        schedule.run_pending()
        time.sleep(1)


if __name__ == "__main__":
    load_dotenv()
    configure_logging()
    mode = (os.environ.get("WATCH_MODE") or "scheduled").lower().strip()
    if mode in ("scheduled", "daemon"):
        run_scheduled()
    else:
        run_once()
