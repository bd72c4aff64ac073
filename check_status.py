#!/usr/bin/env python3
"""
Quick status check for the dailycat photo pipeline
"""

import os
import sys
from datetime import datetime

from dotenv import load_dotenv

from dailycat.dates import add_days, utc_today
from dailycat.pipeline.date_selection import FORWARD_WINDOW_DAYS, get_dates_needing_photos
from dailycat.pipeline.ledger_audit import audit_ledger, summarize
from dailycat.runtime import build_stores, get_pg_dsn
from dailycat.storage.day_records import DayStatus
from dailycat.storage.postgres_config import ConfigNotFoundError


def check_env():
    """Check required environment settings"""
    print("📋 Checking Environment")
    print("-" * 40)
    has_client_id = bool(os.environ.get("UNSPLASH_CLIENT_ID", "").strip())
    has_dsn = bool(os.environ.get("PG_DSN", "").strip())
    print(f"  UNSPLASH_CLIENT_ID: {'✅' if has_client_id else '❌'}")
    print(f"  PG_DSN: {'✅' if has_dsn else '⚠️  using default'}")
    return has_client_id


def check_config(stores):
    print("\n⚙️  Pipeline Config")
    print("-" * 40)
    try:
        cfg = stores.config.get_config()
    except ConfigNotFoundError as e:
        print(f"  ❌ {e} (run setup_env.py to seed it)")
        return None
    for key, value in cfg.to_dict().items():
        print(f"  {key}: {value}")
    return cfg


def check_days(stores, cfg):
    print("\n🗓️  Days")
    print("-" * 40)
    today = utc_today().isoformat()
    forward = get_dates_needing_photos(stores.days, today, add_days(today, FORWARD_WINDOW_DAYS - 1))
    print(f"  Next {FORWARD_WINDOW_DAYS} days needing photos: {len(forward)}")
    if cfg is not None:
        backward = get_dates_needing_photos(stores.days, cfg.processing_min_date, add_days(today, -1))
        print(f"  Backfill days needing photos (since {cfg.processing_min_date}): {len(backward)}")
    latest = stores.days.get_most_recent()
    if latest is not None:
        print(f"  Most recent day: {latest.id} ({latest.status})")
    stuck = stores.days.list_by_status(DayStatus.PROCESSING, limit=1000)
    print(f"  Days stuck in processing: {len(stuck)}")
    for r in stuck[:10]:
        print(f"    {r.id} (since {r.updated_at})")
    print(f"  Available pool size: {stores.pool.count()}")
    print(f"  Used photo ledger size: {stores.ledger.count()}")


def main():
    """Main status check"""
    load_dotenv()
    print("🔍 dailycat Pipeline Status Check")
    print("=" * 50)
    print(f"Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    env_ok = check_env()
    stores = build_stores(get_pg_dsn())
    cfg = check_config(stores)
    check_days(stores, cfg)

    print("\n🔎 Ledger Audit")
    print("-" * 40)
    report = audit_ledger(day_store=stores.days, ledger=stores.ledger)
    print(summarize(report))

    print("\n" + "=" * 50)
    if not env_ok or cfg is None or not report.ok:
        print("❌ Issues found")
        return 1
    print("✅ All checks passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
