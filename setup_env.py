#!/usr/bin/env python3
"""
Setup script: writes .env with Unsplash/Postgres settings and seeds the pipeline config
"""

import os

from dotenv import load_dotenv

from dailycat.dates import parse_day_id, utc_today
from dailycat.runtime import DEFAULT_PG_DSN
from dailycat.storage.postgres_config import PipelineConfig, PostgresConfigStore
from dailycat.storage.postgres_schema import ensure_postgres_schema


def _read_env(env_path):
    current = {}
    if os.path.exists(env_path):
        with open(env_path, 'r') as f:
            for line in f:
                if '=' in line and not line.strip().startswith('#'):
                    key, value = line.strip().split('=', 1)
                    current[key] = value
    return current


def _ask(prompt, default):
    value = input(f"{prompt} [{default}]: ").strip()
    return value or default


def setup_env():
    """Interactive setup for .env and the pipeline_config row"""
    print("🔧 dailycat - Environment Setup")
    print("=" * 50)
    print()

    env_path = ".env"
    current = _read_env(env_path)

    client_id = _ask("Unsplash access key (UNSPLASH_CLIENT_ID)", current.get('UNSPLASH_CLIENT_ID', ''))
    pg_dsn = _ask("Postgres DSN (PG_DSN)", current.get('PG_DSN', DEFAULT_PG_DSN))

    while True:
        min_date = _ask("Earliest servable date (min_date)", utc_today().isoformat())
        try:
            parse_day_id(min_date)
            break
        except ValueError:
            print("Invalid date. Use YYYY-MM-DD.")

    new_config = f"""# dailycat configuration

UNSPLASH_CLIENT_ID={client_id}
UNSPLASH_QUERY={current.get('UNSPLASH_QUERY', 'cat')}
PG_DSN={pg_dsn}

# Worker modes: once | scheduled
IMPORT_MODE={current.get('IMPORT_MODE', 'scheduled')}
PROCESS_MODE={current.get('PROCESS_MODE', 'scheduled')}
WATCH_MODE={current.get('WATCH_MODE', 'scheduled')}
ON_DEMAND_MAX_ATTEMPTS={current.get('ON_DEMAND_MAX_ATTEMPTS', '10')}
LOG_FILE={current.get('LOG_FILE', 'dailycat.log')}
"""

    if os.path.exists(env_path):
        backup_path = f"{env_path}.backup"
        os.rename(env_path, backup_path)
        print(f"📋 Backed up existing .env to {backup_path}")

    with open(env_path, 'w') as f:
        f.write(new_config)
    print("✅ .env file updated successfully!")

    load_dotenv(env_path, override=True)
    ensure_postgres_schema(pg_dsn)
    PostgresConfigStore(pg_dsn).ensure_default_config(
        PipelineConfig(min_date=min_date, processing_min_date=min_date)
    )
    print("✅ Schema ensured and pipeline config seeded (existing config left untouched)")
    print()
    print("🚀 Start the workers with:")
    print("   python3 import_photos_worker.py")
    print("   python3 process_photos_worker.py")
    print("   python3 day_watch_worker.py")


if __name__ == "__main__":
    setup_env()
