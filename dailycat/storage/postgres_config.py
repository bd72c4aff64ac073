"""Pipeline configuration (singleton row in `pipeline_config`)."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Optional

import psycopg

from dailycat.dates import format_day_id, utc_today

CONFIG_ID = "config"


class ConfigNotFoundError(Exception):
    """The pipeline configuration row is missing"""
    pass


@dataclass
class PipelineConfig:
    min_date: str
    import_enabled: bool = True
    last_page: int = 1
    import_limit: int = 10
    process_limit: int = 10
    processing_min_date: str = ""

    def __post_init__(self) -> None:
        self.min_date = format_day_id(self.min_date)
        # processing_min_date falls back to min_date when unset
        self.processing_min_date = format_day_id(self.processing_min_date or self.min_date)
        self.last_page = max(1, int(self.last_page))
        self.import_limit = max(0, int(self.import_limit))
        self.process_limit = max(0, int(self.process_limit))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


UPDATABLE_FIELDS = ("min_date", "import_enabled", "last_page", "import_limit", "process_limit", "processing_min_date")


class PostgresConfigStore:
    def __init__(self, pg_dsn: str):
        self.pg_dsn = pg_dsn

    def get_config(self) -> PipelineConfig:
        with psycopg.connect(self.pg_dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT min_date, import_enabled, last_page, import_limit, process_limit, processing_min_date
                    FROM pipeline_config
                    WHERE id = %s
                    """,
                    (CONFIG_ID,),
                )
                row = cur.fetchone()
        if not row:
            raise ConfigNotFoundError(f"Configuration row not found at pipeline_config/{CONFIG_ID}")
        min_date, import_enabled, last_page, import_limit, process_limit, processing_min_date = row
        return PipelineConfig(
            min_date=_iso(min_date),
            import_enabled=bool(import_enabled),
            last_page=int(last_page),
            import_limit=int(import_limit),
            process_limit=int(process_limit),
            processing_min_date=_iso(processing_min_date),
        )

    def update_config(self, **fields: Any) -> None:
        """Partial update; unknown field names raise ValueError."""
        if not fields:
            return
        unknown = sorted(set(fields) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValueError(f"Unknown config fields: {', '.join(unknown)}")
        assignments = ", ".join(f"{k} = %({k})s" for k in fields)
        params = dict(fields)
        params["config_id"] = CONFIG_ID
        with psycopg.connect(self.pg_dsn, autocommit=True) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"UPDATE pipeline_config SET {assignments}, updated_at = now() WHERE id = %(config_id)s",
                    params,
                )
                if cur.rowcount == 0:
                    raise ConfigNotFoundError(f"Configuration row not found at pipeline_config/{CONFIG_ID}")

    def ensure_default_config(self, defaults: Optional[PipelineConfig] = None) -> None:
        """Seed the singleton row if missing; an existing row is left untouched."""
        cfg = defaults or PipelineConfig(min_date=utc_today().isoformat())
        with psycopg.connect(self.pg_dsn, autocommit=True) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO pipeline_config (
                      id, min_date, import_enabled, last_page, import_limit, process_limit, processing_min_date
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    ON CONFLICT (id) DO NOTHING
                    """,
                    (
                        CONFIG_ID,
                        cfg.min_date,
                        cfg.import_enabled,
                        cfg.last_page,
                        cfg.import_limit,
                        cfg.process_limit,
                        cfg.processing_min_date,
                    ),
                )


def _iso(value: Any) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
