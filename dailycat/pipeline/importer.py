"""Scheduled photo import: catalog pages -> ledger check -> available pool.

Each run reads `import_limit` pages starting at the persisted `last_page`
cursor. The cursor is written back after every successful page so a crash
mid-run never replays pages that already advanced it. A failing page is
logged and skipped; setup failures (missing config) propagate so the host
scheduler retries the whole run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    start_page: int = 0
    next_page: int = 0
    pages_requested: List[int] = field(default_factory=list)
    failed_pages: List[int] = field(default_factory=list)
    imported: int = 0
    skipped: bool = False


def filter_unused_photo_ids(candidates, ledger) -> List[str]:
    """Candidate ids not yet in the ledger, in catalog order, without repeats."""
    out: List[str] = []
    seen = set()
    for c in candidates:
        if c.id in seen:
            continue
        seen.add(c.id)
        if not ledger.contains(c.id):
            out.append(c.id)
    return out


def import_photos(*, config_store, catalog, ledger, pool) -> ImportResult:
    logger.info("Starting photo import task")
    config = config_store.get_config()
    if not config.import_enabled:
        logger.info("Photo import is disabled in configuration")
        return ImportResult(start_page=config.last_page, next_page=config.last_page, skipped=True)

    result = ImportResult(start_page=config.last_page, next_page=config.last_page)
    logger.info(f"Starting import from page {config.last_page} (limit={config.import_limit})")

    for page in range(config.last_page, config.last_page + config.import_limit):
        result.pages_requested.append(page)
        try:
            logger.info(f"Fetching page {page} from catalog")
            search = catalog.list_candidates(page)
            logger.info(f"Fetched {len(search.results)} photos from page {page}")

            available = filter_unused_photo_ids(search.results, ledger)
            logger.info(f"Found {len(available)} new available photos from page {page}")
            if available:
                pool.add_many(available)
                result.imported += len(available)
                logger.info(f"Stored {len(available)} available photo IDs from page {page}")

            result.next_page = page + 1
            config_store.update_config(last_page=result.next_page)
            logger.info(f"Updated config with last_page: {result.next_page}")
        except Exception as e:
            logger.error(f"Error processing page {page}: {e}", exc_info=True)
            result.failed_pages.append(page)

    logger.info(
        f"Completed photo import task. next_page={result.next_page} "
        f"imported={result.imported} failed_pages={result.failed_pages}"
    )
    return result
