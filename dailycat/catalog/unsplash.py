"""Unsplash catalog client.

Two calls are used by the pipeline:
- `list_candidates(page)`: one page of search results (ids + minimal metadata)
- `get_detail(photo_id)`: full photo detail for a single id

Non-2xx responses are mapped onto `dailycat.catalog.errors` so callers can
tell a vanished photo (404) apart from rate limiting and other failures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from dailycat.catalog.errors import CatalogError, NotFoundError, RateLimitedError
from dailycat.catalog.photo_types import PhotoCandidate, PhotoDetail, SearchPage

logger = logging.getLogger(__name__)

RATE_LIMIT_MARKER = "Rate Limit Exceeded"


@dataclass(frozen=True)
class UnsplashCatalog:
    client_id: str
    query: str = "cat"
    per_page: int = 100
    order_by: str = "relevant"
    endpoint: str = "https://api.unsplash.com"
    timeout: int = 30

    name: str = "unsplash"

    def list_candidates(self, page: int = 1) -> SearchPage:
        params = {
            "query": self.query,
            "per_page": min(max(int(self.per_page), 1), 100),
            "order_by": self.order_by,
            "page": max(int(page), 1),
        }
        data = self._get_json(f"{self.endpoint}/search/photos", params=params)
        results: List[PhotoCandidate] = []
        for item in data.get("results") or []:
            if not isinstance(item, dict) or not item.get("id"):
                continue
            results.append(
                PhotoCandidate(
                    id=str(item["id"]),
                    alt_description=item.get("alt_description") or None,
                    raw=item,
                )
            )
        return SearchPage(
            results=results,
            total=int(data.get("total") or 0),
            total_pages=int(data.get("total_pages") or 0),
        )

    def get_detail(self, photo_id: str) -> PhotoDetail:
        data = self._get_json(f"{self.endpoint}/photos/{photo_id}")
        return PhotoDetail.from_api(data)

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        logger.info(f"Fetching from Unsplash API: {url} params={params or {}}")
        headers = {
            "Authorization": f"Client-ID {self.client_id}",
            "Accept-Version": "v1",
            "User-Agent": "dailycat/1.0",
        }
        resp = requests.get(url, params=params, headers=headers, timeout=self.timeout)
        if resp.status_code >= 400:
            text = resp.text or ""
            logger.error(f"Failed to fetch {url}: {resp.status_code} {resp.reason}")
            if resp.status_code == 404:
                raise NotFoundError(text or f"not found: {url}", status_code=404)
            if resp.status_code == 429 or (resp.status_code == 403 and RATE_LIMIT_MARKER in text):
                raise RateLimitedError(text or "rate limited", status_code=resp.status_code)
            raise CatalogError(f"Failed to fetch {url}: {resp.status_code} {resp.reason}", status_code=resp.status_code)
        return resp.json() or {}
