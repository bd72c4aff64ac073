"""In-memory stand-ins for the Postgres stores and the Unsplash catalog."""

from typing import Dict, List, Optional, Tuple

from dailycat.catalog.errors import NotFoundError
from dailycat.catalog.photo_types import PhotoCandidate, PhotoDetail, PhotoUser, SearchPage
from dailycat.storage.day_records import DayRecord, DayStore, Mutation
from dailycat.storage.postgres_config import UPDATABLE_FIELDS, PipelineConfig


def make_photo(photo_id: str) -> PhotoDetail:
    return PhotoDetail(
        id=photo_id,
        alt_description=f"cat photo {photo_id}",
        width=4000,
        height=3000,
        likes=12,
        urls={"regular": f"https://images.example.com/{photo_id}?w=1080"},
        links={"html": f"https://unsplash.com/photos/{photo_id}"},
        user=PhotoUser(id="u1", username="catlover", name="Cat Lover"),
        tags=["cat", "pet"],
    )


class InMemoryDayStore(DayStore):
    def __init__(self):
        super().__init__()
        self.records: Dict[str, DayRecord] = {}
        self.writes: List[Tuple[str, Optional[DayRecord], Optional[DayRecord]]] = []
        self.add_write_listener(lambda day_id, before, after: self.writes.append((day_id, before, after)))

    def get(self, day_id):
        return self.records.get(day_id)

    def get_range(self, start, end):
        return [self.records[k] for k in sorted(self.records) if start <= k <= end]

    def list_by_status(self, status, *, limit=100):
        return [r for r in self.get_range("0000-00-00", "9999-99-99") if r.status == status][:limit]

    def get_most_recent(self):
        if not self.records:
            return None
        return self.records[max(self.records)]

    def _mutate(self, day_id: str, mutation: Mutation):
        before = self.records.get(day_id)
        after = mutation(before)
        self.records[day_id] = after
        return before, after

    def _delete(self, day_id):
        return self.records.pop(day_id, None)


class InMemoryPhotoIdSet:
    """Pool or ledger; keeps insertion order so `get_next` is deterministic."""

    def __init__(self, ids=()):
        self.ids: Dict[str, None] = dict.fromkeys(ids)
        self.removed: List[str] = []

    def contains(self, photo_id):
        return photo_id in self.ids

    def add(self, photo_id):
        self.ids[photo_id] = None

    def add_many(self, photo_ids):
        before = len(self.ids)
        for pid in photo_ids:
            self.ids[pid] = None
        return len(self.ids) - before

    def remove(self, photo_id):
        self.removed.append(photo_id)
        self.ids.pop(photo_id, None)

    delete = remove

    def get_next(self, limit):
        return list(self.ids)[:limit]

    def all_ids(self):
        return list(self.ids)

    def count(self):
        return len(self.ids)


class InMemoryConfigStore:
    def __init__(self, config: PipelineConfig):
        self.config = config
        self.updates: List[dict] = []

    def get_config(self):
        return PipelineConfig(**self.config.to_dict())

    def update_config(self, **fields):
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown config fields: {sorted(unknown)}")
        self.updates.append(dict(fields))
        for k, v in fields.items():
            setattr(self.config, k, v)


class FakeCatalog:
    """Pages map page number -> candidate ids; any id resolves unless listed in `missing`/`detail_errors`."""

    def __init__(self, pages=None, missing=(), list_errors=None, detail_errors=None, details=None):
        self.pages: Dict[int, List[str]] = pages or {}
        self.missing = set(missing)
        self.list_errors: Dict[int, Exception] = list_errors or {}
        self.detail_errors: Dict[str, Exception] = detail_errors or {}
        self.details: Dict[str, PhotoDetail] = details or {}
        self.list_calls: List[int] = []
        self.detail_calls: List[str] = []

    def list_candidates(self, page=1):
        self.list_calls.append(page)
        if page in self.list_errors:
            raise self.list_errors[page]
        ids = self.pages.get(page, [])
        return SearchPage(results=[PhotoCandidate(id=i) for i in ids], total=len(ids), total_pages=len(self.pages))

    def get_detail(self, photo_id):
        self.detail_calls.append(photo_id)
        if photo_id in self.detail_errors:
            raise self.detail_errors[photo_id]
        if photo_id in self.missing:
            raise NotFoundError(f"photo {photo_id} not found", status_code=404)
        return self.details.get(photo_id) or make_photo(photo_id)
