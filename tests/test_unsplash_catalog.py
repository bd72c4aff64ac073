import json
import os
import unittest
from unittest import mock

from dailycat.catalog.errors import CatalogError, NotFoundError, RateLimitedError
from dailycat.catalog.photo_types import PhotoDetail
from dailycat.catalog.unsplash import UnsplashCatalog


FIXTURE_PATH = os.path.join(os.path.dirname(__file__), "fixtures", "photo.json")


def _load_photo():
    with open(FIXTURE_PATH, "r", encoding="utf-8") as f:
        return json.load(f)


def _response(status_code=200, payload=None, text="", reason="OK"):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.reason = reason
    resp.text = text
    resp.json.return_value = payload
    return resp


class TestUnsplashCatalog(unittest.TestCase):
    def setUp(self):
        self.catalog = UnsplashCatalog(client_id="test-client-id")

    @mock.patch("dailycat.catalog.unsplash.requests.get")
    def test_list_candidates_parses_page(self, get):
        get.return_value = _response(
            payload={
                "total": 250,
                "total_pages": 3,
                "results": [{"id": "a1", "alt_description": "a cat"}, {"id": "b2"}, {"no_id": True}],
            }
        )
        page = self.catalog.list_candidates(7)

        self.assertEqual([c.id for c in page.results], ["a1", "b2"])
        self.assertEqual(page.total, 250)
        self.assertEqual(page.total_pages, 3)
        url = get.call_args[0][0]
        kwargs = get.call_args[1]
        self.assertEqual(url, "https://api.unsplash.com/search/photos")
        self.assertEqual(kwargs["params"]["page"], 7)
        self.assertEqual(kwargs["params"]["query"], "cat")
        self.assertEqual(kwargs["params"]["per_page"], 100)
        self.assertEqual(kwargs["headers"]["Authorization"], "Client-ID test-client-id")

    @mock.patch("dailycat.catalog.unsplash.requests.get")
    def test_get_detail_normalizes_payload(self, get):
        get.return_value = _response(payload=_load_photo())
        photo = self.catalog.get_detail("Z8ayc3Y-ZVM")

        self.assertEqual(get.call_args[0][0], "https://api.unsplash.com/photos/Z8ayc3Y-ZVM")
        self.assertEqual(photo.id, "Z8ayc3Y-ZVM")
        self.assertEqual(photo.likes, 1287)
        self.assertEqual(photo.user.username, "mimi_photos")
        self.assertEqual(photo.user.profile_url, "https://unsplash.com/@mimi_photos")
        self.assertEqual(photo.user.profile_image, "https://images.unsplash.com/profile-1?w=64")
        self.assertEqual(photo.tags, ["cat", "tabby", "window"])
        self.assertEqual(photo.urls["regular"], "https://images.unsplash.com/photo-1684051234567-abc?w=1080")

    @mock.patch("dailycat.catalog.unsplash.requests.get")
    def test_404_raises_not_found(self, get):
        get.return_value = _response(status_code=404, text="Couldn't find Photo", reason="Not Found")
        with self.assertRaises(NotFoundError):
            self.catalog.get_detail("gone")

    @mock.patch("dailycat.catalog.unsplash.requests.get")
    def test_403_rate_limit_raises_rate_limited(self, get):
        get.return_value = _response(status_code=403, text="Rate Limit Exceeded", reason="Forbidden")
        with self.assertRaises(RateLimitedError):
            self.catalog.list_candidates(1)

    @mock.patch("dailycat.catalog.unsplash.requests.get")
    def test_429_raises_rate_limited(self, get):
        get.return_value = _response(status_code=429, text="slow down", reason="Too Many Requests")
        with self.assertRaises(RateLimitedError):
            self.catalog.get_detail("x")

    @mock.patch("dailycat.catalog.unsplash.requests.get")
    def test_other_errors_are_generic(self, get):
        get.return_value = _response(status_code=503, text="unavailable", reason="Service Unavailable")
        with self.assertRaises(CatalogError) as ctx:
            self.catalog.get_detail("x")
        self.assertNotIsInstance(ctx.exception, NotFoundError)
        self.assertNotIsInstance(ctx.exception, RateLimitedError)
        self.assertEqual(ctx.exception.status_code, 503)


class TestPhotoDetail(unittest.TestCase):
    def test_stored_dict_keeps_full_unsplash_payload(self):
        payload = _load_photo()
        photo = PhotoDetail.from_api(payload)
        stored = json.loads(json.dumps(photo.to_dict()))
        self.assertEqual(stored["raw"], payload)

        restored = PhotoDetail.from_dict(stored)
        self.assertEqual(restored.id, photo.id)
        self.assertEqual(restored.user, photo.user)
        self.assertEqual(restored.tags, photo.tags)
        self.assertEqual(restored.links, photo.links)
        self.assertEqual(restored.raw, payload)

    def test_dict_without_raw_still_loads(self):
        restored = PhotoDetail.from_dict({"id": "abc", "urls": {"regular": "https://example.com/abc"}})
        self.assertEqual(restored.id, "abc")
        self.assertIsNone(restored.raw)

    def test_payload_without_id_is_rejected(self):
        with self.assertRaises(ValueError):
            PhotoDetail.from_api({"urls": {}})


if __name__ == "__main__":
    unittest.main()
