import unittest

from dailycat.pipeline.importer import import_photos
from dailycat.storage.postgres_config import PipelineConfig

from pipeline_fakes import FakeCatalog, InMemoryConfigStore, InMemoryPhotoIdSet


def _pages(first, last, per_page=3):
    return {p: [f"p{p}-{i}" for i in range(per_page)] for p in range(first, last + 1)}


class TestImporter(unittest.TestCase):
    def setUp(self):
        self.config_store = InMemoryConfigStore(
            PipelineConfig(min_date="2025-01-01", last_page=5, import_limit=10)
        )
        self.ledger = InMemoryPhotoIdSet()
        self.pool = InMemoryPhotoIdSet()

    def _run(self, catalog):
        return import_photos(config_store=self.config_store, catalog=catalog, ledger=self.ledger, pool=self.pool)

    def test_requests_pages_in_order_and_advances_cursor(self):
        catalog = FakeCatalog(pages=_pages(1, 20))
        result = self._run(catalog)

        self.assertEqual(catalog.list_calls, list(range(5, 15)))
        self.assertEqual(self.config_store.config.last_page, 15)
        self.assertEqual([u["last_page"] for u in self.config_store.updates], list(range(6, 16)))
        self.assertEqual(result.next_page, 15)
        self.assertEqual(result.imported, 30)
        self.assertEqual(self.pool.count(), 30)

    def test_failing_page_is_logged_and_skipped(self):
        catalog = FakeCatalog(pages=_pages(1, 20), list_errors={8: RuntimeError("upstream exploded")})
        with self.assertLogs("dailycat.pipeline.importer", level="ERROR") as logs:
            result = self._run(catalog)

        self.assertEqual(catalog.list_calls, list(range(5, 15)))
        self.assertEqual(result.failed_pages, [8])
        self.assertTrue(any("page 8" in line for line in logs.output))
        self.assertEqual([u["last_page"] for u in self.config_store.updates], [6, 7, 8, 10, 11, 12, 13, 14, 15])
        self.assertEqual(self.config_store.config.last_page, 15)
        self.assertFalse(self.pool.contains("p8-0"))
        self.assertTrue(self.pool.contains("p9-0"))

    def test_used_ids_are_filtered(self):
        self.config_store.config.import_limit = 1
        self.ledger.add_many(["p5-0", "p5-2"])
        self._run(FakeCatalog(pages=_pages(5, 5)))
        self.assertEqual(self.pool.all_ids(), ["p5-1"])

    def test_page_with_only_used_ids_still_advances(self):
        self.config_store.config.import_limit = 1
        self.ledger.add_many(["a", "b"])
        result = self._run(FakeCatalog(pages={5: ["a", "b"]}))
        self.assertEqual(result.imported, 0)
        self.assertEqual(self.pool.count(), 0)
        self.assertEqual(self.config_store.config.last_page, 6)

    def test_disabled_import_is_a_no_op(self):
        self.config_store.config.import_enabled = False
        catalog = FakeCatalog(pages=_pages(1, 20))
        result = self._run(catalog)
        self.assertTrue(result.skipped)
        self.assertEqual(catalog.list_calls, [])
        self.assertEqual(self.config_store.updates, [])

    def test_reimporting_same_page_does_not_duplicate_pool(self):
        self.config_store.config.import_limit = 1
        self.ledger.add("p5-1")
        catalog = FakeCatalog(pages=_pages(5, 5))
        self._run(catalog)
        self.config_store.config.last_page = 5
        self._run(catalog)

        self.assertEqual(catalog.list_calls, [5, 5])
        self.assertEqual(sorted(self.pool.all_ids()), ["p5-0", "p5-2"])

    def test_missing_config_propagates(self):
        class BrokenConfigStore:
            def get_config(self):
                raise LookupError("config missing")

        with self.assertRaises(LookupError):
            import_photos(config_store=BrokenConfigStore(), catalog=FakeCatalog(), ledger=self.ledger, pool=self.pool)


if __name__ == "__main__":
    unittest.main()
