from __future__ import annotations

import threading
import unittest
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from gachadraw.catalog import CatalogStore
from gachadraw.draw import CatalogInconsistency, Item, ItemCache
from gachadraw.models import Base, CatalogItem


class RecordingCatalog:
    """In-memory stand-in for :class:`CatalogStore` that records fetches."""

    def __init__(self, items: list[Item]):
        self.items = {item.id: item for item in items}
        self.bulk_calls: list[Optional[int]] = []
        self.single_calls: list[int] = []
        self.on_single_fetch = None

    def fetch_items(self, *, item_id=None, limit=None) -> list[Item]:
        if item_id is not None:
            self.single_calls.append(item_id)
            if self.on_single_fetch is not None:
                self.on_single_fetch()
            item = self.items.get(item_id)
            return [item] if item is not None else []
        self.bulk_calls.append(limit)
        ordered = [self.items[key] for key in sorted(self.items)]
        return ordered if limit is None else ordered[:limit]


def make_items(*ids: int) -> list[Item]:
    return [Item(id=item_id, tier=1 + item_id % 4, name=f"item-{item_id}") for item_id in ids]


class ItemCacheTests(unittest.TestCase):
    def test_validate_prefetches_bounded_prefix(self) -> None:
        catalog = RecordingCatalog(make_items(5, 1, 3, 2, 4))
        cache = ItemCache(bulk_limit=3)
        self.assertTrue(cache.validate(catalog, "v1"))
        self.assertEqual(catalog.bulk_calls, [3])
        self.assertEqual(len(cache), 3)
        for item_id in (1, 2, 3):
            self.assertIn(item_id, cache)
        self.assertIsNone(cache.get(4))
        self.assertEqual(cache.version, "v1")

    def test_validate_with_unchanged_version_is_noop(self) -> None:
        catalog = RecordingCatalog(make_items(1, 2))
        cache = ItemCache(bulk_limit=10)
        cache.validate(catalog, "v1")
        self.assertFalse(cache.validate(catalog, "v1"))
        self.assertEqual(len(catalog.bulk_calls), 1)

    def test_resolve_miss_fetches_once_and_memoizes(self) -> None:
        catalog = RecordingCatalog(make_items(1, 2, 3, 4))
        cache = ItemCache(bulk_limit=2)
        cache.validate(catalog, "v1")
        first = cache.resolve(catalog, 4)
        second = cache.resolve(catalog, 4)
        self.assertEqual(first.id, 4)
        self.assertIs(first, second)
        self.assertEqual(catalog.single_calls, [4])
        self.assertIs(cache.get(4), first)

    def test_resolve_hit_does_not_touch_catalog(self) -> None:
        catalog = RecordingCatalog(make_items(1, 2))
        cache = ItemCache(bulk_limit=2)
        cache.validate(catalog, "v1")
        cache.resolve(catalog, 2)
        self.assertEqual(catalog.single_calls, [])

    def test_resolve_missing_item_raises(self) -> None:
        catalog = RecordingCatalog(make_items(1))
        cache = ItemCache(bulk_limit=1)
        cache.validate(catalog, "v1")
        with self.assertRaises(CatalogInconsistency):
            cache.resolve(catalog, 99)
        self.assertNotIn(99, cache)

    def test_version_change_discards_lazily_fetched_items(self) -> None:
        catalog = RecordingCatalog(make_items(1, 2, 3, 4))
        cache = ItemCache(bulk_limit=2)
        cache.validate(catalog, "v1")
        cache.resolve(catalog, 4)
        self.assertIsNotNone(cache.get(4))

        self.assertTrue(cache.validate(catalog, "v2"))
        self.assertIsNone(cache.get(4))
        self.assertEqual(cache.resolve(catalog, 4).id, 4)
        self.assertEqual(catalog.single_calls, [4, 4])

    def test_fetch_racing_with_invalidation_is_not_memoized(self) -> None:
        catalog = RecordingCatalog(make_items(1, 2, 3))
        cache = ItemCache(bulk_limit=1)
        cache.validate(catalog, "v1")
        catalog.on_single_fetch = lambda: cache.validate(catalog, "v2")

        item = cache.resolve(catalog, 3)
        self.assertEqual(item.id, 3)
        self.assertEqual(cache.version, "v2")
        self.assertNotIn(3, cache)

    def test_clear_forces_reload(self) -> None:
        catalog = RecordingCatalog(make_items(1))
        cache = ItemCache(bulk_limit=5)
        cache.validate(catalog, "v1")
        cache.clear()
        self.assertIsNone(cache.version)
        self.assertTrue(cache.validate(catalog, "v1"))

    def test_negative_bulk_limit_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ItemCache(bulk_limit=-1)

    def test_concurrent_validate_and_resolve(self) -> None:
        catalog = RecordingCatalog(make_items(*range(1, 41)))
        cache = ItemCache(bulk_limit=5)
        barrier = threading.Barrier(8)
        errors: list[BaseException] = []

        def worker(index: int) -> None:
            try:
                barrier.wait()
                for round_no in range(200):
                    cache.validate(catalog, f"v{(index + round_no) % 3}")
                    item_id = 1 + (index * 7 + round_no) % 40
                    self.assertEqual(cache.resolve(catalog, item_id).id, item_id)
            except BaseException as exc:  # surfaced in the main thread
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        self.assertEqual(errors, [])
        self.assertIn(cache.version, {"v0", "v1", "v2"})
        for item_id in range(1, 41):
            cached = cache.get(item_id)
            if cached is not None:
                self.assertIs(cached, catalog.items[item_id])

        self.assertTrue(cache.validate(catalog, "final"))
        self.assertEqual(cache.version, "final")
        self.assertEqual([i for i in range(1, 41) if i in cache], [1, 2, 3, 4, 5])


class ItemCacheWithCatalogStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(
            bind=self.engine, future=True, expire_on_commit=False
        )

    def tearDown(self) -> None:
        self.engine.dispose()

    def test_catalog_store_backs_prefetch_and_fallback(self) -> None:
        with self.Session.begin() as session:
            session.add_all(
                [
                    CatalogItem(id=item_id, tier=1, name=f"Item {item_id}")
                    for item_id in (30, 10, 20)
                ]
            )
            session.flush()

            catalog = CatalogStore(session)
            cache = ItemCache(bulk_limit=2)
            cache.validate(catalog, "v1")
            self.assertIn(10, cache)
            self.assertIn(20, cache)
            self.assertNotIn(30, cache)

            item = cache.resolve(catalog, 30)
            self.assertEqual(item.name, "Item 30")
            self.assertIn(30, cache)

            with self.assertRaises(CatalogInconsistency):
                cache.resolve(catalog, 40)


if __name__ == "__main__":
    unittest.main()
