"""Version-tagged item cache shared by every draw request of an engine."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Optional

from dotenv import load_dotenv

from gachadraw.db.utils import env_int

from .errors import CatalogInconsistency
from .types import Item

if TYPE_CHECKING:
    from gachadraw.catalog import CatalogStore

logger = logging.getLogger(__name__)

load_dotenv()
DEFAULT_BULK_LIMIT = env_int("GACHA_CACHE_BULK_LIMIT", 1000)


class ItemCache:
    """Lookup table from item id to :class:`Item`, tagged with a catalog version.

    The cache is only trustworthy for the version it was last validated
    against. :meth:`validate` drops every entry and prefetches the first
    ``bulk_limit`` items (by id) whenever the catalog version moves. The
    prefetch is an optimization only: items outside it are fetched one at a
    time by :meth:`resolve` and memoized until the next invalidation.

    Mutation is serialized by a per-instance lock. Fallback fetches run
    outside the lock, so concurrent misses for the same id may fetch twice;
    the last write wins. A fetched item is discarded instead of memoized if
    the cache was revalidated to another version in the meantime.
    """

    def __init__(self, bulk_limit: Optional[int] = None) -> None:
        self.bulk_limit = DEFAULT_BULK_LIMIT if bulk_limit is None else bulk_limit
        if self.bulk_limit < 0:
            raise ValueError("bulk_limit must not be negative")
        self._items: dict[int, Item] = {}
        self._version: Optional[str] = None
        self._lock = threading.RLock()

    @property
    def version(self) -> Optional[str]:
        """Catalog version the cache was last validated against."""
        return self._version

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def clear(self) -> None:
        """Drop every entry and forget the version marker."""
        with self._lock:
            self._items.clear()
            self._version = None

    def validate(self, catalog: "CatalogStore", current_version: str) -> bool:
        """Bring the cache in line with ``current_version``.

        Parameters
        ----------
        catalog : CatalogStore
            Store used for the bulk prefetch.
        current_version : str
            Catalog generation reported by the version oracle.

        Returns
        -------
        bool
            ``True`` when the cache was reloaded, ``False`` when it was
            already current.
        """
        with self._lock:
            if self._version is not None and self._version == current_version:
                return False
            logger.debug(
                f"Item cache version {self._version!r} is stale; "
                f"reloading for {current_version!r}"
            )
            self._items.clear()
            self._version = None
            for item in catalog.fetch_items(limit=self.bulk_limit):
                self._items[item.id] = item
            self._version = current_version
            logger.debug(f"Prefetched {len(self._items)} catalog items")
            return True

    def get(self, item_id: int) -> Optional[Item]:
        """Return the cached item for ``item_id`` or ``None``."""
        with self._lock:
            return self._items.get(item_id)

    def resolve(self, catalog: "CatalogStore", item_id: int) -> Item:
        """Return the item for ``item_id``, fetching and memoizing it on a miss.

        Raises
        ------
        CatalogInconsistency
            If the catalog has no item with this id.
        """
        with self._lock:
            cached = self._items.get(item_id)
            version = self._version
        if cached is not None:
            return cached

        logger.debug(f"Item {item_id} not cached; fetching from catalog")
        fetched = catalog.fetch_items(item_id=item_id)
        if not fetched:
            logger.warning(f"Item {item_id} is referenced but missing from the catalog")
            raise CatalogInconsistency(f"item {item_id} is missing from the catalog")
        item = fetched[0]

        with self._lock:
            if self._version == version:
                self._items[item.id] = item
        return item


__all__ = ["DEFAULT_BULK_LIMIT", "ItemCache"]
