"""Draw engine orchestrating cache validation, resolution and sampling."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Iterable, Optional

from .cache import ItemCache
from .guarantee import apply_guarantee
from .resolver import ResolvedDraw, resolve_draw
from .sampler import sample
from .types import DrawRequest, Item

if TYPE_CHECKING:
    from gachadraw.catalog import CatalogStore

logger = logging.getLogger(__name__)

Batch = list[Item]


def draw_pick(resolved: ResolvedDraw, rng: random.Random) -> Item:
    """Draw one item: a tier by rate, then an item within that tier."""
    tier = sample(resolved.tier_weights, rng)
    return sample(resolved.item_weights[tier], rng)


def draw_batches(
    resolved: ResolvedDraw,
    count: int,
    rng: Optional[random.Random] = None,
) -> list[Batch]:
    """Produce ``count`` independent batches of ``resolved.spin_count`` picks.

    Each batch is passed through :func:`apply_guarantee` once complete.
    """
    if count < 1:
        raise ValueError("count must be at least 1")
    if rng is None:
        rng = random.Random()

    batches: list[Batch] = []
    for _ in range(count):
        batch = [draw_pick(resolved, rng) for _ in range(resolved.spin_count)]
        batches.append(apply_guarantee(batch, resolved, rng))
    return batches


class DrawEngine:
    """Resolves draw requests against a catalog store.

    The engine owns the :class:`ItemCache`, so one engine instance should be
    shared for the lifetime of the process. Catalog stores are per session
    and are passed to each call.
    """

    def __init__(
        self,
        *,
        cache: Optional[ItemCache] = None,
        bulk_limit: Optional[int] = None,
    ) -> None:
        """Create a draw engine.

        Parameters
        ----------
        cache : Optional[ItemCache], default: None
            Item cache to use. A new one is created when omitted.
        bulk_limit : Optional[int], default: None
            Prefetch size for a newly created cache. Ignored when ``cache``
            is supplied.
        """
        self.cache = cache if cache is not None else ItemCache(bulk_limit=bulk_limit)

    def refresh(self, catalog: "CatalogStore") -> bool:
        """Validate the cache against the catalog's current version.

        Returns ``True`` when the cache was reloaded.
        """
        return self.cache.validate(catalog, catalog.fetch_catalog_version())

    def resolve(self, catalog: "CatalogStore", request: DrawRequest) -> ResolvedDraw:
        """Validate the cache and resolve the request's configuration and behavior."""
        self.refresh(catalog)
        return resolve_draw(
            catalog, self.cache, request.configuration_id, request.behavior_id
        )

    def draw(
        self,
        catalog: "CatalogStore",
        request: DrawRequest,
        *,
        rng: Optional[random.Random] = None,
    ) -> list[Batch]:
        """Run a draw request end to end.

        Parameters
        ----------
        catalog : CatalogStore
            Store bound to the caller's session.
        request : DrawRequest
            The request to serve.
        rng : Optional[random.Random], default: None
            Randomness source. When omitted a generator private to this call
            is created, seeded with ``request.seed`` if given.

        Returns
        -------
        list[list[Item]]
            ``request.count`` batches of ``spin_count`` items each.

        Raises
        ------
        NotFound, CatalogInconsistency, ConfigurationError
            See :mod:`gachadraw.draw.errors`.
        """
        resolved = self.resolve(catalog, request)
        if rng is None:
            rng = random.Random(request.seed)
        batches = draw_batches(resolved, request.count, rng)
        logger.debug(
            f"Drew {request.count} x {resolved.spin_count} from configuration "
            f"{resolved.configuration.id!r} behavior {resolved.behavior.id!r}"
        )
        return batches

    def draw_many(
        self,
        catalog: "CatalogStore",
        requests: Iterable[DrawRequest],
        *,
        rng: Optional[random.Random] = None,
    ) -> list[list[Batch]]:
        """Serve several independent requests as one unit.

        The first failing request aborts the whole set; no partial results
        are returned.
        """
        results: list[list[Batch]] = []
        for request in requests:
            results.append(self.draw(catalog, request, rng=rng))
        return results


__all__ = ["Batch", "DrawEngine", "draw_batches", "draw_pick"]
