"""Turns a stored configuration into the weight tables the engine samples."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Sequence, Tuple

from .errors import CatalogInconsistency, ConfigurationError, NotFound
from .types import TIERS, BehaviorDefinition, DrawConfiguration, DrawDetail, Item

if TYPE_CHECKING:
    from gachadraw.catalog import CatalogStore
    from .cache import ItemCache

logger = logging.getLogger(__name__)

TierTable = Sequence[Tuple[int, float]]


@dataclass(frozen=True)
class ResolvedDetail:
    """A configuration entry paired with its catalog item."""

    detail: DrawDetail
    item: Item


@dataclass(frozen=True)
class ResolvedDraw:
    """Everything the engine needs to run draws for one request.

    Attributes
    ----------
    configuration : DrawConfiguration
        The configuration as loaded from the catalog store.
    behavior : BehaviorDefinition
        Behavior selected by the request.
    details : tuple[ResolvedDetail, ...]
        Configuration entries with their items attached, in stored order.
    tier_weights : tuple[tuple[int, float], ...]
        One ``(tier, rate)`` entry per tier, in tier order.
    item_weights : Mapping[int, tuple[tuple[Item, float], ...]]
        ``(item, weight)`` entries per tier. Every tier has a key; tiers
        without items map to an empty tuple.
    """

    configuration: DrawConfiguration
    behavior: BehaviorDefinition
    details: tuple[ResolvedDetail, ...]
    tier_weights: tuple[tuple[int, float], ...]
    item_weights: Mapping[int, tuple[tuple[Item, float], ...]]

    @property
    def spin_count(self) -> int:
        return self.behavior.spin_count


def find_behavior(
    configuration: DrawConfiguration, behavior_id: Any
) -> BehaviorDefinition:
    """Return the behavior of ``configuration`` whose id matches ``behavior_id``.

    Ids are compared as strings so that ``7`` and ``"7"`` match.

    Raises
    ------
    NotFound
        If no behavior matches.
    """
    wanted = str(behavior_id)
    for behavior in configuration.behaviors:
        if str(behavior.id) == wanted:
            return behavior
    raise NotFound(
        f"behavior {behavior_id!r} not found in configuration {configuration.id!r}"
    )


def build_tier_weights(configuration: DrawConfiguration) -> tuple[tuple[int, float], ...]:
    """Return the ``(tier, rate)`` table covering every tier.

    Raises
    ------
    ConfigurationError
        If the configuration has no rate for one of :data:`TIERS`.
    """
    missing = [tier for tier in TIERS if tier not in configuration.tier_rates]
    if missing:
        raise ConfigurationError(
            f"configuration {configuration.id!r} has no rate for tiers {missing}"
        )
    return tuple((tier, configuration.tier_rates[tier]) for tier in TIERS)


def build_item_weights(
    details: Sequence[ResolvedDetail],
) -> dict[int, tuple[tuple[Item, float], ...]]:
    """Group resolved entries by item tier into per-tier ``(item, weight)`` tables."""
    grouped: dict[int, list[tuple[Item, float]]] = {tier: [] for tier in TIERS}
    for resolved in details:
        grouped[resolved.item.tier].append((resolved.item, resolved.detail.weight))
    return {tier: tuple(entries) for tier, entries in grouped.items()}


def resolve_draw(
    catalog: "CatalogStore",
    cache: "ItemCache",
    configuration_id: Any,
    behavior_id: Any,
) -> ResolvedDraw:
    """Load a configuration and build the tables for ``behavior_id``.

    The cache must already be validated for the current catalog version.

    Raises
    ------
    NotFound
        If the configuration or the behavior does not exist.
    CatalogInconsistency
        If an entry references an item missing from the catalog or an item
        whose tier is outside the supported range.
    ConfigurationError
        If the selected behavior has no picks per batch or a tier has no rate.
    """
    configuration = catalog.fetch_configuration(configuration_id)
    if configuration is None:
        raise NotFound(f"draw configuration {configuration_id!r} not found")

    details = []
    for detail in configuration.details:
        item = cache.resolve(catalog, detail.item_id)
        if item.tier not in TIERS:
            logger.warning(
                f"Item {item.id} has unsupported tier {item.tier} "
                f"(configuration {configuration.id!r})"
            )
            raise CatalogInconsistency(
                f"item {item.id} has tier {item.tier}, expected one of {TIERS}"
            )
        details.append(ResolvedDetail(detail=detail, item=item))

    behavior = find_behavior(configuration, behavior_id)
    if behavior.spin_count < 1:
        raise ConfigurationError(
            f"behavior {behavior.id!r} must draw at least one item per batch"
        )

    return ResolvedDraw(
        configuration=configuration,
        behavior=behavior,
        details=tuple(details),
        tier_weights=build_tier_weights(configuration),
        item_weights=build_item_weights(details),
    )


__all__ = [
    "ResolvedDetail",
    "ResolvedDraw",
    "TierTable",
    "build_item_weights",
    "build_tier_weights",
    "find_behavior",
    "resolve_draw",
]
