"""Tier guarantee applied to completed batches."""

from __future__ import annotations

import logging
import random
from typing import Optional

from .behavior import BehaviorKind, GuaranteeTier
from .resolver import ResolvedDraw, TierTable
from .sampler import sample
from .types import Item

logger = logging.getLogger(__name__)


def promote_tier_weights(tier_weights: TierTable, threshold: int) -> list[tuple[int, float]]:
    """Re-tag every tier below ``threshold`` as ``threshold``.

    Weights are kept per entry and never summed, so the result may hold
    several entries for ``threshold``, each an independent alternative.
    """
    return [
        (threshold if tier < threshold else tier, weight)
        for tier, weight in tier_weights
    ]


def apply_guarantee(
    batch: list[Item],
    resolved: ResolvedDraw,
    rng: Optional[random.Random] = None,
    kind: Optional[BehaviorKind] = None,
) -> list[Item]:
    """Enforce the behavior's tier guarantee on ``batch`` in place.

    Parameters
    ----------
    batch : list[Item]
        Picks of one batch, in pick order.
    resolved : ResolvedDraw
        Tables the batch was drawn from.
    rng : Optional[random.Random], default: None
        Randomness source for the reroll.
    kind : Optional[BehaviorKind], default: None
        Behavior kind to apply. Defaults to the kind of ``resolved.behavior``.

    Returns
    -------
    list[Item]
        ``batch`` itself. For :class:`GuaranteeTier` behaviors where no pick
        reaches the threshold, its last element has been replaced by a
        reroll from the promoted tier table. Otherwise it is untouched.
    """
    if kind is None:
        kind = resolved.behavior.kind
    if not isinstance(kind, GuaranteeTier) or not batch:
        return batch

    threshold = kind.threshold
    if any(item.tier >= threshold for item in batch):
        return batch

    tier = sample(promote_tier_weights(resolved.tier_weights, threshold), rng)
    replacement = sample(resolved.item_weights[tier], rng)
    logger.debug(
        f"Guarantee tier >= {threshold} unmet; replaced item {batch[-1].id} "
        f"with {replacement.id} (tier {tier})"
    )
    batch[-1] = replacement
    return batch


__all__ = ["apply_guarantee", "promote_tier_weights"]
