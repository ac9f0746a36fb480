"""Weighted random selection."""

from __future__ import annotations

import math
import random
from typing import Optional, Sequence, Tuple, TypeVar

from .errors import ConfigurationError

K = TypeVar("K")


def sample(
    pairs: Sequence[Tuple[K, float]],
    rng: Optional[random.Random] = None,
) -> K:
    """Return one key from ``pairs`` with probability proportional to its weight.

    Parameters
    ----------
    pairs : Sequence[tuple[K, float]]
        ``(key, weight)`` entries. Keys may repeat; each entry is an
        independent alternative.
    rng : Optional[random.Random], default: None
        Randomness source. When omitted a new generator seeded from OS
        entropy is created for this call only.

    Returns
    -------
    K
        The selected key. Entries with zero weight are never selected.

    Raises
    ------
    ConfigurationError
        If ``pairs`` is empty, a weight is negative or not finite, or the
        weights sum to zero.
    """
    if not pairs:
        raise ConfigurationError("cannot sample from an empty weight table")

    total = 0.0
    for _, weight in pairs:
        if not math.isfinite(weight):
            raise ConfigurationError(f"non-finite weight {weight!r} in weight table")
        if weight < 0:
            raise ConfigurationError(f"negative weight {weight!r} in weight table")
        total += weight
    if not math.isfinite(total):
        raise ConfigurationError("weight table total overflows")
    if total <= 0:
        raise ConfigurationError("cannot sample from a weight table summing to zero")

    if rng is None:
        rng = random.Random()

    point = rng.random() * total
    upto = 0.0
    chosen = None
    for key, weight in pairs:
        if weight <= 0:
            continue
        chosen = key
        upto += weight
        if point < upto:
            return key
    # Float rounding can leave ``point`` marginally past the running sum.
    return chosen  # type: ignore[return-value]


__all__ = ["sample"]
