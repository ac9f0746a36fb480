"""Decoding of the behavior kinds stored on draw configurations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

GUARANTEE_PATTERN = re.compile(r"^over_rarity_([3-4])_once$")


@dataclass(frozen=True)
class Plain:
    """Batches are returned exactly as drawn."""


@dataclass(frozen=True)
class GuaranteeTier:
    """At least one pick per batch must reach ``threshold``.

    When a batch falls short, its final pick is rerolled once from a tier
    table promoted to ``threshold``.
    """

    threshold: int


BehaviorKind = Union[Plain, GuaranteeTier]

PLAIN = Plain()


def parse_behavior_kind(behavior_type: str) -> BehaviorKind:
    """Decode the stored ``behavior_type`` string into a behavior kind.

    ``over_rarity_3_once`` and ``over_rarity_4_once`` map to
    :class:`GuaranteeTier`; any other value is a plain draw.

    Parameters
    ----------
    behavior_type : str
        Raw behavior type as persisted with the configuration.

    Returns
    -------
    BehaviorKind
        The decoded kind.
    """
    match = GUARANTEE_PATTERN.match(behavior_type or "")
    if match is None:
        return PLAIN
    return GuaranteeTier(threshold=int(match.group(1)))


__all__ = [
    "BehaviorKind",
    "GuaranteeTier",
    "PLAIN",
    "Plain",
    "parse_behavior_kind",
]
