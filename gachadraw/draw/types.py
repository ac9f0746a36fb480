"""Value objects shared by the catalog store and the draw engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from .behavior import BehaviorKind

TIERS: tuple[int, ...] = (1, 2, 3, 4)
"""Every tier a configuration assigns a rate to."""


@dataclass(frozen=True)
class Item:
    """Immutable catalog record as seen by the draw engine.

    Equality and hashing only consider ``id``.
    """

    id: int
    tier: int = field(compare=False)
    name: str = field(default="", compare=False)
    character_id: Optional[int] = field(default=None, compare=False)
    attribute: Optional[str] = field(default=None, compare=False)
    support_unit: Optional[str] = field(default=None, compare=False)
    skill_id: Optional[int] = field(default=None, compare=False)
    skill_name: Optional[str] = field(default=None, compare=False)
    prefix: Optional[str] = field(default=None, compare=False)
    asset_bundle_name: Optional[str] = field(default=None, compare=False)
    phrase: Optional[str] = field(default=None, compare=False)
    flavor_text: Optional[str] = field(default=None, compare=False)
    released_at: Optional[datetime] = field(default=None, compare=False)


@dataclass(frozen=True)
class DrawDetail:
    """Weighted reference from a configuration to a catalog item."""

    item_id: int
    weight: float


@dataclass(frozen=True)
class BehaviorDefinition:
    """A named draw mode of a configuration.

    Attributes
    ----------
    id : int | str
        Identifier as stored; compared against requests as a string.
    kind : BehaviorKind
        Decoded behavior kind.
    spin_count : int
        Number of picks per batch.
    """

    id: Any
    kind: BehaviorKind
    spin_count: int


@dataclass(frozen=True)
class DrawConfiguration:
    """A drawable pool loaded from the catalog store."""

    id: Any
    name: str
    tier_rates: Mapping[int, float]
    details: tuple[DrawDetail, ...]
    behaviors: tuple[BehaviorDefinition, ...]


@dataclass(frozen=True)
class DrawRequest:
    """A single draw request.

    Attributes
    ----------
    configuration_id : int | str
        Configuration (pool) to draw from.
    behavior_id : int | str
        Behavior of that configuration to apply.
    count : int
        Number of independent batches to produce.
    seed : Optional[int]
        Seed for a reproducible draw. ``None`` uses fresh OS entropy.
    """

    configuration_id: Any
    behavior_id: Any
    count: int = 1
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.configuration_id is None:
            raise ValueError("configuration_id is required")
        if self.behavior_id is None:
            raise ValueError("behavior_id is required")
        if self.count is None:
            object.__setattr__(self, "count", 1)
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise TypeError("count must be an integer")
        if self.count < 1:
            raise ValueError("count must be at least 1")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DrawRequest":
        """Build a request from an API payload.

        Accepts both the camelCase keys used on the wire
        (``configurationId``, ``behaviorId``) and snake_case keys.
        """

        def pick(*keys: str) -> Any:
            for key in keys:
                if key in data:
                    return data[key]
            return None

        return cls(
            configuration_id=pick("configurationId", "configuration_id"),
            behavior_id=pick("behaviorId", "behavior_id"),
            count=pick("count"),
            seed=pick("seed"),
        )


__all__ = [
    "BehaviorDefinition",
    "DrawConfiguration",
    "DrawDetail",
    "DrawRequest",
    "Item",
    "TIERS",
]
