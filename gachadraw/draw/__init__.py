"""Draw resolution: weighted sampling, item cache, guarantees."""

from .behavior import GuaranteeTier, Plain, parse_behavior_kind
from .cache import ItemCache
from .engine import DrawEngine, draw_batches
from .errors import CatalogInconsistency, ConfigurationError, DrawError, NotFound
from .guarantee import apply_guarantee, promote_tier_weights
from .resolver import ResolvedDraw, resolve_draw
from .sampler import sample
from .types import (
    TIERS,
    BehaviorDefinition,
    DrawConfiguration,
    DrawDetail,
    DrawRequest,
    Item,
)

__all__ = [
    "BehaviorDefinition",
    "CatalogInconsistency",
    "ConfigurationError",
    "DrawConfiguration",
    "DrawDetail",
    "DrawEngine",
    "DrawError",
    "DrawRequest",
    "GuaranteeTier",
    "Item",
    "ItemCache",
    "NotFound",
    "Plain",
    "ResolvedDraw",
    "TIERS",
    "apply_guarantee",
    "draw_batches",
    "parse_behavior_kind",
    "promote_tier_weights",
    "resolve_draw",
    "sample",
]
