"""Error taxonomy raised while resolving draw requests."""

from __future__ import annotations


class DrawError(Exception):
    """Base class for every failure surfaced by the draw subsystem."""


class NotFound(DrawError, LookupError):
    """The requested configuration or behavior does not exist."""


class CatalogInconsistency(DrawError):
    """The catalog cannot back a resolution.

    Raised when no catalog version is published, when a configuration
    references an item id that the catalog does not contain, or when a
    catalog item carries a tier outside the supported range.
    """


class ConfigurationError(DrawError, ValueError):
    """A draw configuration cannot be sampled as stored.

    Typical cause: a tier with a positive rate but no (or only zero-weight)
    items, so selecting that tier leaves nothing to pick from.
    """


__all__ = [
    "CatalogInconsistency",
    "ConfigurationError",
    "DrawError",
    "NotFound",
]
