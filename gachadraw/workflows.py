from typing import Any, Iterable, Mapping, Optional, Union
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from .catalog import CatalogStore
from .draw.engine import Batch, DrawEngine
from .draw.types import DrawRequest
from .models import CatalogVersion

DEFAULT_DRAW_ENGINE = DrawEngine()
"""Process-wide engine whose item cache is shared by every workflow call."""


def run_draw(
    session: Session,
    configuration_id: Any,
    behavior_id: Any,
    count: Optional[int] = 1,
    *,
    seed: Optional[int] = None,
    engine: Optional[DrawEngine] = None,
) -> list[Batch]:
    """Draw ``count`` batches from a configuration using one of its behaviors.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session used to read the catalog.
    configuration_id : int | str
        Identifier of the draw configuration.
    behavior_id : int | str
        Identifier of the behavior; compared with stored ids as a string.
    count : Optional[int], default: 1
        Number of batches. ``None`` is treated as 1.
    seed : Optional[int], default: None
        Seed for a reproducible draw.
    engine : Optional[DrawEngine], default: None
        Engine to use. Defaults to :data:`DEFAULT_DRAW_ENGINE`.

    Returns
    -------
    list[list[Item]]
        ``count`` batches, each holding ``spin_count`` items in pick order.

    Raises
    ------
    NotFound
        If the configuration or behavior does not exist.
    CatalogInconsistency
        If no catalog version is published or a referenced item is missing.
    ConfigurationError
        If a selected tier has nothing to draw.
    """
    request = DrawRequest(
        configuration_id=configuration_id,
        behavior_id=behavior_id,
        count=count,
        seed=seed,
    )
    active_engine = engine or DEFAULT_DRAW_ENGINE
    return active_engine.draw(CatalogStore(session), request)


def run_draw_batch(
    session: Session,
    requests: Iterable[Union[DrawRequest, Mapping[str, Any]]],
    *,
    engine: Optional[DrawEngine] = None,
) -> list[list[Batch]]:
    """Serve several independent draw requests as one unit.

    Each element is either a :class:`DrawRequest` or an API payload accepted
    by :meth:`DrawRequest.from_mapping`. The first failing request aborts the
    whole set: its exception propagates and no partial results are returned.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session used to read the catalog.
    requests : Iterable[DrawRequest | Mapping[str, Any]]
        Requests to serve, in order.
    engine : Optional[DrawEngine], default: None
        Engine to use. Defaults to :data:`DEFAULT_DRAW_ENGINE`.

    Returns
    -------
    list[list[list[Item]]]
        One list of batches per request, in request order.
    """
    parsed = [
        request if isinstance(request, DrawRequest) else DrawRequest.from_mapping(request)
        for request in requests
    ]
    active_engine = engine or DEFAULT_DRAW_ENGINE
    return active_engine.draw_many(CatalogStore(session), parsed)


def publish_catalog_version(
    session: Session,
    data_version: str,
    *,
    published_at: Optional[datetime] = None,
) -> CatalogVersion:
    """Record a new catalog generation.

    Every item cache notices the change on its next validation and reloads.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session.
    data_version : str
        New version marker. Must be non-empty.
    published_at : Optional[datetime], default: None
        Publication timestamp. Defaults to now (UTC).

    Returns
    -------
    CatalogVersion
        The persisted version row.
    """
    if not data_version or not data_version.strip():
        raise ValueError("data_version must not be empty")

    version = CatalogVersion(
        data_version=data_version.strip(),
        published_at=published_at or datetime.now(timezone.utc),
    )
    session.add(version)
    session.flush()
    return version


def warm_cache(session: Session, *, engine: Optional[DrawEngine] = None) -> bool:
    """Prefetch the item cache at startup.

    Returns ``True`` when the cache was (re)loaded.
    """
    active_engine = engine or DEFAULT_DRAW_ENGINE
    return active_engine.refresh(CatalogStore(session))
