"""SQLAlchemy-backed catalog store consumed by the draw engine."""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from .draw.behavior import parse_behavior_kind
from .draw.errors import CatalogInconsistency
from .draw.types import (
    TIERS,
    BehaviorDefinition,
    DrawConfiguration,
    DrawDetail,
    Item,
)
from .models import CatalogItem, CatalogVersion, DrawConfigurationRecord

logger = logging.getLogger(__name__)

# Columns exposed to the engine. Internal bookkeeping columns stay in the DB.
ITEM_COLUMNS = (
    CatalogItem.id,
    CatalogItem.tier,
    CatalogItem.name,
    CatalogItem.character_id,
    CatalogItem.attribute,
    CatalogItem.support_unit,
    CatalogItem.skill_id,
    CatalogItem.skill_name,
    CatalogItem.prefix,
    CatalogItem.asset_bundle_name,
    CatalogItem.phrase,
    CatalogItem.flavor_text,
    CatalogItem.released_at,
)


class CatalogStore:
    """Read access to the catalog, bound to one SQLAlchemy session.

    A store is cheap to create and should not outlive its session; the
    long-lived state (the item cache) belongs to the draw engine.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def fetch_catalog_version(self) -> str:
        """Return the current catalog generation.

        Raises
        ------
        CatalogInconsistency
            If no catalog version has been published yet.
        """
        current = CatalogVersion.current(self._session)
        if current is None:
            raise CatalogInconsistency("no catalog version has been published")
        return current.data_version

    def fetch_configuration(self, configuration_id: Any) -> Optional[DrawConfiguration]:
        """Load a configuration with its details and decoded behaviors.

        ``configuration_id`` may be given as an int or a string of digits;
        anything else (floats, bools, signed or blank strings) cannot match a
        stored id and yields ``None``.
        """
        key = _configuration_key(configuration_id)
        if key is None:
            logger.debug(f"Draw configuration id {configuration_id!r} is not an id")
            return None

        stmt = (
            select(DrawConfigurationRecord)
            .where(DrawConfigurationRecord.id == key)
            .options(
                selectinload(DrawConfigurationRecord.details),
                selectinload(DrawConfigurationRecord.behaviors),
            )
        )
        record = self._session.scalar(stmt)
        if record is None:
            logger.debug(f"Draw configuration {configuration_id!r} not found")
            return None
        return _to_configuration(record)

    def fetch_items(
        self,
        *,
        item_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[Item]:
        """Return catalog items using the restricted :data:`ITEM_COLUMNS` projection.

        Parameters
        ----------
        item_id : Optional[int], default: None
            When given, look up that single item (the result has zero or one
            element).
        limit : Optional[int], default: None
            Cap on the number of rows returned. Rows are ordered by id.

        Returns
        -------
        list[Item]
            Matching items in ascending id order.
        """
        stmt = select(*ITEM_COLUMNS).order_by(CatalogItem.id)
        if item_id is not None:
            stmt = stmt.where(CatalogItem.id == item_id)
        if limit is not None:
            stmt = stmt.limit(limit)
        return [Item(**row._asdict()) for row in self._session.execute(stmt)]


def _configuration_key(configuration_id: Any) -> Optional[int]:
    if isinstance(configuration_id, bool):
        return None
    if isinstance(configuration_id, int):
        return configuration_id
    if isinstance(configuration_id, str):
        text = configuration_id.strip()
        if text.isascii() and text.isdigit():
            return int(text)
    return None


def _to_configuration(record: DrawConfigurationRecord) -> DrawConfiguration:
    return DrawConfiguration(
        id=record.id,
        name=record.name,
        tier_rates={tier: record.tier_rate(tier) for tier in TIERS},
        details=tuple(
            DrawDetail(item_id=detail.item_id, weight=detail.weight)
            for detail in record.details
        ),
        behaviors=tuple(
            BehaviorDefinition(
                id=behavior.id,
                kind=parse_behavior_kind(behavior.behavior_type),
                spin_count=behavior.spin_count,
            )
            for behavior in record.behaviors
        ),
    )


__all__ = ["CatalogStore", "ITEM_COLUMNS"]
