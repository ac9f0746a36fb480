"""Database models for the item catalog and its generation marker."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Integer,
    String,
    Text,
    select,
)
from sqlalchemy.orm import Mapped, Session, mapped_column

from .base import Base


class CatalogItem(Base):
    """A drawable item in the catalog."""

    __tablename__ = "catalog_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    """Primary key. Assigned by the catalog publisher, never generated."""

    tier: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    """Rarity tier of the item (1 is the most common)."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    """Display name shown in draw results."""

    character_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    """Character the item depicts, if any."""

    attribute: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    """Element/attribute label used by the client."""

    support_unit: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    """Unit or group the item supports, if any."""

    skill_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    skill_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    prefix: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    """Title shown before the item name."""

    asset_bundle_name: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True
    )
    """Client asset bundle holding the item artwork."""

    phrase: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    """Line played when the item is drawn."""

    flavor_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    released_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Not part of the item projection returned to the draw engine.
    internal_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (CheckConstraint("tier >= 1", name="tier_positive"),)

    def __init__(
        self,
        *,
        id: int,
        tier: int,
        name: str,
        character_id: Optional[int] = None,
        attribute: Optional[str] = None,
        support_unit: Optional[str] = None,
        skill_id: Optional[int] = None,
        skill_name: Optional[str] = None,
        prefix: Optional[str] = None,
        asset_bundle_name: Optional[str] = None,
        phrase: Optional[str] = None,
        flavor_text: Optional[str] = None,
        released_at: Optional[datetime] = None,
        internal_note: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        self.id = id
        self.tier = tier
        self.name = name
        self.character_id = character_id
        self.attribute = attribute
        self.support_unit = support_unit
        self.skill_id = skill_id
        self.skill_name = skill_name
        self.prefix = prefix
        self.asset_bundle_name = asset_bundle_name
        self.phrase = phrase
        self.flavor_text = flavor_text
        self.released_at = released_at
        self.internal_note = internal_note
        if created_at is not None:
            self.created_at = created_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<CatalogItem(id={id}, tier={tier}, name={name})>".format(
            id=self.id, tier=self.tier, name=self.name
        )


class CatalogVersion(Base):
    """Generation marker bumped whenever the catalog contents change.

    Only the most recent row is meaningful; older rows are kept as history.
    """

    __tablename__ = "catalog_versions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Primary key."""

    data_version: Mapped[str] = mapped_column(String(64), nullable=False)
    """Opaque version string compared by equality only."""

    published_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __init__(
        self,
        *,
        data_version: str,
        published_at: Optional[datetime] = None,
    ) -> None:
        self.data_version = data_version
        if published_at is not None:
            self.published_at = published_at

    @classmethod
    def current(cls, session: Session) -> Optional["CatalogVersion"]:
        """Return the most recently published version row, if any."""

        stmt = select(cls).order_by(cls.id.desc()).limit(1)
        return session.scalars(stmt).first()
