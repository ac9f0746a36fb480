"""Database models describing drawable pools and their behaviors."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class DrawConfigurationRecord(Base):
    """A drawable pool: tier rates, weighted items and draw behaviors."""

    __tablename__ = "draw_configurations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Primary key."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    """Human readable pool name."""

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    tier1_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    """Tier-selection weight of tier 1."""

    tier2_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    """Tier-selection weight of tier 2."""

    tier3_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    """Tier-selection weight of tier 3."""

    tier4_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    """Tier-selection weight of tier 4."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    details: Mapped[list["DrawDetailRecord"]] = relationship(
        back_populates="configuration",
        cascade="all, delete-orphan",
        order_by="DrawDetailRecord.position",
    )
    """Weighted item entries, in catalog order."""

    behaviors: Mapped[list["DrawBehaviorRecord"]] = relationship(
        back_populates="configuration",
        cascade="all, delete-orphan",
        order_by="DrawBehaviorRecord.id",
    )
    """Draw modes available on this pool."""

    def __init__(
        self,
        *,
        name: str,
        tier_rates: Optional[dict[int, float]] = None,
        description: Optional[str] = None,
        details: Optional[list["DrawDetailRecord"]] = None,
        behaviors: Optional[list["DrawBehaviorRecord"]] = None,
        id: Optional[int] = None,
    ) -> None:
        if id is not None:
            self.id = id
        self.name = name
        self.description = description
        rates = tier_rates or {}
        self.tier1_rate = rates.get(1, 0.0)
        self.tier2_rate = rates.get(2, 0.0)
        self.tier3_rate = rates.get(3, 0.0)
        self.tier4_rate = rates.get(4, 0.0)
        if details is not None:
            for position, detail in enumerate(details):
                if getattr(detail, "position", None) is None:
                    detail.position = position
            self.details = details
        if behaviors is not None:
            self.behaviors = behaviors

    def tier_rate(self, tier: int) -> float:
        """Return the tier-selection weight stored for ``tier``."""

        return getattr(self, f"tier{tier}_rate")

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<DrawConfigurationRecord(id={id}, name={name})>".format(
            id=self.id, name=self.name
        )


class DrawDetailRecord(Base):
    """One weighted reference from a configuration to a catalog item."""

    __tablename__ = "draw_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    configuration_id: Mapped[int] = mapped_column(
        ForeignKey("draw_configurations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # No foreign key: the catalog may be republished independently of pools,
    # and a dangling reference is reported at draw time.
    item_id: Mapped[int] = mapped_column(Integer, nullable=False)
    """Catalog item referenced by this entry."""

    weight: Mapped[float] = mapped_column(Float, nullable=False)
    """Within-tier selection weight."""

    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    configuration: Mapped["DrawConfigurationRecord"] = relationship(
        back_populates="details"
    )

    def __init__(
        self,
        *,
        item_id: int,
        weight: float,
        position: Optional[int] = None,
    ) -> None:
        self.item_id = item_id
        self.weight = weight
        if position is not None:
            self.position = position


class DrawBehaviorRecord(Base):
    """A draw mode (e.g. single pull, ten pull with guarantee) of a pool."""

    __tablename__ = "draw_behaviors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    configuration_id: Mapped[int] = mapped_column(
        ForeignKey("draw_configurations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    behavior_type: Mapped[str] = mapped_column(String(100), nullable=False)
    """Encoded behavior kind, e.g. ``"normal"`` or ``"over_rarity_3_once"``."""

    spin_count: Mapped[int] = mapped_column(Integer, nullable=False)
    """Number of picks per batch."""

    configuration: Mapped["DrawConfigurationRecord"] = relationship(
        back_populates="behaviors"
    )

    def __init__(
        self,
        *,
        behavior_type: str,
        spin_count: int,
        id: Optional[int] = None,
    ) -> None:
        if id is not None:
            self.id = id
        self.behavior_type = behavior_type
        self.spin_count = spin_count
