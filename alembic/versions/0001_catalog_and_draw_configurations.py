"""catalog and draw configurations

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "catalog_items",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("tier", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("character_id", sa.Integer(), nullable=True),
        sa.Column("attribute", sa.String(length=50), nullable=True),
        sa.Column("support_unit", sa.String(length=50), nullable=True),
        sa.Column("skill_id", sa.Integer(), nullable=True),
        sa.Column("skill_name", sa.String(length=255), nullable=True),
        sa.Column("prefix", sa.String(length=255), nullable=True),
        sa.Column("asset_bundle_name", sa.String(length=255), nullable=True),
        sa.Column("phrase", sa.Text(), nullable=True),
        sa.Column("flavor_text", sa.Text(), nullable=True),
        sa.Column("released_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("internal_note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("tier >= 1", name="catalog_items_tier_positive_check"),
        sa.PrimaryKeyConstraint("id", name="catalog_items_pkey"),
    )
    op.create_index(
        "ix_catalog_items_tier", "catalog_items", ["tier"], unique=False
    )
    op.create_table(
        "catalog_versions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("data_version", sa.String(length=64), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="catalog_versions_pkey"),
    )
    op.create_table(
        "draw_configurations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("tier1_rate", sa.Float(), nullable=False),
        sa.Column("tier2_rate", sa.Float(), nullable=False),
        sa.Column("tier3_rate", sa.Float(), nullable=False),
        sa.Column("tier4_rate", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="draw_configurations_pkey"),
    )
    op.create_table(
        "draw_details",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("configuration_id", sa.Integer(), nullable=False),
        sa.Column("item_id", sa.Integer(), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["configuration_id"],
            ["draw_configurations.id"],
            name="draw_details_configuration_id_fkey",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="draw_details_pkey"),
    )
    op.create_index(
        "ix_draw_details_configuration_id",
        "draw_details",
        ["configuration_id"],
        unique=False,
    )
    op.create_table(
        "draw_behaviors",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("configuration_id", sa.Integer(), nullable=False),
        sa.Column("behavior_type", sa.String(length=100), nullable=False),
        sa.Column("spin_count", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["configuration_id"],
            ["draw_configurations.id"],
            name="draw_behaviors_configuration_id_fkey",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="draw_behaviors_pkey"),
    )
    op.create_index(
        "ix_draw_behaviors_configuration_id",
        "draw_behaviors",
        ["configuration_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_draw_behaviors_configuration_id", table_name="draw_behaviors")
    op.drop_table("draw_behaviors")
    op.drop_index("ix_draw_details_configuration_id", table_name="draw_details")
    op.drop_table("draw_details")
    op.drop_table("draw_configurations")
    op.drop_table("catalog_versions")
    op.drop_index("ix_catalog_items_tier", table_name="catalog_items")
    op.drop_table("catalog_items")
