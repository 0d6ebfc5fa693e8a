"""Initial registry, staging and stocktake schema.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "plant",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("code", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_plant"),
        sa.UniqueConstraint("code", name="uq_plant_code"),
    )
    op.create_table(
        "asset",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("business_key", sa.String(length=64), nullable=False),
        sa.Column("asset_no", sa.String(length=64), nullable=False),
        sa.Column("sub_number", sa.String(length=16), nullable=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("plant_code", sa.String(length=32), nullable=True),
        sa.Column("plant_id", sa.Uuid(), nullable=True),
        sa.Column("cost_center", sa.String(length=32), nullable=True),
        sa.Column("capitalized_on", sa.Date(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["plant_id"], ["plant.id"], name="fk_asset_plant_id_plant"),
        sa.PrimaryKeyConstraint("id", name="pk_asset"),
        sa.UniqueConstraint("business_key", name="uq_asset_business_key"),
    )
    op.create_index("ix_asset_asset_no", "asset", ["asset_no"])
    op.create_index("ix_asset_plant_id_is_active", "asset", ["plant_id", "is_active"])
    op.create_table(
        "asset_image",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("asset_id", sa.Uuid(), nullable=False),
        sa.Column("file_url", sa.String(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["asset_id"], ["asset.id"], name="fk_asset_image_asset_id_asset", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_asset_image"),
    )
    op.create_table(
        "import_batch",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("source_file_name", sa.String(), nullable=False),
        sa.Column("loaded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("row_count", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_import_batch"),
    )
    op.create_table(
        "staging_record",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("batch_id", sa.Uuid(), nullable=False),
        sa.Column("source_file_name", sa.String(), nullable=False),
        sa.Column("row_number", sa.Integer(), nullable=False),
        sa.Column("loaded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(
            ["batch_id"],
            ["import_batch.id"],
            name="fk_staging_record_batch_id_import_batch",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_staging_record"),
    )
    op.create_index("ix_staging_record_loaded_at", "staging_record", ["loaded_at"])
    op.create_table(
        "feed_snapshot",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("source_file_name", sa.String(), nullable=False),
        sa.Column("business_key", sa.String(length=64), nullable=False),
        sa.Column("batch_id", sa.Uuid(), nullable=False),
        sa.Column("loaded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("asset_no", sa.String(length=64), nullable=False),
        sa.Column("sub_number", sa.String(length=16), nullable=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("plant_code", sa.String(length=32), nullable=True),
        sa.Column("cost_center", sa.String(length=32), nullable=True),
        sa.Column("capitalized_on", sa.String(length=32), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_feed_snapshot"),
        sa.UniqueConstraint(
            "source_file_name",
            "business_key",
            name="uq_feed_snapshot_source_file_name_business_key",
        ),
    )
    op.create_table(
        "stocktake_year_config",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("plant_id", sa.Uuid(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("is_open", sa.Boolean(), nullable=False),
        sa.Column("report_generated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("closed_by_user_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["plant_id"], ["plant.id"], name="fk_stocktake_year_config_plant_id_plant"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_stocktake_year_config"),
        sa.UniqueConstraint("plant_id", "year", name="uq_stocktake_year_config_plant_id_year"),
    )
    op.create_table(
        "stocktake",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("year_config_id", sa.Uuid(), nullable=False),
        sa.Column("plant_id", sa.Uuid(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("created_by_user_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["year_config_id"],
            ["stocktake_year_config.id"],
            name="fk_stocktake_year_config_id_stocktake_year_config",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(["plant_id"], ["plant.id"], name="fk_stocktake_plant_id_plant"),
        sa.PrimaryKeyConstraint("id", name="pk_stocktake"),
        sa.UniqueConstraint("year_config_id", name="uq_stocktake_year_config_id"),
    )
    op.create_table(
        "stocktake_item",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("stocktake_id", sa.Uuid(), nullable=False),
        sa.Column("asset_id", sa.Uuid(), nullable=False),
        sa.Column("status_code", sa.String(length=32), nullable=False),
        sa.Column("count_method", sa.String(length=32), nullable=False),
        sa.Column("counted_by_user_id", sa.Uuid(), nullable=True),
        sa.Column("note_text", sa.Text(), nullable=True),
        sa.Column("counted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("carried_from_item_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(
            ["stocktake_id"],
            ["stocktake.id"],
            name="fk_stocktake_item_stocktake_id_stocktake",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["asset_id"], ["asset.id"], name="fk_stocktake_item_asset_id_asset"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_stocktake_item"),
        sa.UniqueConstraint(
            "stocktake_id", "asset_id", name="uq_stocktake_item_stocktake_id_asset_id"
        ),
    )
    op.create_table(
        "stocktake_item_image",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("item_id", sa.Uuid(), nullable=False),
        sa.Column("file_url", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["item_id"],
            ["stocktake_item.id"],
            name="fk_stocktake_item_image_item_id_stocktake_item",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_stocktake_item_image"),
    )


def downgrade() -> None:
    op.drop_table("stocktake_item_image")
    op.drop_table("stocktake_item")
    op.drop_table("stocktake")
    op.drop_table("stocktake_year_config")
    op.drop_table("feed_snapshot")
    op.drop_index("ix_staging_record_loaded_at", table_name="staging_record")
    op.drop_table("staging_record")
    op.drop_table("import_batch")
    op.drop_table("asset_image")
    op.drop_index("ix_asset_plant_id_is_active", table_name="asset")
    op.drop_index("ix_asset_asset_no", table_name="asset")
    op.drop_table("asset")
    op.drop_table("plant")
