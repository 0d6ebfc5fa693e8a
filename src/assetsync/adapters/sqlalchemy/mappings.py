"""SQLAlchemy mapping metadata for the assetsync domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from assetsync.domain.model import (
    AssetImage,
    AssetRecord,
    FeedSnapshotRow,
    ImportBatch,
    Plant,
    StagingRecord,
    Stocktake,
    StocktakeItem,
    StocktakeItemImage,
    StocktakeYearConfig,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Registry --------------------------------------------------------------------

plant_table = Table(
    "plant",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("code", String(32), nullable=False, unique=True),
    Column("name", String, nullable=True),
)

asset_table = Table(
    "asset",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("business_key", String(64), nullable=False, unique=True),
    Column("asset_no", String(64), nullable=False),
    Column("sub_number", String(16), nullable=True),
    Column("description", String, nullable=True),
    Column("plant_code", String(32), nullable=True),
    Column("plant_id", UUIDColumnType, ForeignKey("plant.id"), nullable=True),
    Column("cost_center", String(32), nullable=True),
    Column("capitalized_on", Date, nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", UTCDateTime(), nullable=True),
    Column("updated_at", UTCDateTime(), nullable=True),
    Index("ix_asset_asset_no", "asset_no"),
    Index("ix_asset_plant_id_is_active", "plant_id", "is_active"),
)

asset_image_table = Table(
    "asset_image",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "asset_id", UUIDColumnType, ForeignKey("asset.id", ondelete="CASCADE"), nullable=False
    ),
    Column("file_url", String, nullable=False),
    Column("is_primary", Boolean, nullable=False, default=False),
    Column("created_at", UTCDateTime(), nullable=True),
)

# Feed staging ----------------------------------------------------------------

import_batch_table = Table(
    "import_batch",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("source_file_name", String, nullable=False),
    Column("loaded_at", UTCDateTime(), nullable=False),
    Column("row_count", Integer, nullable=False, default=0),
)

staging_record_table = Table(
    "staging_record",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "batch_id",
        UUIDColumnType,
        ForeignKey("import_batch.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("source_file_name", String, nullable=False),
    Column("row_number", Integer, nullable=False),
    Column("loaded_at", UTCDateTime(), nullable=False),
    Column("payload", JSON, nullable=False),
    Index("ix_staging_record_loaded_at", "loaded_at"),
)

# batch_id is not a foreign key: snapshots outlive the staging batches they came from
feed_snapshot_table = Table(
    "feed_snapshot",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("source_file_name", String, nullable=False),
    Column("business_key", String(64), nullable=False),
    Column("batch_id", UUIDColumnType, nullable=False),
    Column("loaded_at", UTCDateTime(), nullable=False),
    Column("asset_no", String(64), nullable=False),
    Column("sub_number", String(16), nullable=True),
    Column("description", String, nullable=True),
    Column("plant_code", String(32), nullable=True),
    Column("cost_center", String(32), nullable=True),
    Column("capitalized_on", String(32), nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    UniqueConstraint("source_file_name", "business_key"),
)

# Stocktake -------------------------------------------------------------------

stocktake_year_config_table = Table(
    "stocktake_year_config",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("plant_id", UUIDColumnType, ForeignKey("plant.id"), nullable=False),
    Column("year", Integer, nullable=False),
    Column("is_open", Boolean, nullable=False, default=True),
    Column("report_generated_at", UTCDateTime(), nullable=True),
    Column("closed_at", UTCDateTime(), nullable=True),
    Column("closed_by_user_id", UUIDColumnType, nullable=True),
    Column("created_at", UTCDateTime(), nullable=True),
    UniqueConstraint("plant_id", "year"),
)

stocktake_table = Table(
    "stocktake",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "year_config_id",
        UUIDColumnType,
        ForeignKey("stocktake_year_config.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("plant_id", UUIDColumnType, ForeignKey("plant.id"), nullable=False),
    Column("year", Integer, nullable=False),
    Column("created_by_user_id", UUIDColumnType, nullable=True),
    Column("created_at", UTCDateTime(), nullable=True),
)

stocktake_item_table = Table(
    "stocktake_item",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "stocktake_id",
        UUIDColumnType,
        ForeignKey("stocktake.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("asset_id", UUIDColumnType, ForeignKey("asset.id"), nullable=False),
    Column("status_code", String(32), nullable=False),
    Column("count_method", String(32), nullable=False),
    Column("counted_by_user_id", UUIDColumnType, nullable=True),
    Column("note_text", Text, nullable=True),
    Column("counted_at", UTCDateTime(), nullable=True),
    Column("carried_from_item_id", UUIDColumnType, nullable=True),
    UniqueConstraint("stocktake_id", "asset_id"),
)

stocktake_item_image_table = Table(
    "stocktake_item_image",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "item_id",
        UUIDColumnType,
        ForeignKey("stocktake_item.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("file_url", String, nullable=False),
    Column("created_at", UTCDateTime(), nullable=True),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Plant, plant_table)
    mapper_registry.map_imperatively(AssetRecord, asset_table)
    mapper_registry.map_imperatively(AssetImage, asset_image_table)
    mapper_registry.map_imperatively(ImportBatch, import_batch_table)
    mapper_registry.map_imperatively(StagingRecord, staging_record_table)
    mapper_registry.map_imperatively(FeedSnapshotRow, feed_snapshot_table)
    mapper_registry.map_imperatively(StocktakeYearConfig, stocktake_year_config_table)
    mapper_registry.map_imperatively(Stocktake, stocktake_table)
    mapper_registry.map_imperatively(StocktakeItem, stocktake_item_table)
    mapper_registry.map_imperatively(StocktakeItemImage, stocktake_item_image_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
