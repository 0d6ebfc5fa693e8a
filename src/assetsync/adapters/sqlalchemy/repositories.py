"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import and_, delete, exists, false, func, insert, or_, select, update

from assetsync.adapters.sqlalchemy.mappings import (
    asset_image_table,
    asset_table,
    feed_snapshot_table,
    import_batch_table,
    staging_record_table,
    stocktake_item_table,
    stocktake_table,
    stocktake_year_config_table,
)
from assetsync.domain.model import (
    AssetImage,
    AssetRecord,
    FeedSnapshotRow,
    ImportBatch,
    Plant,
    Stocktake,
    StocktakeItem,
    StocktakeItemImage,
    StocktakeYearConfig,
)
from assetsync.domain.stocktake.reports import StocktakeDetailRow

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable, Mapping, Sequence
    from datetime import datetime

    from sqlalchemy.orm import Session


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlAlchemyStagingRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add_batch(self, batch: ImportBatch) -> None:
        self.session.add(batch)
        self.session.flush()

    def add_records(
        self,
        batch: ImportBatch,
        rows: Sequence[Mapping[str, str]],
    ) -> None:
        if not rows:
            return
        self.session.execute(
            insert(staging_record_table),
            [
                {
                    "batch_id": batch.id,
                    "source_file_name": batch.source_file_name,
                    "row_number": index,
                    "loaded_at": batch.loaded_at,
                    "payload": dict(row),
                }
                for index, row in enumerate(rows, start=1)
            ],
        )

    def replace_snapshot(self, source_file_name: str, rows: Iterable[FeedSnapshotRow]) -> int:
        self.session.execute(
            delete(feed_snapshot_table).where(
                feed_snapshot_table.c.source_file_name == source_file_name
            )
        )
        snapshot = list(rows)
        self.session.add_all(snapshot)
        return len(snapshot)

    def delete_aged_records(self, cutoff: datetime, limit: int) -> int:
        aged_ids = (
            select(staging_record_table.c.id)
            .where(staging_record_table.c.loaded_at < cutoff)
            .order_by(staging_record_table.c.loaded_at)
            .limit(limit)
        )
        result = self.session.execute(
            delete(staging_record_table).where(staging_record_table.c.id.in_(aged_ids)),
            execution_options={"synchronize_session": False},
        )
        return max(result.rowcount or 0, 0)  # pyright: ignore[reportAttributeAccessIssue]

    def delete_emptied_batches(self, cutoff: datetime) -> int:
        has_records = exists().where(staging_record_table.c.batch_id == import_batch_table.c.id)
        result = self.session.execute(
            delete(import_batch_table)
            .where(import_batch_table.c.loaded_at < cutoff)
            .where(~has_records),
            execution_options={"synchronize_session": False},
        )
        return max(result.rowcount or 0, 0)  # pyright: ignore[reportAttributeAccessIssue]

    def latest_batches(self, limit: int) -> list[ImportBatch]:
        stmt = select(ImportBatch).order_by(import_batch_table.c.loaded_at.desc()).limit(limit)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyAssetRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def snapshot_rows(self) -> list[FeedSnapshotRow]:
        stmt = select(FeedSnapshotRow).order_by(
            feed_snapshot_table.c.loaded_at, feed_snapshot_table.c.source_file_name
        )
        return list(self.session.execute(stmt).scalars())

    def all_assets(self) -> dict[str, AssetRecord]:
        stmt = select(AssetRecord)
        return {asset.business_key: asset for asset in self.session.execute(stmt).scalars()}

    def plants_by_code(self) -> dict[str, Plant]:
        return {plant.code: plant for plant in self.session.execute(select(Plant)).scalars()}

    def add(self, entity: AssetRecord | Plant | AssetImage) -> None:
        self.session.add(entity)

    def get(self, asset_id: uuid.UUID) -> AssetRecord | None:
        return self.session.get(AssetRecord, asset_id)

    def find_by_keys(self, keys: Iterable[str]) -> dict[str, uuid.UUID]:
        wanted = sorted(set(keys))
        if not wanted:
            return {}
        stmt = select(asset_table.c.business_key, asset_table.c.id).where(
            asset_table.c.business_key.in_(wanted)
        )
        return {key: asset_id for key, asset_id in self.session.execute(stmt)}

    def clear_primary_images(self, asset_id: uuid.UUID) -> None:
        self.session.execute(
            update(asset_image_table)
            .where(asset_image_table.c.asset_id == asset_id)
            .values(is_primary=False),
            execution_options={"synchronize_session": False},
        )

    def count_active(self, plant_id: uuid.UUID | None = None) -> int:
        stmt = select(func.count()).select_from(asset_table).where(asset_table.c.is_active)
        if plant_id is not None:
            stmt = stmt.where(asset_table.c.plant_id == plant_id)
        return int(self.session.execute(stmt).scalar_one())


class SqlAlchemyStocktakeRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(
        self, entity: StocktakeYearConfig | Stocktake | StocktakeItem | StocktakeItemImage
    ) -> None:
        self.session.add(entity)

    def flush(self) -> None:
        self.session.flush()

    def year_config(self, plant_id: uuid.UUID, year: int) -> StocktakeYearConfig | None:
        stmt = (
            select(StocktakeYearConfig)
            .where(stocktake_year_config_table.c.plant_id == plant_id)
            .where(stocktake_year_config_table.c.year == year)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def for_year_config(self, year_config_id: uuid.UUID) -> Stocktake | None:
        stmt = select(Stocktake).where(stocktake_table.c.year_config_id == year_config_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def find(self, plant_id: uuid.UUID, year: int) -> Stocktake | None:
        stmt = (
            select(Stocktake)
            .where(stocktake_table.c.plant_id == plant_id)
            .where(stocktake_table.c.year == year)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get(self, stocktake_id: uuid.UUID) -> Stocktake | None:
        return self.session.get(Stocktake, stocktake_id)

    def get_config(self, year_config_id: uuid.UUID) -> StocktakeYearConfig | None:
        return self.session.get(StocktakeYearConfig, year_config_id)

    def get_item(self, item_id: uuid.UUID) -> StocktakeItem | None:
        return self.session.get(StocktakeItem, item_id)

    def item_for_asset(self, stocktake_id: uuid.UUID, asset_id: uuid.UUID) -> StocktakeItem | None:
        stmt = (
            select(StocktakeItem)
            .where(stocktake_item_table.c.stocktake_id == stocktake_id)
            .where(stocktake_item_table.c.asset_id == asset_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def items(self, stocktake_id: uuid.UUID, status_code: str | None = None) -> list[StocktakeItem]:
        stmt = select(StocktakeItem).where(stocktake_item_table.c.stocktake_id == stocktake_id)
        if status_code is not None:
            stmt = stmt.where(stocktake_item_table.c.status_code == status_code)
        return list(self.session.execute(stmt).scalars())

    def status_counts(self, stocktake_id: uuid.UUID) -> dict[str, int]:
        stmt = (
            select(stocktake_item_table.c.status_code, func.count())
            .where(stocktake_item_table.c.stocktake_id == stocktake_id)
            .group_by(stocktake_item_table.c.status_code)
        )
        return {status: int(count) for status, count in self.session.execute(stmt)}

    def count_uncounted_active(self, plant_id: uuid.UUID, stocktake_id: uuid.UUID | None) -> int:
        stmt = (
            select(func.count())
            .select_from(asset_table)
            .where(asset_table.c.plant_id == plant_id)
            .where(asset_table.c.is_active)
        )
        if stocktake_id is not None:
            counted = (
                exists()
                .where(stocktake_item_table.c.asset_id == asset_table.c.id)
                .where(stocktake_item_table.c.stocktake_id == stocktake_id)
            )
            stmt = stmt.where(~counted)
        return int(self.session.execute(stmt).scalar_one())

    def detail_rows(
        self,
        plant_id: uuid.UUID,
        stocktake_id: uuid.UUID | None,
        *,
        status_code: str | None = None,
        search: str | None = None,
    ) -> list[StocktakeDetailRow]:
        """Active plant assets joined to their item, plus counted assets since deactivated."""

        item_join = and_(
            asset_table.c.id == stocktake_item_table.c.asset_id,
            false()
            if stocktake_id is None
            else stocktake_item_table.c.stocktake_id == stocktake_id,
        )

        stmt = (
            select(
                asset_table.c.id,
                asset_table.c.business_key,
                asset_table.c.asset_no,
                asset_table.c.description,
                stocktake_item_table.c.id,
                stocktake_item_table.c.status_code,
                stocktake_item_table.c.count_method,
                stocktake_item_table.c.counted_by_user_id,
                stocktake_item_table.c.note_text,
                stocktake_item_table.c.counted_at,
            )
            .select_from(asset_table.outerjoin(stocktake_item_table, item_join))
            .where(asset_table.c.plant_id == plant_id)
            .where(or_(asset_table.c.is_active, stocktake_item_table.c.id.is_not(None)))
            .order_by(asset_table.c.business_key)
        )
        if status_code is not None:
            stmt = stmt.where(stocktake_item_table.c.status_code == status_code)
        if search:
            pattern = f"%{_escape_like(search.lower())}%"
            stmt = stmt.where(
                or_(
                    func.lower(asset_table.c.business_key).like(pattern, escape="\\"),
                    func.lower(asset_table.c.asset_no).like(pattern, escape="\\"),
                    func.lower(func.coalesce(asset_table.c.description, "")).like(
                        pattern, escape="\\"
                    ),
                )
            )
        return [
            StocktakeDetailRow(
                asset_id=row[0],
                business_key=row[1],
                asset_no=row[2],
                description=row[3],
                stocktake_item_id=row[4],
                status_code=row[5],
                count_method=row[6],
                counted_by_user_id=row[7],
                note_text=row[8],
                counted_at=row[9],
            )
            for row in self.session.execute(stmt)
        ]


@dataclass(slots=True)
class AssetSyncRepositories:
    """Repositories sharing one session inside a unit of work."""

    staging: SqlAlchemyStagingRepository
    assets: SqlAlchemyAssetRepository
    stocktakes: SqlAlchemyStocktakeRepository
