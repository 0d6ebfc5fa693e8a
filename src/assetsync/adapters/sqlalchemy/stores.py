"""Store ports implemented with one SQLAlchemy unit of work per call."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError

from assetsync.adapters.feed import FeedFormatError, parse_feed_date, parse_feed_rows
from assetsync.domain.errors import (
    AssetNotFoundError,
    StocktakeClosedError,
    StocktakeItemNotFoundError,
    StocktakeNotFoundError,
)
from assetsync.domain.feed_import.results import RegistrySyncResult
from assetsync.domain.model import (
    AssetImage,
    AssetRecord,
    FeedSnapshotRow,
    ImportBatch,
    Plant,
    StatusCode,
    Stocktake,
    StocktakeItem,
    StocktakeItemImage,
    StocktakeYearConfig,
)
from assetsync.domain.stocktake.reports import StocktakeExport, StocktakeSummary
from assetsync.domain.validation import Clock, utcnow

if TYPE_CHECKING:
    import uuid
    from collections.abc import Callable, Mapping, Sequence
    from datetime import datetime

    from assetsync.adapters.sqlalchemy.repositories import SqlAlchemyStocktakeRepository
    from assetsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
    from assetsync.domain.stocktake.dto import CountImportRow
    from assetsync.domain.stocktake.reports import StocktakeDetailRow

    type UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]

log = logging.getLogger(__name__)

_REGISTRY_FIELDS = (
    "asset_no",
    "sub_number",
    "description",
    "plant_code",
    "plant_id",
    "cost_center",
    "capitalized_on",
)


class SqlAlchemyStagingStore:
    def __init__(self, unit_of_work_factory: UnitOfWorkFactory, *, clock: Clock = utcnow) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    def load(self, source_file_name: str, rows: Sequence[Mapping[str, str]]) -> uuid.UUID:
        """Stage ``rows`` and replace the file's snapshot, all in one transaction.

        A file without any keyed asset row is rejected before anything is
        written, so a truncated upload never empties the snapshot.
        """

        parsed = parse_feed_rows(rows)
        if not parsed:
            raise FeedFormatError(f"Feed file {source_file_name} has no asset rows")
        loaded_at = self._clock()
        batch = ImportBatch(
            source_file_name=source_file_name, loaded_at=loaded_at, row_count=len(rows)
        )
        snapshot = [
            FeedSnapshotRow(
                source_file_name=source_file_name,
                business_key=key,
                batch_id=batch.id,
                loaded_at=loaded_at,
                asset_no=row.asset_no or key,
                sub_number=row.sub_number,
                description=row.description,
                plant_code=row.plant_code,
                cost_center=row.cost_center,
                capitalized_on=row.capitalized_on,
                is_active=row.is_source_active,
            )
            for key, row in parsed.items()
        ]
        with self._uow_factory() as uow:
            staging = uow.repositories.staging
            staging.add_batch(batch)
            staging.add_records(batch, rows)
            staging.replace_snapshot(source_file_name, snapshot)
            uow.commit()
        return batch.id

    def purge(self, *, retain_days: int, batch_size: int) -> int:
        cutoff = self._clock() - timedelta(days=retain_days)
        with self._uow_factory() as uow:
            staging = uow.repositories.staging
            deleted = staging.delete_aged_records(cutoff, batch_size)
            batches = staging.delete_emptied_batches(cutoff)
            uow.commit()
        if batches:
            log.debug("Removed %s emptied import batch(es)", batches)
        return deleted

    def latest_batches(self, limit: int = 5) -> list[ImportBatch]:
        with self._uow_factory() as uow:
            return uow.repositories.staging.latest_batches(limit)


class SqlAlchemyRegistryStore:
    def __init__(self, unit_of_work_factory: UnitOfWorkFactory, *, clock: Clock = utcnow) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    def merge(self, *, deactivate_missing: bool = False) -> RegistrySyncResult:
        """Fold the newest snapshot row per business key into the asset registry.

        Active source rows insert or refresh assets; inactive source rows
        deactivate them. With ``deactivate_missing`` assets absent from every
        snapshot are deactivated as well. Unknown plant codes are registered.
        """

        now = self._clock()
        inserted = updated = deactivated = 0
        with self._uow_factory() as uow:
            assets = uow.repositories.assets
            source: dict[str, FeedSnapshotRow] = {}
            for row in assets.snapshot_rows():
                source[row.business_key] = row
            existing = assets.all_assets()
            plants = assets.plants_by_code()

            source_active = 0
            for key, row in source.items():
                record = existing.get(key)
                if not row.is_active:
                    if record is not None and record.is_active:
                        record.is_active = False
                        record.updated_at = now
                        deactivated += 1
                    continue

                source_active += 1
                values = {
                    "asset_no": row.asset_no,
                    "sub_number": row.sub_number,
                    "description": row.description,
                    "plant_code": row.plant_code,
                    "plant_id": self._plant_id(row.plant_code, plants, assets.add),
                    "cost_center": row.cost_center,
                    "capitalized_on": parse_feed_date(row.capitalized_on),
                }
                if record is None:
                    assets.add(
                        AssetRecord(business_key=key, created_at=now, updated_at=now, **values)
                    )
                    inserted += 1
                    continue
                changed = not record.is_active
                for field_name in _REGISTRY_FIELDS:
                    if getattr(record, field_name) != values[field_name]:
                        setattr(record, field_name, values[field_name])
                        changed = True
                if changed:
                    record.is_active = True
                    record.updated_at = now
                    updated += 1

            if deactivate_missing:
                for key, record in existing.items():
                    if key not in source and record.is_active:
                        record.is_active = False
                        record.updated_at = now
                        deactivated += 1

            uow.session.flush()
            active_total = assets.count_active()
            uow.commit()

        return RegistrySyncResult(
            source_active_rows=source_active,
            inserted=inserted,
            updated=updated,
            deactivated=deactivated,
            active_total=active_total,
        )

    @staticmethod
    def _plant_id(
        code: str | None,
        plants: dict[str, Plant],
        add: Callable[[Plant], None],
    ) -> uuid.UUID | None:
        if not code:
            return None
        plant = plants.get(code)
        if plant is None:
            plant = Plant(code=code)
            plants[code] = plant
            add(plant)
        return plant.id

    def add_image(self, *, asset_id: uuid.UUID, file_url: str, is_primary: bool) -> uuid.UUID:
        with self._uow_factory() as uow:
            assets = uow.repositories.assets
            if assets.get(asset_id) is None:
                raise AssetNotFoundError(f"Asset {asset_id} not found")
            if is_primary:
                assets.clear_primary_images(asset_id)
            image = AssetImage(
                asset_id=asset_id,
                file_url=file_url,
                is_primary=is_primary,
                created_at=self._clock(),
            )
            assets.add(image)
            uow.commit()
        return image.id


class SqlAlchemyStocktakeStore:
    def __init__(self, unit_of_work_factory: UnitOfWorkFactory, *, clock: Clock = utcnow) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    # lifecycle

    def get_or_create(self, *, plant_id: uuid.UUID, year: int, user_id: uuid.UUID) -> uuid.UUID:
        try:
            with self._uow_factory() as uow:
                stocktake = _get_or_create(
                    uow.repositories.stocktakes, plant_id, year, user_id, self._clock()
                )
                uow.commit()
                return stocktake.id
        except IntegrityError:
            # a concurrent caller created it first
            with self._uow_factory() as uow:
                existing = uow.repositories.stocktakes.find(plant_id, year)
                if existing is None:
                    raise
                return existing.id

    def read_year_config(self, *, plant_id: uuid.UUID, year: int) -> StocktakeYearConfig | None:
        with self._uow_factory() as uow:
            return uow.repositories.stocktakes.year_config(plant_id, year)

    def close_year(self, *, plant_id: uuid.UUID, year: int, closer_id: uuid.UUID) -> None:
        with self._uow_factory() as uow:
            config = uow.repositories.stocktakes.year_config(plant_id, year)
            if config is None:
                raise StocktakeNotFoundError(f"Stocktake year {year} not found")
            if not config.is_open:
                raise StocktakeClosedError(f"Stocktake year {year} already closed")
            now = self._clock()
            config.is_open = False
            config.closed_at = now
            config.closed_by_user_id = closer_id
            config.report_generated_at = now
            uow.commit()

    def carry_forward(
        self,
        *,
        plant_id: uuid.UUID,
        from_year: int,
        to_year: int,
        user_id: uuid.UUID,
    ) -> tuple[uuid.UUID, int]:
        """Copy PENDING items of ``from_year`` into ``to_year``, skipping assets already there."""

        with self._uow_factory() as uow:
            _require_year(uow.repositories.stocktakes, plant_id, from_year)
        target_id = self.get_or_create(plant_id=plant_id, year=to_year, user_id=user_id)

        with self._uow_factory() as uow:
            stocktakes = uow.repositories.stocktakes
            source = _require_year(stocktakes, plant_id, from_year)
            target = _require_stocktake(stocktakes, target_id)
            _require_open(stocktakes, target)
            now = self._clock()

            carried = 0
            for item in stocktakes.items(source.id, StatusCode.PENDING):
                if stocktakes.item_for_asset(target.id, item.asset_id) is not None:
                    continue
                stocktakes.add(
                    StocktakeItem(
                        stocktake_id=target.id,
                        asset_id=item.asset_id,
                        status_code=item.status_code,
                        count_method=item.count_method,
                        counted_by_user_id=user_id,
                        note_text=item.note_text,
                        counted_at=now,
                        carried_from_item_id=item.id,
                    )
                )
                carried += 1
            uow.commit()
            return target.id, carried

    # counting

    def record_scan(
        self,
        *,
        stocktake_id: uuid.UUID,
        asset_id: uuid.UUID,
        status_code: str,
        user_id: uuid.UUID,
        count_method: str,
        note_text: str | None,
    ) -> uuid.UUID:
        with self._uow_factory() as uow:
            stocktakes = uow.repositories.stocktakes
            stocktake = _require_stocktake(stocktakes, stocktake_id)
            _require_open(stocktakes, stocktake)
            if uow.repositories.assets.get(asset_id) is None:
                raise AssetNotFoundError(f"Asset {asset_id} not found")
            item = _upsert_item(
                stocktakes,
                stocktake_id=stocktake_id,
                asset_id=asset_id,
                status_code=status_code,
                count_method=count_method,
                user_id=user_id,
                note_text=note_text,
                counted_at=self._clock(),
            )
            uow.commit()
            return item.id

    def attach_image(self, *, item_id: uuid.UUID, file_url: str) -> uuid.UUID:
        with self._uow_factory() as uow:
            stocktakes = uow.repositories.stocktakes
            if stocktakes.get_item(item_id) is None:
                raise StocktakeItemNotFoundError(f"Stocktake item {item_id} not found")
            image = StocktakeItemImage(item_id=item_id, file_url=file_url, created_at=self._clock())
            stocktakes.add(image)
            uow.commit()
        return image.id

    def bulk_import(
        self,
        *,
        stocktake_id: uuid.UUID,
        importer_id: uuid.UUID,
        items: Sequence[CountImportRow],
    ) -> int:
        """Upsert rows whose asset number matches a registry business key."""

        with self._uow_factory() as uow:
            stocktakes = uow.repositories.stocktakes
            stocktake = _require_stocktake(stocktakes, stocktake_id)
            _require_open(stocktakes, stocktake)
            known = uow.repositories.assets.find_by_keys(item.asset_no for item in items)
            now = self._clock()
            imported = 0
            for item in items:
                asset_id = known.get(item.asset_no)
                if asset_id is None:
                    log.debug("Skipping count row for unknown asset %s", item.asset_no)
                    continue
                _upsert_item(
                    stocktakes,
                    stocktake_id=stocktake_id,
                    asset_id=asset_id,
                    status_code=item.status_code,
                    count_method=item.count_method,
                    user_id=importer_id,
                    note_text=item.note_text,
                    counted_at=now,
                )
                imported += 1
            uow.commit()
        return imported

    # reports

    def summary(self, *, plant_id: uuid.UUID, year: int) -> StocktakeSummary:
        with self._uow_factory() as uow:
            stocktakes = uow.repositories.stocktakes
            config = stocktakes.year_config(plant_id, year)
            stocktake = stocktakes.find(plant_id, year)
            stocktake_id = stocktake.id if stocktake is not None else None
            by_status = stocktakes.status_counts(stocktake_id) if stocktake_id else {}
            return StocktakeSummary(
                plant_id=plant_id,
                year=year,
                stocktake_id=stocktake_id,
                is_open=config.is_open if config is not None else None,
                active_assets=uow.repositories.assets.count_active(plant_id),
                counted_items=sum(by_status.values()),
                uncounted_assets=stocktakes.count_uncounted_active(plant_id, stocktake_id),
                by_status=by_status,
            )

    def detail(
        self,
        *,
        plant_id: uuid.UUID,
        year: int,
        status_code: str | None = None,
        search: str | None = None,
    ) -> list[StocktakeDetailRow]:
        with self._uow_factory() as uow:
            stocktakes = uow.repositories.stocktakes
            stocktake = stocktakes.find(plant_id, year)
            return stocktakes.detail_rows(
                plant_id,
                stocktake.id if stocktake is not None else None,
                status_code=status_code,
                search=search,
            )

    def export(
        self, *, plant_id: uuid.UUID, year: int, search: str | None = None
    ) -> StocktakeExport:
        sections: dict[str, list[StocktakeDetailRow]] = {
            "counted": [],
            "not_counted": [],
            "pending": [],
            "other": [],
        }
        for row in self.detail(plant_id=plant_id, year=year, search=search):
            sections[_export_section(row)].append(row)
        return StocktakeExport(**{name: tuple(rows) for name, rows in sections.items()})


def _get_or_create(
    stocktakes: SqlAlchemyStocktakeRepository,
    plant_id: uuid.UUID,
    year: int,
    user_id: uuid.UUID,
    now: datetime,
) -> Stocktake:
    config = stocktakes.year_config(plant_id, year)
    if config is None:
        config = StocktakeYearConfig(plant_id=plant_id, year=year, created_at=now)
        stocktakes.add(config)
    else:
        existing = stocktakes.for_year_config(config.id)
        if existing is not None:
            return existing
    stocktake = Stocktake(
        year_config_id=config.id,
        plant_id=plant_id,
        year=year,
        created_by_user_id=user_id,
        created_at=now,
    )
    stocktakes.add(stocktake)
    stocktakes.flush()
    log.info("Created stocktake %s for plant %s year %s", stocktake.id, plant_id, year)
    return stocktake


def _require_year(
    stocktakes: SqlAlchemyStocktakeRepository, plant_id: uuid.UUID, year: int
) -> Stocktake:
    stocktake = stocktakes.find(plant_id, year)
    if stocktake is None:
        raise StocktakeNotFoundError(f"Stocktake year {year} not found")
    return stocktake


def _require_stocktake(
    stocktakes: SqlAlchemyStocktakeRepository, stocktake_id: uuid.UUID
) -> Stocktake:
    stocktake = stocktakes.get(stocktake_id)
    if stocktake is None:
        raise StocktakeNotFoundError(f"Stocktake {stocktake_id} not found")
    return stocktake


def _require_open(stocktakes: SqlAlchemyStocktakeRepository, stocktake: Stocktake) -> None:
    config = stocktakes.get_config(stocktake.year_config_id)
    if config is not None and not config.is_open:
        raise StocktakeClosedError(f"Stocktake year {stocktake.year} is closed")


def _upsert_item(
    stocktakes: SqlAlchemyStocktakeRepository,
    *,
    stocktake_id: uuid.UUID,
    asset_id: uuid.UUID,
    status_code: str,
    count_method: str,
    user_id: uuid.UUID,
    note_text: str | None,
    counted_at: datetime,
) -> StocktakeItem:
    item = stocktakes.item_for_asset(stocktake_id, asset_id)
    if item is None:
        item = StocktakeItem(
            stocktake_id=stocktake_id,
            asset_id=asset_id,
            status_code=status_code,
            count_method=count_method,
        )
        stocktakes.add(item)
    item.status_code = status_code
    item.count_method = count_method
    item.counted_by_user_id = user_id
    item.note_text = note_text
    item.counted_at = counted_at
    stocktakes.flush()
    return item


def _export_section(row: StocktakeDetailRow) -> str:
    if row.stocktake_item_id is None:
        return "not_counted"
    match row.status_code:
        case StatusCode.COUNTED:
            return "counted"
        case StatusCode.NOT_COUNTED:
            return "not_counted"
        case StatusCode.PENDING:
            return "pending"
        case _:
            return "other"
