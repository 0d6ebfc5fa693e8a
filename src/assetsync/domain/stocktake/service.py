"""Application service for the yearly per-plant stocktake lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from assetsync.domain.codes import to_count_method, to_status_code
from assetsync.domain.errors import ValidationError
from assetsync.domain.evidence import attach_with_evidence
from assetsync.domain.model.enums import StocktakeState
from assetsync.domain.stocktake.dto import BulkImportResult, CarryForwardResult, ScanResult
from assetsync.domain.validation import Clock, parse_uuid, to_text, utcnow
from assetsync.domain.validation import to_year as parse_year

if TYPE_CHECKING:
    from uuid import UUID

    from assetsync.domain.model import StocktakeYearConfig
    from assetsync.domain.ports.files import FileStore, StoredFile, Upload
    from assetsync.domain.ports.sheets import CountSheetParser
    from assetsync.domain.ports.stores import StocktakeStore
    from assetsync.domain.stocktake.dto import ScanRequest
    from assetsync.domain.stocktake.reports import (
        StocktakeDetailRow,
        StocktakeExport,
        StocktakeSummary,
    )

log = logging.getLogger(__name__)


@dataclass(slots=True)
class StocktakeService:
    """Open, count, close and carry forward stocktakes.

    Every identifier is validated before the store is touched. Each store call
    is its own transaction; the scan path pairs it with a file write through
    the evidence saga.
    """

    store: StocktakeStore
    files: FileStore
    parse_sheet: CountSheetParser
    clock: Clock = utcnow
    require_closed_source: bool = False

    # lifecycle

    def open(self, *, plant_id: object, year: object, user_id: object) -> UUID:
        """Return the stocktake for (plant, year), creating an open one on first use."""

        resolved_plant = parse_uuid(plant_id, field="plantId")
        resolved_user = parse_uuid(user_id, field="userId")
        resolved_year = parse_year(year, clock=self.clock)
        stocktake_id = self.store.get_or_create(
            plant_id=resolved_plant, year=resolved_year, user_id=resolved_user
        )
        log.info(
            "Stocktake %s ready for plant %s year %s", stocktake_id, resolved_plant, resolved_year
        )
        return stocktake_id

    def year_config(self, *, plant_id: object, year: object) -> StocktakeYearConfig | None:
        return self.store.read_year_config(
            plant_id=parse_uuid(plant_id, field="plantId"),
            year=parse_year(year, clock=self.clock),
        )

    def state(self, *, plant_id: object, year: object) -> StocktakeState:
        config = self.year_config(plant_id=plant_id, year=year)
        if config is None:
            return StocktakeState.NOT_STARTED
        return config.state

    def close_year(self, *, plant_id: object, year: object, closer_id: object) -> None:
        resolved_plant = parse_uuid(plant_id, field="plantId")
        resolved_closer = parse_uuid(closer_id, field="closedBy")
        resolved_year = parse_year(year, clock=self.clock)
        self.store.close_year(
            plant_id=resolved_plant, year=resolved_year, closer_id=resolved_closer
        )
        log.info("Stocktake year %s closed for plant %s", resolved_year, resolved_plant)

    def carry_forward(
        self,
        *,
        plant_id: object,
        from_year: object,
        user_id: object,
        to_year: object = None,
    ) -> CarryForwardResult:
        """Copy the pending items of ``from_year`` into the ``to_year`` stocktake."""

        resolved_plant = parse_uuid(plant_id, field="plantId")
        resolved_user = parse_uuid(user_id, field="userId")
        source_year = parse_year(from_year, clock=self.clock)
        target_year = (
            source_year + 1 if _is_blank(to_year) else parse_year(to_year, clock=self.clock)
        )
        if target_year <= source_year:
            raise ValidationError("toYear must be after fromYear")

        if self.require_closed_source:
            source = self.store.read_year_config(plant_id=resolved_plant, year=source_year)
            if source is not None and source.is_open:
                raise ValidationError(f"Stocktake year {source_year} must be closed first")

        stocktake_id, carried = self.store.carry_forward(
            plant_id=resolved_plant,
            from_year=source_year,
            to_year=target_year,
            user_id=resolved_user,
        )
        log.info(
            "Carried %s pending item(s) from %s to %s for plant %s",
            carried,
            source_year,
            target_year,
            resolved_plant,
        )
        return CarryForwardResult(
            from_year=source_year,
            to_year=target_year,
            stocktake_id=stocktake_id,
            carried=carried,
        )

    # counting

    def scan(self, request: ScanRequest, image: Upload | None) -> ScanResult:
        """Record one counted asset together with its photo.

        The photo is written first; when the item or image row cannot be
        written the photo is removed and the store error is raised.
        """

        stocktake_id = parse_uuid(request.stocktake_id, field="stocktakeId")
        asset_id = parse_uuid(request.asset_id, field="assetId")
        user_id = parse_uuid(request.counted_by_user_id, field="countedBy")
        status_code = to_status_code(request.status_code)
        count_method = to_count_method(request.count_method)
        note_text = to_text(request.note_text)

        def record(stored: StoredFile) -> ScanResult:
            item_id = self.store.record_scan(
                stocktake_id=stocktake_id,
                asset_id=asset_id,
                status_code=status_code,
                user_id=user_id,
                count_method=count_method,
                note_text=note_text,
            )
            image_id = self.store.attach_image(item_id=item_id, file_url=stored.file_url)
            return ScanResult(
                stocktake_item_id=item_id,
                image_id=image_id,
                file_url=stored.file_url,
                status_code=status_code,
                count_method=count_method,
            )

        return attach_with_evidence(self.files, image, owner_id=str(asset_id), write=record)

    def import_counts(
        self,
        *,
        stocktake_id: object,
        importer_id: object,
        upload: Upload,
    ) -> BulkImportResult:
        resolved_stocktake = parse_uuid(stocktake_id, field="stocktakeId")
        resolved_importer = parse_uuid(importer_id, field="importedBy")
        rows = self.parse_sheet(upload)
        if not rows:
            raise ValidationError("No rows with an asset number found in file")
        imported = self.store.bulk_import(
            stocktake_id=resolved_stocktake,
            importer_id=resolved_importer,
            items=rows,
        )
        log.info("Imported %s of %s count row(s) into %s", imported, len(rows), resolved_stocktake)
        return BulkImportResult(submitted=len(rows), imported=imported)

    # reports

    def summary(self, *, plant_id: object, year: object) -> StocktakeSummary:
        return self.store.summary(
            plant_id=parse_uuid(plant_id, field="plantId"),
            year=parse_year(year, clock=self.clock),
        )

    def detail(
        self,
        *,
        plant_id: object,
        year: object,
        status_code: object = None,
        search: object = None,
    ) -> list[StocktakeDetailRow]:
        status = None if _is_blank(status_code) else to_status_code(status_code)
        return self.store.detail(
            plant_id=parse_uuid(plant_id, field="plantId"),
            year=parse_year(year, clock=self.clock),
            status_code=status,
            search=to_text(search, max_length=200),
        )

    def export(self, *, plant_id: object, year: object, search: object = None) -> StocktakeExport:
        return self.store.export(
            plant_id=parse_uuid(plant_id, field="plantId"),
            year=parse_year(year, clock=self.clock),
            search=to_text(search, max_length=200),
        )


def _is_blank(value: object) -> bool:
    return value is None or not str(value).strip()
