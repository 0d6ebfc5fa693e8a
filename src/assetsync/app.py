"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from assetsync.adapters.count_sheets import parse_count_sheet
from assetsync.adapters.feed import read_feed_file
from assetsync.adapters.file_storage import build_file_store
from assetsync.adapters.scheduling import build_scheduler, schedule_feed_import
from assetsync.adapters.sqlalchemy import (
    SqlAlchemyRegistryStore,
    SqlAlchemyStagingStore,
    SqlAlchemyStocktakeStore,
    SqlAlchemyUnitOfWork,
)
from assetsync.adapters.sqlalchemy.unit_of_work import is_started, startup
from assetsync.config import (
    ConfigurationError,
    get_feed_import_config,
    get_feed_schedule_config,
    get_image_storage_config,
)
from assetsync.domain.assets import AssetImageService
from assetsync.domain.feed_import import (
    FeedFileIngestor,
    FeedImportOrchestrator,
    RegistrySync,
    StagingRetentionSweeper,
)
from assetsync.domain.stocktake import StocktakeService

if TYPE_CHECKING:
    from assetsync.config import FeedImportConfig, FeedScheduleConfig, ImageStorageConfig
    from assetsync.domain.feed_import import ImportRunSummary
    from assetsync.domain.model import ImportBatch
    from assetsync.domain.ports import FileStore

UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]

log = getLogger(__name__)


def ensure_started() -> None:
    """Start the SQLAlchemy adapter unless an entry point already did."""

    if not is_started():
        startup()


def build_feed_import_orchestrator(
    *,
    config: FeedImportConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> FeedImportOrchestrator:
    """Wire ingestor, registry sync and sweeper against the SQLAlchemy stores."""

    effective_config = config or get_feed_import_config()
    effective_uow = unit_of_work_factory or SqlAlchemyUnitOfWork
    staging = SqlAlchemyStagingStore(effective_uow)
    return FeedImportOrchestrator(
        ingestor=FeedFileIngestor(staging=staging, reader=read_feed_file),
        registry_sync=RegistrySync(
            registry=SqlAlchemyRegistryStore(effective_uow),
            deactivate_missing=effective_config.deactivate_missing,
        ),
        sweeper=StagingRetentionSweeper(
            staging=staging,
            retain_days=effective_config.retain_days,
            batch_size=effective_config.purge_batch_size,
        ),
        drop_dir=effective_config.drop_dir,
        files=effective_config.files,
    )


def run_feed_import(
    *,
    orchestrator: FeedImportOrchestrator | None = None,
) -> ImportRunSummary | None:
    """Run one feed import now; ``None`` when a run is already in progress."""

    ensure_started()
    effective = orchestrator or build_feed_import_orchestrator()
    return effective.run_exclusive()


def serve_feed_import_schedule(
    *,
    schedule: FeedScheduleConfig | None = None,
    orchestrator: FeedImportOrchestrator | None = None,
) -> None:
    """Block running the cron-triggered feed import."""

    ensure_started()
    effective_schedule = schedule or get_feed_schedule_config()
    effective = orchestrator or build_feed_import_orchestrator()
    scheduler = build_scheduler(effective_schedule)
    if schedule_feed_import(scheduler, effective, effective_schedule) is None:
        raise ConfigurationError("Scheduled feed import is disabled (FEED_IMPORT_ENABLED)")
    log.info("Starting feed import scheduler")
    scheduler.start()


def list_staging_batches(
    *,
    limit: int = 5,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[ImportBatch]:
    ensure_started()
    staging = SqlAlchemyStagingStore(unit_of_work_factory or SqlAlchemyUnitOfWork)
    return staging.latest_batches(limit)


def build_file_store_from_config(config: ImageStorageConfig | None = None) -> FileStore:
    return build_file_store(config or get_image_storage_config())


def build_stocktake_service(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    files: FileStore | None = None,
) -> StocktakeService:
    ensure_started()
    return StocktakeService(
        store=SqlAlchemyStocktakeStore(unit_of_work_factory or SqlAlchemyUnitOfWork),
        files=files or build_file_store_from_config(),
        parse_sheet=parse_count_sheet,
    )


def build_asset_image_service(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    files: FileStore | None = None,
) -> AssetImageService:
    ensure_started()
    return AssetImageService(
        registry=SqlAlchemyRegistryStore(unit_of_work_factory or SqlAlchemyUnitOfWork),
        files=files or build_file_store_from_config(),
    )
