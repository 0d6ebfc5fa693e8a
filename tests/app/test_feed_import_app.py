from __future__ import annotations

from typing import TYPE_CHECKING

from assetsync.app import build_feed_import_orchestrator, list_staging_batches, run_feed_import
from assetsync.config import FeedImportConfig
from assetsync.domain.feed_import import RegistrySyncResult

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from assetsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork


FEED = (
    "Asset|Subnumber|Asset description|Plant|Cost Center|Capitalized on|Deactivation on\n"
    "100001|0|Forklift|P100|CC-10|01.02.2020|00.00.0000\n"
    "100002|0|Pallet rack|P100|CC-10|15.06.2021|\n"
    "100003|0|Old compressor|P100|CC-20|03.03.2015|31.12.2025\n"
)


def test_feed_import_end_to_end(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork], tmp_path: Path
) -> None:
    (tmp_path / "ZFI_ASSET_1.txt").write_text(FEED, encoding="utf-8-sig")
    orchestrator = build_feed_import_orchestrator(
        config=FeedImportConfig(
            drop_dir=tmp_path,
            files=("ZFI_ASSET_1.txt", "ZFI_ASSET_2.txt"),
            retain_days=3,
            purge_batch_size=1000,
        ),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    summary = run_feed_import(orchestrator=orchestrator)

    assert summary is not None
    assert summary.succeeded
    assert (summary.success_count, summary.failure_count) == (1, 1)
    assert [outcome.row_count for outcome in summary.results] == [3, 0]
    assert isinstance(summary.sync, RegistrySyncResult)
    assert summary.sync.inserted == 2
    assert summary.sync.active_total == 2
    assert summary.purge.ok
    with sqlite_unit_of_work() as uow:
        assert set(uow.repositories.assets.all_assets()) == {"100001", "100002"}
    batches = list_staging_batches(unit_of_work_factory=sqlite_unit_of_work)
    assert [batch.source_file_name for batch in batches] == ["ZFI_ASSET_1.txt"]


def test_orchestrator_takes_retention_from_config(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork], tmp_path: Path
) -> None:
    orchestrator = build_feed_import_orchestrator(
        config=FeedImportConfig(
            drop_dir=tmp_path, files=("ZFI_ASSET_1.txt",), retain_days=9, purge_batch_size=250
        ),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert (orchestrator.sweeper.retain_days, orchestrator.sweeper.batch_size) == (9, 250)


def test_truncated_feed_file_fails_and_keeps_registry(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork], tmp_path: Path
) -> None:
    feed = tmp_path / "ZFI_ASSET_1.txt"
    config = FeedImportConfig(drop_dir=tmp_path, files=(feed.name,), deactivate_missing=True)
    orchestrator = build_feed_import_orchestrator(
        config=config, unit_of_work_factory=sqlite_unit_of_work
    )
    feed.write_text(FEED, encoding="utf-8")
    run_feed_import(orchestrator=orchestrator)

    feed.write_text(FEED.splitlines()[0] + "\n", encoding="utf-8")
    summary = run_feed_import(orchestrator=orchestrator)

    assert summary is not None
    assert not summary.succeeded
    assert "no asset rows" in (summary.results[0].error_message or "")
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.assets.count_active() == 2
