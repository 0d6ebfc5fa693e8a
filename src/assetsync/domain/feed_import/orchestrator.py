"""Sequencing of one feed import run: ingest, merge, sweep."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from assetsync.domain.concurrency import SingleFlight
from assetsync.domain.feed_import.results import ImportRunSummary, SyncSkipped

if TYPE_CHECKING:
    from pathlib import Path

    from assetsync.domain.feed_import.ingestor import FeedFileIngestor
    from assetsync.domain.feed_import.registry_sync import RegistrySync
    from assetsync.domain.feed_import.results import RegistrySyncResult
    from assetsync.domain.feed_import.retention import StagingRetentionSweeper

NO_SUCCESSFUL_FILE: Final[str] = "No feed file was ingested successfully in this run"

log = logging.getLogger(__name__)


@dataclass(slots=True)
class FeedImportOrchestrator:
    """Drive ingestor, registry sync and retention sweep for the configured files.

    * every file is attempted, failures are collected per file;
    * the registry merge only runs when at least one file was staged;
    * the sweep always runs, also when the merge raises (the merge error is
      then re-raised once the sweep has finished).
    """

    ingestor: FeedFileIngestor
    registry_sync: RegistrySync
    sweeper: StagingRetentionSweeper
    drop_dir: Path
    files: tuple[str, ...]
    guard: SingleFlight = field(default_factory=SingleFlight)

    def run(self) -> ImportRunSummary:
        log.info("Feed import started: %s file(s) from %s", len(self.files), self.drop_dir)
        results = tuple(self.ingestor.ingest(self.drop_dir, self.files))

        sync: RegistrySyncResult | SyncSkipped
        try:
            if any(outcome.ok for outcome in results):
                sync = self.registry_sync.run()
            else:
                log.warning("Registry merge skipped: %s", NO_SUCCESSFUL_FILE)
                sync = SyncSkipped(reason=NO_SUCCESSFUL_FILE)
        finally:
            purge = self.sweeper.sweep()

        summary = ImportRunSummary(results=results, sync=sync, purge=purge)
        log.info(
            "Feed import finished: files=%s, succeeded=%s, failed=%s, purged=%s",
            summary.total_files,
            summary.success_count,
            summary.failure_count,
            purge.deleted_rows,
        )
        return summary

    def run_exclusive(self) -> ImportRunSummary | None:
        """Run unless another run of this orchestrator is in progress."""

        with self.guard.claim() as acquired:
            if not acquired:
                log.info("Feed import skipped: previous run still in progress")
                return None
            return self.run()
