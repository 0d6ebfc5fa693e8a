"""Batch file ingestion into the staging area."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from assetsync.domain.feed_import.results import FileImportOutcome

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from assetsync.domain.ports.feeds import FeedReader
    from assetsync.domain.ports.stores import StagingStore

log = logging.getLogger(__name__)


@dataclass(slots=True)
class FeedFileIngestor:
    """Parse each configured feed file and stage it as its own import batch.

    Files are isolated from each other: a missing file, a parse error or a
    rejected staging load becomes a failed outcome for that file only.
    """

    staging: StagingStore
    reader: FeedReader

    def ingest(self, drop_dir: Path, file_names: Iterable[str]) -> list[FileImportOutcome]:
        outcomes: list[FileImportOutcome] = []
        for file_name in file_names:
            outcomes.append(self.ingest_file(drop_dir, file_name))
        return outcomes

    def ingest_file(self, drop_dir: Path, file_name: str) -> FileImportOutcome:
        try:
            rows = self.reader(drop_dir / file_name)
            batch_id = self.staging.load(file_name, rows)
        except Exception as exc:  # noqa: BLE001
            log.warning("Feed file %s failed: %s", file_name, exc)
            return FileImportOutcome(ok=False, file=file_name, error_message=str(exc) or repr(exc))

        log.info("Staged %s rows from %s as batch %s", len(rows), file_name, batch_id)
        return FileImportOutcome(ok=True, file=file_name, row_count=len(rows), batch_id=batch_id)
