"""Feed import: staging ingestion, registry merge and staging retention."""

from __future__ import annotations

from .ingestor import FeedFileIngestor
from .orchestrator import NO_SUCCESSFUL_FILE, FeedImportOrchestrator
from .registry_sync import RegistrySync
from .results import (
    FileImportOutcome,
    ImportRunSummary,
    PurgeResult,
    RegistrySyncResult,
    SyncSkipped,
)
from .retention import DEFAULT_MAX_ROUNDS, StagingRetentionSweeper

__all__ = [
    "DEFAULT_MAX_ROUNDS",
    "NO_SUCCESSFUL_FILE",
    "FeedFileIngestor",
    "FeedImportOrchestrator",
    "FileImportOutcome",
    "ImportRunSummary",
    "PurgeResult",
    "RegistrySync",
    "RegistrySyncResult",
    "StagingRetentionSweeper",
    "SyncSkipped",
]
