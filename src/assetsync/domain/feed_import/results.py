"""Structured outcomes reported by the feed import phases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class FileImportOutcome:
    """Result of ingesting one configured feed file."""

    ok: bool
    file: str
    row_count: int = 0
    batch_id: UUID | None = None
    error_message: str | None = None


@dataclass(frozen=True, slots=True)
class RegistrySyncResult:
    source_active_rows: int = 0
    inserted: int = 0
    updated: int = 0
    deactivated: int = 0
    active_total: int = 0


@dataclass(frozen=True, slots=True)
class SyncSkipped:
    reason: str
    skipped: bool = True


@dataclass(frozen=True, slots=True)
class PurgeResult:
    ok: bool
    retain_days: int
    batch_size: int
    rounds: int = 0
    deleted_rows: int = 0
    message: str | None = None


@dataclass(frozen=True, slots=True)
class ImportRunSummary:
    """Everything one orchestrated run did, in phase order."""

    results: tuple[FileImportOutcome, ...]
    sync: RegistrySyncResult | SyncSkipped
    purge: PurgeResult
    total_files: int = field(init=False)
    success_count: int = field(init=False)
    failure_count: int = field(init=False)

    def __post_init__(self) -> None:
        successes = sum(1 for outcome in self.results if outcome.ok)
        object.__setattr__(self, "total_files", len(self.results))
        object.__setattr__(self, "success_count", successes)
        object.__setattr__(self, "failure_count", len(self.results) - successes)

    @property
    def succeeded(self) -> bool:
        """A run without a single ingested file is a failed run."""

        return self.success_count > 0
