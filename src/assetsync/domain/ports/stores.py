"""Ports for the transactional store operations the orchestration layer drives.

Each method is one atomic call: it either commits everything it describes or
nothing. Callers sequence between calls and never rely on partial effects
inside one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from uuid import UUID

    from assetsync.domain.feed_import.results import RegistrySyncResult
    from assetsync.domain.model import ImportBatch, StocktakeYearConfig
    from assetsync.domain.stocktake.dto import CountImportRow
    from assetsync.domain.stocktake.reports import (
        StocktakeDetailRow,
        StocktakeExport,
        StocktakeSummary,
    )


@runtime_checkable
class StagingStore(Protocol):
    """Persistence contract for the transient feed staging area."""

    def load(self, source_file_name: str, rows: Sequence[Mapping[str, str]]) -> UUID:
        """Stage ``rows`` under a new import batch and return the batch id."""
        ...

    def purge(self, *, retain_days: int, batch_size: int) -> int:
        """Delete at most ``batch_size`` rows older than ``retain_days``; return the count."""
        ...

    def latest_batches(self, limit: int = 5) -> list[ImportBatch]: ...


@runtime_checkable
class RegistryStore(Protocol):
    """Persistence contract for the canonical asset registry."""

    def merge(self, *, deactivate_missing: bool = False) -> RegistrySyncResult:
        """Fold the latest per-file feed snapshots into the registry."""
        ...

    def add_image(self, *, asset_id: UUID, file_url: str, is_primary: bool) -> UUID: ...


@runtime_checkable
class StocktakeStore(Protocol):
    """Persistence contract for stocktake headers, year configs and items."""

    def get_or_create(self, *, plant_id: UUID, year: int, user_id: UUID) -> UUID:
        """Return the stocktake for (plant, year), creating it open when absent."""
        ...

    def read_year_config(self, *, plant_id: UUID, year: int) -> StocktakeYearConfig | None: ...

    def record_scan(
        self,
        *,
        stocktake_id: UUID,
        asset_id: UUID,
        status_code: str,
        user_id: UUID,
        count_method: str,
        note_text: str | None,
    ) -> UUID:
        """Upsert the item for (stocktake, asset) and return its id."""
        ...

    def attach_image(self, *, item_id: UUID, file_url: str) -> UUID: ...

    def bulk_import(
        self,
        *,
        stocktake_id: UUID,
        importer_id: UUID,
        items: Sequence[CountImportRow],
    ) -> int:
        """Upsert every row whose asset number is known; return the accepted count."""
        ...

    def close_year(self, *, plant_id: UUID, year: int, closer_id: UUID) -> None:
        """Close an open year; raise when it is missing or already closed."""
        ...

    def carry_forward(
        self,
        *,
        plant_id: UUID,
        from_year: int,
        to_year: int,
        user_id: UUID,
    ) -> tuple[UUID, int]:
        """Copy pending items into the ``to_year`` stocktake; return (id, carried)."""
        ...

    def summary(self, *, plant_id: UUID, year: int) -> StocktakeSummary: ...

    def detail(
        self,
        *,
        plant_id: UUID,
        year: int,
        status_code: str | None = None,
        search: str | None = None,
    ) -> list[StocktakeDetailRow]: ...

    def export(
        self, *, plant_id: UUID, year: int, search: str | None = None
    ) -> StocktakeExport: ...
