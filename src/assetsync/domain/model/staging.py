"""Transient feed ingestion entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from assetsync.domain.model.base import Entity

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class ImportBatch(Entity):
    """One successful load of one feed file; immutable once written."""

    source_file_name: str
    loaded_at: datetime
    row_count: int = 0


@dataclass(eq=False, kw_only=True)
class StagingRecord(Entity):
    """Raw feed row as received, kept until the retention sweep removes it."""

    batch_id: UUID
    source_file_name: str
    row_number: int
    loaded_at: datetime
    payload: dict[str, Any] = field(default_factory=dict[str, Any])


@dataclass(eq=False, kw_only=True)
class FeedSnapshotRow(Entity):
    """Latest reconciled row for a business key within one feed file.

    The snapshot of a file is replaced wholesale by each successful load of that
    file and is what the registry merge reads.
    """

    source_file_name: str
    business_key: str
    batch_id: UUID
    loaded_at: datetime
    asset_no: str
    sub_number: str | None = None
    description: str | None = None
    plant_code: str | None = None
    cost_center: str | None = None
    capitalized_on: str | None = None
    is_active: bool = True
