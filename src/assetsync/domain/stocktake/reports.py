"""Read models returned by the stocktake report queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class StocktakeSummary:
    plant_id: UUID
    year: int
    stocktake_id: UUID | None
    is_open: bool | None
    active_assets: int
    counted_items: int
    uncounted_assets: int
    by_status: dict[str, int] = field(default_factory=dict[str, int])


@dataclass(frozen=True, slots=True)
class StocktakeDetailRow:
    """An active plant asset and, when it was counted, its audit result."""

    asset_id: UUID
    business_key: str
    asset_no: str
    description: str | None
    stocktake_item_id: UUID | None = None
    status_code: str | None = None
    count_method: str | None = None
    counted_by_user_id: UUID | None = None
    note_text: str | None = None
    counted_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class StocktakeExport:
    """Detail rows split by outcome; every row lands in exactly one section.

    ``other`` holds items whose status is none of COUNTED, NOT_COUNTED or
    PENDING (OTHER, REJECTED and unmapped codes).
    """

    counted: tuple[StocktakeDetailRow, ...] = ()
    not_counted: tuple[StocktakeDetailRow, ...] = ()
    pending: tuple[StocktakeDetailRow, ...] = ()
    other: tuple[StocktakeDetailRow, ...] = ()
