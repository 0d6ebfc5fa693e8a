"""Stocktake (physical audit) entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from assetsync.domain.model.base import Entity
from assetsync.domain.model.enums import StocktakeState

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class StocktakeYearConfig(Entity):
    """Open/closed state of the audit for one (plant, year)."""

    plant_id: UUID
    year: int
    is_open: bool = True
    report_generated_at: datetime | None = None
    closed_at: datetime | None = None
    closed_by_user_id: UUID | None = None
    created_at: datetime | None = None

    @property
    def state(self) -> StocktakeState:
        return StocktakeState.OPEN if self.is_open else StocktakeState.CLOSED


@dataclass(eq=False, kw_only=True)
class Stocktake(Entity):
    year_config_id: UUID
    plant_id: UUID
    year: int
    created_by_user_id: UUID | None = None
    created_at: datetime | None = None


@dataclass(eq=False, kw_only=True)
class StocktakeItem(Entity):
    """Audit result for one asset; unique per (stocktake, asset)."""

    stocktake_id: UUID
    asset_id: UUID
    status_code: str
    count_method: str
    counted_by_user_id: UUID | None = None
    note_text: str | None = None
    counted_at: datetime | None = None
    carried_from_item_id: UUID | None = None


@dataclass(eq=False, kw_only=True)
class StocktakeItemImage(Entity):
    item_id: UUID
    file_url: str
    created_at: datetime | None = None
