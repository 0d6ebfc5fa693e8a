"""Canonical asset registry entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from assetsync.domain.model.base import Entity

if TYPE_CHECKING:
    from datetime import date, datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Plant(Entity):
    code: str
    name: str | None = None


@dataclass(eq=False, kw_only=True)
class AssetRecord(Entity):
    """Durable asset addressed by its business key.

    Only the registry merge creates, updates or deactivates records; every other
    subsystem reads them.
    """

    business_key: str
    asset_no: str
    sub_number: str | None = None
    description: str | None = None
    plant_code: str | None = None
    plant_id: UUID | None = None
    cost_center: str | None = None
    capitalized_on: date | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(eq=False, kw_only=True)
class AssetImage(Entity):
    asset_id: UUID
    file_url: str
    is_primary: bool = False
    created_at: datetime | None = None
