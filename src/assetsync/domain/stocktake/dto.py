"""Stocktake request and result DTOs (store-agnostic)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class CountImportRow:
    """One normalized row of a bulk count upload, addressed by asset number."""

    asset_no: str
    status_code: str
    count_method: str
    note_text: str | None = None


@dataclass(frozen=True, slots=True)
class ScanRequest:
    """Raw scan input as received; validated and normalized by the service."""

    stocktake_id: object
    asset_id: object
    counted_by_user_id: object
    status_code: object = None
    count_method: object = None
    note_text: object = None


@dataclass(frozen=True, slots=True)
class ScanResult:
    stocktake_item_id: UUID
    image_id: UUID
    file_url: str
    status_code: str
    count_method: str


@dataclass(frozen=True, slots=True)
class BulkImportResult:
    """Accepted row count; rows the store rejects are not reported individually."""

    submitted: int
    imported: int


@dataclass(frozen=True, slots=True)
class CarryForwardResult:
    from_year: int
    to_year: int
    stocktake_id: UUID
    carried: int
