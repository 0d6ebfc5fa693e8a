"""Yearly per-plant stocktake workflow."""

from __future__ import annotations

from assetsync.domain.stocktake.dto import (
    BulkImportResult,
    CarryForwardResult,
    CountImportRow,
    ScanRequest,
    ScanResult,
)
from assetsync.domain.stocktake.reports import StocktakeDetailRow, StocktakeExport, StocktakeSummary
from assetsync.domain.stocktake.service import StocktakeService

__all__ = [
    "BulkImportResult",
    "CarryForwardResult",
    "CountImportRow",
    "ScanRequest",
    "ScanResult",
    "StocktakeDetailRow",
    "StocktakeExport",
    "StocktakeService",
    "StocktakeSummary",
]
