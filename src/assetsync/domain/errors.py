"""Domain error taxonomy."""

from __future__ import annotations


class AssetSyncError(RuntimeError):
    """Base class for domain failures surfaced to callers."""


class ValidationError(AssetSyncError, ValueError):
    """Raised when input is rejected before any store is touched."""


class AssetNotFoundError(AssetSyncError):
    """Raised when a referenced asset does not exist in the registry."""


class StocktakeNotFoundError(AssetSyncError):
    """Raised when a stocktake or its year configuration does not exist."""


class StocktakeClosedError(AssetSyncError):
    """Raised when a write targets a stocktake year that is already closed."""


class StocktakeItemNotFoundError(AssetSyncError):
    """Raised when an image is attached to an unknown stocktake item."""
