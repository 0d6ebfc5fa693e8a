"""Public domain model surface."""

from __future__ import annotations

from assetsync.domain.model.base import Entity, new_id
from assetsync.domain.model.enums import CountMethod, StatusCode, StocktakeState
from assetsync.domain.model.registry import AssetImage, AssetRecord, Plant
from assetsync.domain.model.staging import FeedSnapshotRow, ImportBatch, StagingRecord
from assetsync.domain.model.stocktake import (
    Stocktake,
    StocktakeItem,
    StocktakeItemImage,
    StocktakeYearConfig,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    # registry
    "Plant",
    "AssetRecord",
    "AssetImage",
    # staging
    "ImportBatch",
    "StagingRecord",
    "FeedSnapshotRow",
    # stocktake
    "StocktakeYearConfig",
    "Stocktake",
    "StocktakeItem",
    "StocktakeItemImage",
    # enums
    "CountMethod",
    "StatusCode",
    "StocktakeState",
]
