"""SQLAlchemy adapter package for assetsync."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    AssetSyncRepositories,
    SqlAlchemyAssetRepository,
    SqlAlchemyStagingRepository,
    SqlAlchemyStocktakeRepository,
)
from .stores import SqlAlchemyRegistryStore, SqlAlchemyStagingStore, SqlAlchemyStocktakeStore
from .unit_of_work import SqlAlchemyUnitOfWork, shutdown, startup

__all__ = [
    "AssetSyncRepositories",
    "SqlAlchemyAssetRepository",
    "SqlAlchemyRegistryStore",
    "SqlAlchemyStagingRepository",
    "SqlAlchemyStagingStore",
    "SqlAlchemyStocktakeRepository",
    "SqlAlchemyStocktakeStore",
    "SqlAlchemyUnitOfWork",
    "create_all_tables",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
