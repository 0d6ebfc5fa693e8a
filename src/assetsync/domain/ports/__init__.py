"""Domain port definitions for adapters."""

from __future__ import annotations

from .feeds import FeedReader, FeedRow
from .files import FileStore, StoredFile, Upload
from .sheets import CountSheetParser
from .stores import RegistryStore, StagingStore, StocktakeStore

__all__ = [
    "CountSheetParser",
    "FeedReader",
    "FeedRow",
    "FileStore",
    "RegistryStore",
    "StagingStore",
    "StocktakeStore",
    "StoredFile",
    "Upload",
]
