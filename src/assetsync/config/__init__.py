"""Application configuration helpers."""

from __future__ import annotations

from .env import env_bool, require_env_var, require_env_vars, split_list, to_positive_int
from .errors import ConfigurationError, MissingConfigurationError
from .feed import (
    MAX_PURGE_BATCH_SIZE,
    FeedImportConfig,
    FeedScheduleConfig,
    get_feed_import_config,
    get_feed_schedule_config,
)
from .images import ImageStorageConfig, get_image_storage_config
from .logging import configure_logging
from .storage import DataPaths, get_data_paths, get_database_uri

__all__ = [
    "MAX_PURGE_BATCH_SIZE",
    "ConfigurationError",
    "DataPaths",
    "FeedImportConfig",
    "FeedScheduleConfig",
    "ImageStorageConfig",
    "MissingConfigurationError",
    "configure_logging",
    "env_bool",
    "get_data_paths",
    "get_database_uri",
    "get_feed_import_config",
    "get_feed_schedule_config",
    "get_image_storage_config",
    "require_env_var",
    "require_env_vars",
    "split_list",
    "to_positive_int",
]
