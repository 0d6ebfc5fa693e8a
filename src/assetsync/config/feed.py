"""Feed import and scheduling configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_bool, env_positive_int, env_str, require_env_vars, split_list
from .errors import MissingConfigurationError

DEFAULT_RETAIN_DAYS: Final[int] = 3
DEFAULT_PURGE_BATCH_SIZE: Final[int] = 50_000
MAX_PURGE_BATCH_SIZE: Final[int] = 100_000
DEFAULT_IMPORT_CRON: Final[str] = "0 2 * * *"
DEFAULT_IMPORT_TIMEZONE: Final[str] = "Asia/Bangkok"


@dataclass(frozen=True, slots=True)
class FeedImportConfig:
    """Where the feed files live and how staging is maintained after a run."""

    drop_dir: Path
    files: tuple[str, ...]
    retain_days: int = DEFAULT_RETAIN_DAYS
    purge_batch_size: int = DEFAULT_PURGE_BATCH_SIZE
    deactivate_missing: bool = False


@dataclass(frozen=True, slots=True)
class FeedScheduleConfig:
    enabled: bool = False
    cron: str = DEFAULT_IMPORT_CRON
    timezone: str = DEFAULT_IMPORT_TIMEZONE


def get_feed_import_config() -> FeedImportConfig:
    values = require_env_vars(("FEED_DROP_DIR", "FEED_FILES"))
    files = split_list(values["FEED_FILES"])
    if not files:
        raise MissingConfigurationError("Missing configuration for: FEED_FILES")
    return FeedImportConfig(
        drop_dir=Path(values["FEED_DROP_DIR"]),
        files=files,
        retain_days=env_positive_int("FEED_STAGING_RETENTION_DAYS", DEFAULT_RETAIN_DAYS),
        purge_batch_size=min(
            env_positive_int("FEED_STAGING_PURGE_BATCH_SIZE", DEFAULT_PURGE_BATCH_SIZE),
            MAX_PURGE_BATCH_SIZE,
        ),
        deactivate_missing=env_bool("FEED_DEACTIVATE_MISSING"),
    )


def get_feed_schedule_config() -> FeedScheduleConfig:
    return FeedScheduleConfig(
        enabled=env_bool("FEED_IMPORT_ENABLED"),
        cron=env_str("FEED_IMPORT_CRON", DEFAULT_IMPORT_CRON),
        timezone=env_str("FEED_IMPORT_TIMEZONE", DEFAULT_IMPORT_TIMEZONE),
    )
