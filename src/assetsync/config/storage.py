"""Location of the SQLite database and the default image directory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DATA_DIR_ENV: Final[str] = "ASSETSYNC_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DATABASE_FILENAME: Final[str] = "assetsync.db"
IMAGE_DIR_NAME: Final[str] = "images"


@dataclass(frozen=True, slots=True)
class DataPaths:
    """Everything assetsync writes locally lives below ``root``."""

    root: Path

    @property
    def database_file(self) -> Path:
        return self.root / DATABASE_FILENAME

    @property
    def images_dir(self) -> Path:
        return self.root / IMAGE_DIR_NAME

    def sqlite_uri(self) -> str:
        # SQLite creates the file but not its directory
        self.root.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{self.database_file}"


def get_data_paths() -> DataPaths:
    """Resolve ``ASSETSYNC_DATA_DIR``, falling back to ``$XDG_DATA_HOME/assetsync``."""

    configured = os.getenv(DATA_DIR_ENV, "").strip()
    if configured:
        return DataPaths(root=Path(configured).expanduser().resolve())
    xdg = os.getenv("XDG_DATA_HOME", "").strip()
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return DataPaths(root=(base / "assetsync").expanduser().resolve())


def get_database_uri(*, paths: DataPaths | None = None) -> str:
    configured = os.getenv(DATABASE_URI_ENV, "").strip()
    if configured:
        return configured
    return (paths or get_data_paths()).sqlite_uri()
