"""Image storage configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

from .env import env_str
from .storage import get_data_paths

if TYPE_CHECKING:
    from .storage import DataPaths

DEFAULT_IMAGE_PROVIDER: Final[str] = "local"
DEFAULT_PUBLIC_BASE: Final[str] = "/files/assets"


@dataclass(frozen=True, slots=True)
class ImageStorageConfig:
    provider: str
    root_dir: Path
    public_base: str = DEFAULT_PUBLIC_BASE


def normalize_public_base(value: str) -> str:
    """Return ``value`` with exactly one leading slash and no trailing slash."""

    trimmed = value.strip().strip("/")
    return f"/{trimmed}" if trimmed else ""


def get_image_storage_config(*, paths: DataPaths | None = None) -> ImageStorageConfig:
    env_dir = os.getenv("IMAGE_STORAGE_DIR")
    if env_dir and env_dir.strip():
        root_dir = Path(env_dir.strip())
    else:
        root_dir = (paths or get_data_paths()).images_dir
    return ImageStorageConfig(
        provider=env_str("IMAGE_STORAGE_PROVIDER", DEFAULT_IMAGE_PROVIDER).lower(),
        root_dir=root_dir,
        public_base=normalize_public_base(env_str("IMAGE_PUBLIC_BASE", DEFAULT_PUBLIC_BASE)),
    )
