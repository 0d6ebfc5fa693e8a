"""Evidence file store providers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from assetsync.config.errors import ConfigurationError

from .local import PROVIDER_NAME as LOCAL_PROVIDER
from .local import LocalFileStore

if TYPE_CHECKING:
    from assetsync.config.images import ImageStorageConfig
    from assetsync.domain.ports.files import FileStore


def build_file_store(config: ImageStorageConfig) -> FileStore:
    """Return the file store selected by ``config.provider``."""

    if config.provider == LOCAL_PROVIDER:
        return LocalFileStore(root_dir=config.root_dir, public_base=config.public_base)
    raise ConfigurationError(f"Unsupported IMAGE_STORAGE_PROVIDER: {config.provider}")


__all__ = ["LocalFileStore", "build_file_store"]
