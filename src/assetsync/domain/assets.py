"""Manual photo uploads for registry assets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from assetsync.domain.evidence import attach_with_evidence
from assetsync.domain.validation import parse_uuid, to_bool

if TYPE_CHECKING:
    from uuid import UUID

    from assetsync.domain.ports.files import FileStore, StoredFile, Upload
    from assetsync.domain.ports.stores import RegistryStore


@dataclass(frozen=True, slots=True)
class AssetImageResult:
    asset_id: UUID
    image_id: UUID
    file_url: str
    is_primary: bool


@dataclass(slots=True)
class AssetImageService:
    registry: RegistryStore
    files: FileStore

    def attach(
        self,
        *,
        asset_id: object,
        image: Upload | None,
        is_primary: object = False,
    ) -> AssetImageResult:
        """Store ``image`` and register it on the asset, removing the file on failure."""

        resolved_asset_id = parse_uuid(asset_id, field="assetId")
        primary = to_bool(is_primary)

        def register(stored: StoredFile) -> AssetImageResult:
            image_id = self.registry.add_image(
                asset_id=resolved_asset_id,
                file_url=stored.file_url,
                is_primary=primary,
            )
            return AssetImageResult(
                asset_id=resolved_asset_id,
                image_id=image_id,
                file_url=stored.file_url,
                is_primary=primary,
            )

        return attach_with_evidence(
            self.files,
            image,
            owner_id=str(resolved_asset_id),
            write=register,
        )
