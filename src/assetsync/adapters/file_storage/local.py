"""Evidence file store on the local filesystem."""

from __future__ import annotations

import logging
import re
import secrets
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePath
from typing import TYPE_CHECKING, Final

from assetsync.domain.errors import ValidationError
from assetsync.domain.ports.files import StoredFile
from assetsync.domain.validation import utcnow

if TYPE_CHECKING:
    from collections.abc import Callable

PROVIDER_NAME: Final[str] = "local"
MAX_EXTENSION_LENGTH: Final[int] = 10
FALLBACK_EXTENSION: Final[str] = ".bin"
MIME_EXTENSIONS: Final[dict[str, str]] = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "image/bmp": ".bmp",
}

_UNSAFE_CHARS = re.compile(r"[^a-z0-9._-]")
_DASH_RUNS = re.compile(r"-+")

log = logging.getLogger(__name__)


def safe_name_part(value: object, fallback: str = "file") -> str:
    """Lowercase ``value`` and keep only characters safe in a file name."""

    text = _UNSAFE_CHARS.sub("-", str(value if value is not None else "").lower())
    text = _DASH_RUNS.sub("-", text).strip("-")
    return text or fallback


def detect_extension(original_name: str | None, mime_type: str | None) -> str:
    suffix = PurePath(original_name or "").suffix.strip()
    if suffix and len(suffix) <= MAX_EXTENSION_LENGTH:
        return suffix.lower()
    return MIME_EXTENSIONS.get((mime_type or "").strip().lower(), FALLBACK_EXTENSION)


@dataclass(slots=True)
class LocalFileStore:
    """Write files under ``root_dir/<yyyy>/<mm>/`` and address them below ``public_base``."""

    root_dir: Path
    public_base: str = "/files/assets"
    clock: Callable[[], datetime] = utcnow

    def save(
        self,
        *,
        owner_id: str,
        original_name: str | None,
        mime_type: str | None,
        content: bytes,
    ) -> StoredFile:
        if not content:
            raise ValidationError("Image file is empty")

        now = self.clock()
        year, month = f"{now.year:04d}", f"{now.month:02d}"
        file_name = (
            f"{safe_name_part(owner_id, 'asset')}-{int(now.timestamp() * 1000)}-"
            f"{secrets.token_hex(4)}{detect_extension(original_name, mime_type)}"
        )
        directory = self.root_dir / year / month
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / file_name
        path.write_bytes(content)
        log.debug("Stored %s bytes at %s", len(content), path)

        def cleanup() -> None:
            path.unlink(missing_ok=True)

        return StoredFile(
            provider=PROVIDER_NAME,
            file_url="/".join(part for part in (self.public_base, year, month, file_name) if part),
            path=path,
            cleanup=cleanup,
        )

    def resolve(self, file_url: str) -> Path | None:
        prefix = f"{self.public_base}/" if self.public_base else ""
        if not file_url.startswith(prefix):
            return None
        relative = PurePath(file_url[len(prefix) :])
        if relative.is_absolute() or ".." in relative.parts:
            return None
        candidate = self.root_dir / relative
        return candidate if candidate.is_file() else None
