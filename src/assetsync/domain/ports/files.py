"""Ports for the evidence file store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@dataclass(frozen=True, slots=True)
class Upload:
    """Binary content received from a caller, with its client-side metadata."""

    content: bytes
    original_name: str | None = None
    mime_type: str | None = None


@dataclass(frozen=True, slots=True)
class StoredFile:
    """A durably written file and the capability to remove it again."""

    provider: str
    file_url: str
    path: Path
    cleanup: Callable[[], None]


@runtime_checkable
class FileStore(Protocol):
    """Durable storage for uploaded evidence."""

    def save(
        self,
        *,
        owner_id: str,
        original_name: str | None,
        mime_type: str | None,
        content: bytes,
    ) -> StoredFile:
        """Write ``content`` fully before returning a stable reference."""
        ...

    def resolve(self, file_url: str) -> Path | None:
        """Return the location behind ``file_url`` if the file still exists."""
        ...
