"""Store-then-reference sequencing for evidence files.

The file store and the relational store cannot commit together. Files are
therefore written first and referenced second; when the reference cannot be
written the file is removed again. A failure can leave an orphaned file
behind but never a row pointing at a file that does not exist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from assetsync.domain.errors import ValidationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from assetsync.domain.ports.files import FileStore, StoredFile, Upload

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CompensatableAction[T]:
    """A completed-or-failed step paired with the undo for its result."""

    action: Callable[[], T]
    compensate: Callable[[T], None]


def run_compensated[T, R](step: CompensatableAction[T], then: Callable[[T], R]) -> R:
    """Run ``step``, then ``then`` with its result; undo ``step`` if ``then`` fails.

    The error raised by ``then`` is re-raised unchanged. A failing compensation
    is logged and dropped so it cannot mask that error.
    """

    completed = step.action()
    try:
        return then(completed)
    except Exception:
        try:
            step.compensate(completed)
        except Exception:  # noqa: BLE001
            log.warning("Compensation failed; leaving %r behind", completed, exc_info=True)
        raise


def store_file(
    files: FileStore, upload: Upload, *, owner_id: str
) -> CompensatableAction[StoredFile]:
    """Describe saving ``upload`` to ``files`` with its cleanup as compensation."""

    def save() -> StoredFile:
        return files.save(
            owner_id=owner_id,
            original_name=upload.original_name,
            mime_type=upload.mime_type,
            content=upload.content,
        )

    def cleanup(stored: StoredFile) -> None:
        stored.cleanup()

    return CompensatableAction(action=save, compensate=cleanup)


def attach_with_evidence[R](
    files: FileStore,
    upload: Upload | None,
    *,
    owner_id: str,
    write: Callable[[StoredFile], R],
) -> R:
    """Persist ``upload`` and run ``write`` against it as one compensated unit."""

    if upload is None or not upload.content:
        raise ValidationError("Image file is empty")
    return run_compensated(store_file(files, upload, owner_id=owner_id), write)
