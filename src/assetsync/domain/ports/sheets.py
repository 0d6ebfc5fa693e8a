"""Port for parsing uploaded count sheets."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from assetsync.domain.ports.files import Upload
    from assetsync.domain.stocktake.dto import CountImportRow


@runtime_checkable
class CountSheetParser(Protocol):
    """Turn a spreadsheet or CSV upload into normalized count rows.

    Implementations raise ``ValidationError`` for empty or unsupported files.
    """

    def __call__(self, upload: Upload) -> list[CountImportRow]: ...
