"""Read pipe-delimited fixed-asset feed files."""

from __future__ import annotations

import csv
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from pathlib import Path

    from assetsync.domain.ports.feeds import FeedRow

FEED_DELIMITER: Final[str] = "|"
FEED_ENCODING: Final[str] = "utf-8-sig"


def read_feed_file(path: Path) -> list[FeedRow]:
    """Return the rows of ``path`` keyed by its header line.

    Quoting is disabled: quote characters are part of the cell text. Cells and
    headers are trimmed, blank lines are skipped, missing trailing cells read
    as empty strings and surplus cells are dropped.
    """

    with path.open("r", encoding=FEED_ENCODING, newline="") as handle:
        reader = csv.reader(handle, delimiter=FEED_DELIMITER, quoting=csv.QUOTE_NONE)
        headers: list[str] | None = None
        rows: list[FeedRow] = []
        for cells in reader:
            trimmed = [cell.strip() for cell in cells]
            if not any(trimmed):
                continue
            if headers is None:
                headers = trimmed
                continue
            row: FeedRow = {}
            for index, header in enumerate(headers):
                if not header:
                    continue
                row[header] = trimmed[index] if index < len(trimmed) else ""
            rows.append(row)
    return rows
