"""Translate feed rows into snapshot values and registry fields."""

from __future__ import annotations

from datetime import date, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError as PydanticValidationError

from .schema import FeedAssetRow

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

log = getLogger(__name__)

ASSET_COLUMNS: Final[frozenset[str]] = frozenset({"Asset", "AssetNo"})
DATE_FORMATS: Final[tuple[str, ...]] = ("%d.%m.%Y", "%Y-%m-%d", "%Y%m%d", "%d/%m/%Y")


class FeedFormatError(ValueError):
    """Raised when a feed file lacks the columns needed to identify assets."""


def parse_feed_rows(rows: Iterable[Mapping[str, str]]) -> dict[str, FeedAssetRow]:
    """Validate ``rows`` and keep the last row per business key.

    Rows without an asset number are skipped. A file whose header has no asset
    column at all is rejected.
    """

    latest: dict[str, FeedAssetRow] = {}
    checked_header = False
    for row in rows:
        if not checked_header:
            if not ASSET_COLUMNS.intersection(row):
                raise FeedFormatError("Feed file has no Asset column")
            checked_header = True
        try:
            parsed = FeedAssetRow.model_validate(row)
        except PydanticValidationError:
            log.debug("Skipping unparsable feed row: %s", row)
            continue
        key = parsed.business_key
        if key is None:
            continue
        latest[key] = parsed
    return latest


def parse_feed_date(value: str | None) -> date | None:
    """Parse the date notations seen in the feed; unknown notations yield ``None``."""

    if value is None:
        return None
    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)  # noqa: DTZ007
        except ValueError:
            continue
        return parsed.date()
    return None
