"""Fixed-asset feed file adapter."""

from __future__ import annotations

from .reader import read_feed_file
from .schema import FeedAssetRow
from .translator import FeedFormatError, parse_feed_date, parse_feed_rows

__all__ = [
    "FeedAssetRow",
    "FeedFormatError",
    "parse_feed_date",
    "parse_feed_rows",
    "read_feed_file",
]
