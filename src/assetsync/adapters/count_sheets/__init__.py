"""Bulk count sheet adapter."""

from __future__ import annotations

from .parser import HEADER_ALIASES, normalize_header, parse_count_sheet
from .schema import CountSheetRow

__all__ = ["HEADER_ALIASES", "CountSheetRow", "normalize_header", "parse_count_sheet"]
