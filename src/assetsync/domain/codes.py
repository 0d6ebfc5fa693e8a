"""Canonical status and count-method codes for stocktake input.

Free text from scanners, spreadsheets and forms is folded onto a small preferred
vocabulary. The vocabulary is open: a token that is not a known alias passes
through in its normalized form, so new codes can be recorded before the alias
tables learn about them. Nothing in this module raises.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from assetsync.domain.model.enums import CountMethod, StatusCode

if TYPE_CHECKING:
    from collections.abc import Mapping

_SEPARATORS = re.compile(r"[\s-]+")

STATUS_ALIASES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "COUNTED": StatusCode.COUNTED,
        "NORMAL": StatusCode.COUNTED,
        "ACTIVE": StatusCode.COUNTED,
        "OK": StatusCode.COUNTED,
        "NOT_COUNTED": StatusCode.NOT_COUNTED,
        "NOTFOUND": StatusCode.NOT_COUNTED,
        "NOT_FOUND": StatusCode.NOT_COUNTED,
        "LOST": StatusCode.NOT_COUNTED,
        "MISSING": StatusCode.NOT_COUNTED,
        "DAMAGED": StatusCode.OTHER,
        "BROKEN": StatusCode.OTHER,
        "DEFECTIVE": StatusCode.OTHER,
        "OTHER": StatusCode.OTHER,
        "PENDING": StatusCode.PENDING,
        "PENDING_DEMOLISH": StatusCode.PENDING,
        "WAITING_DEMOLISH": StatusCode.PENDING,
        "REJECTED": StatusCode.REJECTED,
    }
)

COUNT_METHOD_ALIASES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "QR": CountMethod.QR,
        "QRCODE": CountMethod.QR,
        "MANUAL": CountMethod.MANUAL,
        "MOBILE": CountMethod.MANUAL,
        "EXCEL": CountMethod.EXCEL,
        "BARCODE": CountMethod.BARCODE,
        "BAR_CODE": CountMethod.BARCODE,
        "BC": CountMethod.BARCODE,
    }
)


def normalize_code(value: object) -> str:
    """Uppercase, trim and join words with underscores."""

    text = str(value if value is not None else "").strip().upper()
    return _SEPARATORS.sub("_", text)


def _lookup(value: object, aliases: Mapping[str, str], default: str) -> str:
    key = normalize_code(value)
    if not key:
        return str(default)
    return str(aliases.get(key, key))


def to_status_code(value: object) -> str:
    """Map a free-text status onto the preferred vocabulary (default ``COUNTED``)."""

    return _lookup(value, STATUS_ALIASES, StatusCode.COUNTED)


def to_count_method(value: object) -> str:
    """Map a free-text count method onto the preferred vocabulary (default ``MANUAL``)."""

    return _lookup(value, COUNT_METHOD_ALIASES, CountMethod.MANUAL)
