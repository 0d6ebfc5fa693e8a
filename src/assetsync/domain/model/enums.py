"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class StatusCode(StrEnum):
    """Preferred stocktake result codes; stored codes are not limited to these."""

    COUNTED = "COUNTED"
    NOT_COUNTED = "NOT_COUNTED"
    OTHER = "OTHER"
    PENDING = "PENDING"
    REJECTED = "REJECTED"


class CountMethod(StrEnum):
    """Preferred ways an asset was counted; stored methods are not limited to these."""

    QR = "QR"
    MANUAL = "MANUAL"
    EXCEL = "EXCEL"
    BARCODE = "BARCODE"


class StocktakeState(StrEnum):
    NOT_STARTED = "not_started"
    OPEN = "open"
    CLOSED = "closed"
