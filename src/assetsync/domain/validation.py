"""Input coercion shared by the stocktake and evidence entry points."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Final, Protocol
from uuid import UUID

from .errors import ValidationError

MIN_YEAR: Final[int] = 2000
MAX_YEAR: Final[int] = 2600
NOTE_MAX_LENGTH: Final[int] = 1000


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_uuid(value: object, *, field: str) -> UUID:
    """Return ``value`` as a UUID or raise a ``ValidationError`` naming ``field``."""

    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value if value is not None else "").strip())
    except ValueError as exc:
        raise ValidationError(f"{field} must be a UUID") from exc


def to_year(value: object, *, clock: Clock = utcnow) -> int:
    """Parse an audit year; unusable values fall back to the current UTC year."""

    try:
        year = int(str(value if value is not None else "").strip())
    except ValueError:
        return clock().year
    if year < MIN_YEAR or year > MAX_YEAR:
        return clock().year
    return year


def to_text(value: object, max_length: int = NOTE_MAX_LENGTH) -> str | None:
    """Trim ``value`` and cut it to ``max_length``; blank input becomes ``None``."""

    text = str(value if value is not None else "").strip()
    if not text:
        return None
    return text[:max_length]


def to_bool(value: object) -> bool:
    """Interpret form-style flags (``true``/``1``/``yes``) as booleans."""

    if isinstance(value, bool):
        return value
    return str(value if value is not None else "").strip().lower() in {"true", "1", "yes"}
