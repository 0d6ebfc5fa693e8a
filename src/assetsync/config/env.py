"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence

_TRUTHY = frozenset({"true", "1", "yes"})


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = os.getenv(name)
        if value is None or not value.strip():
            missing.append(name)
            continue
        values[name] = value.strip()

    if missing:
        missing_list = ", ".join(sorted(missing))
        raise MissingConfigurationError(f"Missing configuration for: {missing_list}")

    return values


def require_env_var(name: str) -> str:
    """Return a required environment variable by name."""

    return require_env_vars([name])[name]


def env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def env_bool(name: str, default: bool = False) -> bool:  # noqa: FBT001, FBT002
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


def to_positive_int(value: object, default: int) -> int:
    """Parse ``value`` as a positive integer, falling back to ``default``."""

    try:
        number = int(str(value if value is not None else "").strip())
    except ValueError:
        return default
    return number if number > 0 else default


def env_positive_int(name: str, default: int) -> int:
    return to_positive_int(os.getenv(name), default)


def split_list(value: str | None) -> tuple[str, ...]:
    """Split a comma separated value into trimmed, non-empty parts."""

    return tuple(part.strip() for part in (value or "").split(",") if part.strip())
