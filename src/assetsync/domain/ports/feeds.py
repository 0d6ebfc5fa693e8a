"""Ports for reading external feed files."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

type FeedRow = dict[str, str]


@runtime_checkable
class FeedReader(Protocol):
    """Callable port turning one feed file into header-keyed rows."""

    def __call__(self, path: Path) -> list[FeedRow]: ...
