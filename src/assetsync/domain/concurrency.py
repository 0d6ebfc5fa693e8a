"""Process-local mutual exclusion for recurring operations."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class SingleFlight:
    """Allow at most one execution at a time; late arrivals are turned away, not queued.

    The guard is scoped to the object that owns it and does not coordinate
    separate processes.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def claim(self) -> Iterator[bool]:
        """Yield ``True`` when the caller now owns the flight, ``False`` when it is taken."""

        acquired = self._lock.acquire(blocking=False)
        try:
            yield acquired
        finally:
            if acquired:
                self._lock.release()
