"""Registry merge phase of a feed import run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from assetsync.domain.feed_import.results import RegistrySyncResult
    from assetsync.domain.ports.stores import RegistryStore

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RegistrySync:
    """Merge the latest feed snapshots into the canonical registry.

    Failures propagate unchanged; a failed merge is a failed sync phase.
    """

    registry: RegistryStore
    deactivate_missing: bool = False

    def run(self) -> RegistrySyncResult:
        result = self.registry.merge(deactivate_missing=self.deactivate_missing)
        log.info(
            "Registry merge: source_active=%s, inserted=%s, updated=%s, deactivated=%s, "
            "active_total=%s",
            result.source_active_rows,
            result.inserted,
            result.updated,
            result.deactivated,
            result.active_total,
        )
        return result
