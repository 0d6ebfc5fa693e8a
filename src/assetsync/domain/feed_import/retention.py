"""Bounded deletion of aged staging rows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from assetsync.domain.feed_import.results import PurgeResult

if TYPE_CHECKING:
    from assetsync.domain.ports.stores import StagingStore

DEFAULT_MAX_ROUNDS: Final[int] = 100

log = logging.getLogger(__name__)


@dataclass(slots=True)
class StagingRetentionSweeper:
    """Delete staging rows older than the retention window, one bounded round at a time.

    Rounds continue until one deletes fewer rows than ``batch_size`` or
    ``max_rounds`` is reached. A failing delete is reported, never raised:
    staging growth must not fail an otherwise successful import.
    """

    staging: StagingStore
    retain_days: int
    batch_size: int
    max_rounds: int = DEFAULT_MAX_ROUNDS

    def __post_init__(self) -> None:
        for name in ("retain_days", "batch_size", "max_rounds"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")

    def sweep(self) -> PurgeResult:
        rounds = 0
        deleted_total = 0
        try:
            for _ in range(self.max_rounds):
                rounds += 1
                deleted = self.staging.purge(
                    retain_days=self.retain_days,
                    batch_size=self.batch_size,
                )
                deleted_total += max(deleted, 0)
                if deleted < self.batch_size:
                    break
            else:
                log.warning("Staging purge stopped at the %s round cap", self.max_rounds)
        except Exception as exc:  # noqa: BLE001
            log.warning("Staging purge failed after %s rounds: %s", rounds, exc)
            return PurgeResult(
                ok=False,
                retain_days=self.retain_days,
                batch_size=self.batch_size,
                rounds=rounds,
                deleted_rows=deleted_total,
                message=str(exc) or repr(exc),
            )

        return PurgeResult(
            ok=True,
            retain_days=self.retain_days,
            batch_size=self.batch_size,
            rounds=rounds,
            deleted_rows=deleted_total,
        )
