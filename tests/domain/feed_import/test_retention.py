from __future__ import annotations

import pytest

from assetsync.domain.feed_import import DEFAULT_MAX_ROUNDS, StagingRetentionSweeper
from tests.helpers.fakes import FakeStagingStore


def test_sweep_stops_on_short_round_and_sums_deletions() -> None:
    staging = FakeStagingStore(purge_counts=[10, 10, 4, 10])
    sweeper = StagingRetentionSweeper(staging=staging, retain_days=7, batch_size=10)

    result = sweeper.sweep()

    assert result.ok is True
    assert result.rounds == 3
    assert result.deleted_rows == 24
    assert staging.purge_calls == [(7, 10)] * 3


def test_sweep_never_exceeds_round_cap() -> None:
    staging = FakeStagingStore(purge_counts=[5] * 50)
    sweeper = StagingRetentionSweeper(staging=staging, retain_days=3, batch_size=5, max_rounds=4)

    result = sweeper.sweep()

    assert result.rounds == 4
    assert len(staging.purge_calls) == 4
    assert result.deleted_rows == 20


def test_sweep_reports_failures_without_raising() -> None:
    staging = FakeStagingStore(purge_counts=[3], purge_error=RuntimeError("lock timeout"))
    sweeper = StagingRetentionSweeper(staging=staging, retain_days=3, batch_size=50)

    result = sweeper.sweep()

    assert result.ok is False
    assert result.message == "lock timeout"
    assert result.rounds == 1
    assert result.deleted_rows == 0


def test_sweeper_round_cap_defaults() -> None:
    sweeper = StagingRetentionSweeper(staging=FakeStagingStore(), retain_days=3, batch_size=50)

    assert sweeper.max_rounds == DEFAULT_MAX_ROUNDS


@pytest.mark.parametrize(
    ("retain_days", "batch_size", "max_rounds"),
    [(0, 10, 5), (3, -1, 5), (3, 10, 0)],
)
def test_sweeper_rejects_non_positive_parameters(
    retain_days: int, batch_size: int, max_rounds: int
) -> None:
    with pytest.raises(ValueError, match="must be positive"):
        StagingRetentionSweeper(
            staging=FakeStagingStore(),
            retain_days=retain_days,
            batch_size=batch_size,
            max_rounds=max_rounds,
        )
