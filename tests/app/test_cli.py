from __future__ import annotations

import json
from pathlib import Path  # noqa: TC003
from uuid import uuid4

import pytest

from assetsync.adapters.count_sheets import parse_count_sheet
from assetsync.domain.assets import AssetImageService
from assetsync.domain.feed_import import (
    FileImportOutcome,
    ImportRunSummary,
    PurgeResult,
    RegistrySyncResult,
    SyncSkipped,
)
from assetsync.domain.stocktake import StocktakeService
from assetsync.ui import cli as cli_module
from tests.helpers.fakes import (
    FakeFileStore,
    FakeRegistryStore,
    FakeStocktakeStore,
    FixedClock,
)

PLANT = str(uuid4())
USER = str(uuid4())


@pytest.fixture
def stocktake_store(monkeypatch: pytest.MonkeyPatch, clock: FixedClock) -> FakeStocktakeStore:
    store = FakeStocktakeStore(known_assets={"100001"})
    service = StocktakeService(
        store=store, files=FakeFileStore(), parse_sheet=parse_count_sheet, clock=clock
    )
    monkeypatch.setattr(cli_module, "build_stocktake_service", lambda: service)
    return store


def _summary(*, ok: bool) -> ImportRunSummary:
    return ImportRunSummary(
        results=(FileImportOutcome(ok=ok, file="ZFI_ASSET.txt", row_count=3 if ok else 0),),
        sync=RegistrySyncResult(source_active_rows=3, inserted=3) if ok else SyncSkipped("none"),
        purge=PurgeResult(ok=True, retain_days=3, batch_size=50_000, rounds=1),
    )


def _output(capsys: pytest.CaptureFixture[str]) -> object:
    return json.loads(capsys.readouterr().out)


def test_import_now_prints_run_summary(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli_module, "run_feed_import", lambda: _summary(ok=True))

    cli_module.main(["import-now"])

    payload = _output(capsys)
    assert isinstance(payload, dict)
    assert payload["success_count"] == 1
    assert payload["sync"]["inserted"] == 3


@pytest.mark.parametrize("summary", [None, _summary(ok=False)])
def test_import_now_exits_non_zero_without_ingested_files(
    monkeypatch: pytest.MonkeyPatch, summary: ImportRunSummary | None
) -> None:
    monkeypatch.setattr(cli_module, "run_feed_import", lambda: summary)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import-now"])

    assert excinfo.value.code == 1


def test_unexpected_failure_exits_with_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(**_: object) -> list[object]:
        raise RuntimeError("database locked")

    monkeypatch.setattr(cli_module, "list_staging_batches", broken)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["staging-batches", "--limit", "2"])

    assert excinfo.value.code == 1


def test_stocktake_open_then_status(
    stocktake_store: FakeStocktakeStore, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_module.main(["stocktake", "status", "--plant-id", PLANT, "--year", "2026"])
    before = _output(capsys)

    cli_module.main(
        ["stocktake", "open", "--plant-id", PLANT, "--year", "2026", "--user-id", USER]
    )
    opened = _output(capsys)

    cli_module.main(["stocktake", "status", "--plant-id", PLANT, "--year", "2026"])
    after = _output(capsys)

    assert before == {"state": "not_started", "year_config": None}
    assert isinstance(opened, dict)
    assert opened["stocktake_id"] == str(next(iter(stocktake_store.stocktakes.values())))
    assert isinstance(after, dict)
    assert after["state"] == "open"
    assert after["year_config"]["year"] == 2026


def test_stocktake_scan_rejects_invalid_ids(
    stocktake_store: FakeStocktakeStore, tmp_path: Path
) -> None:
    image = tmp_path / "scan.jpg"
    image.write_bytes(b"jpeg")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            [
                "stocktake",
                "scan",
                "--stocktake-id",
                "not-a-uuid",
                "--asset-id",
                str(uuid4()),
                "--user-id",
                USER,
                "--image",
                str(image),
            ]
        )

    assert excinfo.value.code == 2
    assert stocktake_store.items == {}


def test_stocktake_scan_with_unreadable_image_is_invalid_input(
    stocktake_store: FakeStocktakeStore, tmp_path: Path
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            [
                "stocktake",
                "scan",
                "--stocktake-id",
                str(uuid4()),
                "--asset-id",
                str(uuid4()),
                "--user-id",
                USER,
                "--image",
                str(tmp_path / "missing.jpg"),
            ]
        )

    assert excinfo.value.code == 2
    assert stocktake_store.items == {}


def test_stocktake_scan_prints_canonical_status(
    stocktake_store: FakeStocktakeStore, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    image = tmp_path / "scan.png"
    image.write_bytes(b"png")

    cli_module.main(
        [
            "stocktake",
            "scan",
            "--stocktake-id",
            str(uuid4()),
            "--asset-id",
            str(uuid4()),
            "--user-id",
            USER,
            "--status",
            "missing",
            "--method",
            "qr code",
            "--image",
            str(image),
        ]
    )

    payload = _output(capsys)
    assert isinstance(payload, dict)
    assert payload["status_code"] == "NOT_COUNTED"
    assert payload["count_method"] == "QR_CODE"
    assert len(stocktake_store.images) == 1


def test_stocktake_import_reads_count_sheet(
    stocktake_store: FakeStocktakeStore, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    sheet = tmp_path / "counts.csv"
    sheet.write_text("AssetNo,Status\n100001,ok\n999999,lost\n", encoding="utf-8")

    cli_module.main(
        ["stocktake", "import", "--stocktake-id", str(uuid4()), "--user-id", USER, str(sheet)]
    )

    assert _output(capsys) == {"submitted": 2, "imported": 1}
    assert [row.asset_no for row in stocktake_store.imported] == ["100001", "999999"]


def test_stocktake_report_detail_passes_filters(
    stocktake_store: FakeStocktakeStore, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_module.main(
        [
            "stocktake",
            "report",
            "--plant-id",
            PLANT,
            "--year",
            "2026",
            "--kind",
            "detail",
            "--status",
            "lost",
            "--search",
            "rack",
        ]
    )

    assert _output(capsys) == []
    name, kwargs = stocktake_store.calls[-1]
    assert name == "detail"
    assert kwargs["status_code"] == "NOT_COUNTED"
    assert kwargs["search"] == "rack"


def test_asset_attach_image(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    registry = FakeRegistryStore()
    service = AssetImageService(registry=registry, files=FakeFileStore())
    monkeypatch.setattr(cli_module, "build_asset_image_service", lambda: service)
    image = tmp_path / "front.jpg"
    image.write_bytes(b"jpeg")
    asset_id = str(uuid4())

    cli_module.main(
        ["asset", "attach-image", "--asset-id", asset_id, "--image", str(image), "--primary"]
    )

    payload = _output(capsys)
    assert isinstance(payload, dict)
    assert payload["asset_id"] == asset_id
    assert payload["is_primary"] is True
    assert registry.images[0][2] is True
