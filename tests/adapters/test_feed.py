from __future__ import annotations

from datetime import date
from pathlib import Path  # noqa: TC003

import pytest

from assetsync.adapters.feed import (
    FeedAssetRow,
    FeedFormatError,
    parse_feed_date,
    parse_feed_rows,
    read_feed_file,
)


def test_read_feed_file_keeps_quotes_and_pads_short_rows(tmp_path: Path) -> None:
    feed = tmp_path / "ZFI_ASSET.txt"
    feed.write_text(
        "Asset | Subnumber|Asset description|Plant|\n"
        '100001|0|"Forklift" 2.5t|P100|ignored\n'
        "\n"
        "100002|0|Pallet rack\n"
        "100003|1|Desk|P200|x|surplus\n",
        encoding="utf-8-sig",
    )

    rows = read_feed_file(feed)

    assert rows == [
        {
            "Asset": "100001",
            "Subnumber": "0",
            "Asset description": '"Forklift" 2.5t',
            "Plant": "P100",
        },
        {"Asset": "100002", "Subnumber": "0", "Asset description": "Pallet rack", "Plant": ""},
        {"Asset": "100003", "Subnumber": "1", "Asset description": "Desk", "Plant": "P200"},
    ]


def test_read_feed_file_without_data_rows(tmp_path: Path) -> None:
    feed = tmp_path / "empty.txt"
    feed.write_text("Asset|Subnumber\n\n", encoding="utf-8")

    assert read_feed_file(feed) == []


@pytest.mark.parametrize(
    ("asset", "sub", "expected"),
    [
        ("100001", "0", "100001"),
        ("100001", "0000", "100001"),
        ("100001", "", "100001"),
        ("100001", "0002", "100001-2"),
        ("100001", "10", "100001-10"),
    ],
)
def test_business_key_appends_non_zero_subnumber(asset: str, sub: str, expected: str) -> None:
    row = FeedAssetRow.model_validate({"Asset": asset, "Subnumber": sub})

    assert row.business_key == expected


def test_feed_row_accepts_alternate_headers() -> None:
    row = FeedAssetRow.model_validate(
        {"AssetNo": " 200001 ", "SNo.": "1", "Description": "Laptop", "Unknown": "x"}
    )

    assert row.asset_no == "200001"
    assert row.business_key == "200001-1"
    assert row.description == "Laptop"


@pytest.mark.parametrize(
    ("deactivated_on", "active"),
    [("", True), ("00.00.0000", True), ("00000000", True), ("31.12.2025", False)],
)
def test_source_activity_follows_deactivation_date(
    deactivated_on: str,
    active: bool,  # noqa: FBT001
) -> None:
    row = FeedAssetRow.model_validate({"Asset": "1", "Deactivation on": deactivated_on})

    assert row.is_source_active is active


def test_parse_feed_rows_keeps_last_row_per_key() -> None:
    parsed = parse_feed_rows(
        [
            {"Asset": "100001", "Subnumber": "0", "Asset description": "Old"},
            {"Asset": "", "Subnumber": "0", "Asset description": "No key"},
            {"Asset": "100001", "Subnumber": "0", "Asset description": "New"},
        ]
    )

    assert list(parsed) == ["100001"]
    assert parsed["100001"].description == "New"


def test_parse_feed_rows_rejects_files_without_asset_column() -> None:
    with pytest.raises(FeedFormatError):
        parse_feed_rows([{"Equipment": "E-1"}])


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("01.02.2020", date(2020, 2, 1)),
        ("2020-02-01", date(2020, 2, 1)),
        ("20200201", date(2020, 2, 1)),
        ("01/02/2020", date(2020, 2, 1)),
        ("00.00.0000", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_feed_date(value: str | None, expected: date | None) -> None:
    assert parse_feed_date(value) == expected
