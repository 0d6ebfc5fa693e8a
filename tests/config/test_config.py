from __future__ import annotations

from pathlib import Path

import pytest

from assetsync.config import (
    MAX_PURGE_BATCH_SIZE,
    MissingConfigurationError,
    env_bool,
    get_feed_import_config,
    get_feed_schedule_config,
    get_image_storage_config,
    require_env_var,
    require_env_vars,
    split_list,
    to_positive_int,
)
from assetsync.config.feed import DEFAULT_IMPORT_CRON, DEFAULT_IMPORT_TIMEZONE, DEFAULT_RETAIN_DAYS
from assetsync.config.images import normalize_public_base

FEED_VARS = (
    "FEED_DROP_DIR",
    "FEED_FILES",
    "FEED_STAGING_RETENTION_DAYS",
    "FEED_STAGING_PURGE_BATCH_SIZE",
    "FEED_DEACTIVATE_MISSING",
    "FEED_IMPORT_ENABLED",
    "FEED_IMPORT_CRON",
    "FEED_IMPORT_TIMEZONE",
)


@pytest.fixture
def clean_feed_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in FEED_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_require_env_vars_returns_trimmed_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  value ")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_A", raising=False)
    monkeypatch.setenv("MISSING_B", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("true", True), ("YES", True), ("1", True), ("false", False), ("on", False), ("", False)],
)
def test_env_bool(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
    expected: bool,  # noqa: FBT001
) -> None:
    monkeypatch.setenv("FLAG", raw)

    assert env_bool("FLAG") is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [("7", 7), (" 12 ", 12), ("0", 5), ("-3", 5), ("abc", 5), (None, 5)],
)
def test_to_positive_int(value: object, expected: int) -> None:
    assert to_positive_int(value, 5) == expected


def test_split_list() -> None:
    assert split_list(" a.txt, ,b.txt ,") == ("a.txt", "b.txt")
    assert split_list(None) == ()


def test_feed_import_config_requires_drop_dir_and_files(
    clean_feed_env: pytest.MonkeyPatch,
) -> None:
    clean_feed_env.setenv("FEED_DROP_DIR", "/srv/feed")

    with pytest.raises(MissingConfigurationError, match="FEED_FILES"):
        get_feed_import_config()

    clean_feed_env.setenv("FEED_FILES", " , ")
    with pytest.raises(MissingConfigurationError, match="FEED_FILES"):
        get_feed_import_config()


def test_feed_import_config_defaults_and_caps(clean_feed_env: pytest.MonkeyPatch) -> None:
    clean_feed_env.setenv("FEED_DROP_DIR", "/srv/feed")
    clean_feed_env.setenv("FEED_FILES", "ZFI_ASSET_1.txt,ZFI_ASSET_2.txt")
    clean_feed_env.setenv("FEED_STAGING_PURGE_BATCH_SIZE", str(MAX_PURGE_BATCH_SIZE * 10))
    clean_feed_env.setenv("FEED_STAGING_RETENTION_DAYS", "zero")

    config = get_feed_import_config()

    assert config.drop_dir == Path("/srv/feed")
    assert config.files == ("ZFI_ASSET_1.txt", "ZFI_ASSET_2.txt")
    assert config.retain_days == DEFAULT_RETAIN_DAYS
    assert config.purge_batch_size == MAX_PURGE_BATCH_SIZE
    assert config.deactivate_missing is False


def test_feed_schedule_config(clean_feed_env: pytest.MonkeyPatch) -> None:
    defaults = get_feed_schedule_config()
    assert defaults.enabled is False
    assert defaults.cron == DEFAULT_IMPORT_CRON
    assert defaults.timezone == DEFAULT_IMPORT_TIMEZONE

    clean_feed_env.setenv("FEED_IMPORT_ENABLED", "true")
    clean_feed_env.setenv("FEED_IMPORT_CRON", "15 3 * * 1")
    clean_feed_env.setenv("FEED_IMPORT_TIMEZONE", "UTC")

    configured = get_feed_schedule_config()
    assert (configured.enabled, configured.cron, configured.timezone) == (
        True,
        "15 3 * * 1",
        "UTC",
    )


@pytest.mark.parametrize(
    ("value", "expected"),
    [("/files/assets", "/files/assets"), ("media/", "/media"), ("//x//", "/x"), ("/", "")],
)
def test_normalize_public_base(value: str, expected: str) -> None:
    assert normalize_public_base(value) == expected


def test_image_storage_config_defaults_below_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("IMAGE_STORAGE_DIR", raising=False)
    monkeypatch.delenv("IMAGE_STORAGE_PROVIDER", raising=False)
    monkeypatch.delenv("IMAGE_PUBLIC_BASE", raising=False)
    monkeypatch.setenv("ASSETSYNC_DATA_DIR", str(tmp_path))

    config = get_image_storage_config()

    assert config.provider == "local"
    assert config.root_dir == tmp_path.resolve() / "images"
    assert config.public_base == "/files/assets"


def test_image_storage_config_env_overrides(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("IMAGE_STORAGE_DIR", str(tmp_path / "photos"))
    monkeypatch.setenv("IMAGE_STORAGE_PROVIDER", "LOCAL")
    monkeypatch.setenv("IMAGE_PUBLIC_BASE", "static/photos/")

    config = get_image_storage_config()

    assert config.provider == "local"
    assert config.root_dir == tmp_path / "photos"
    assert config.public_base == "/static/photos"
