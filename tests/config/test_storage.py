from __future__ import annotations

from pathlib import Path

import pytest  # noqa: TC002

from assetsync.config import storage


def test_data_dir_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("ASSETSYNC_DATA_DIR", f"  {custom}  ")

    paths = storage.get_data_paths()

    assert paths.root == custom.resolve()
    assert paths.images_dir == custom.resolve() / "images"
    assert not custom.exists()


def test_data_dir_falls_back_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("ASSETSYNC_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    assert storage.get_data_paths().root == tmp_path.resolve() / "assetsync"


def test_database_uri_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert storage.get_database_uri() == "sqlite:///override.db"


def test_database_uri_creates_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    paths = storage.DataPaths(root=tmp_path / "data-dir")

    uri = storage.get_database_uri(paths=paths)

    assert uri == f"sqlite+pysqlite:///{tmp_path / 'data-dir' / storage.DATABASE_FILENAME}"
    assert Path(tmp_path / "data-dir").is_dir()
