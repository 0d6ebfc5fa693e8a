from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import IntegrityError

from assetsync.adapters.sqlalchemy import create_all_tables, mapper_registry, start_mappers
from assetsync.domain.model import AssetRecord, ImportBatch

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session


def test_start_mappers_is_idempotent() -> None:
    # First invocation happens in the sqlite_engine fixture; calling again should be harmless.
    start_mappers()
    start_mappers()


def test_migrated_schema_matches_table_metadata(sqlite_engine: Engine) -> None:
    metadata_engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(metadata_engine)
    migrated = inspect(sqlite_engine)
    declared = inspect(metadata_engine)

    expected_tables = set(mapper_registry.metadata.tables)
    assert expected_tables <= set(migrated.get_table_names())
    for table_name in expected_tables:
        migrated_columns = {column["name"] for column in migrated.get_columns(table_name)}
        declared_columns = {column["name"] for column in declared.get_columns(table_name)}
        assert migrated_columns == declared_columns, table_name
    metadata_engine.dispose()


def test_business_key_is_unique(sqlite_session: Session) -> None:
    sqlite_session.add(AssetRecord(business_key="100001", asset_no="100001"))
    sqlite_session.commit()

    sqlite_session.add(AssetRecord(business_key="100001", asset_no="100001"))
    with pytest.raises(IntegrityError):
        sqlite_session.commit()


def test_datetimes_are_stored_as_utc(sqlite_session: Session) -> None:
    bangkok = timezone(timedelta(hours=7))
    batch = ImportBatch(
        source_file_name="ZFI_ASSET.txt", loaded_at=datetime(2026, 3, 14, 9, 0, tzinfo=bangkok)
    )
    sqlite_session.add(batch)
    sqlite_session.commit()
    sqlite_session.expire_all()

    loaded = sqlite_session.get(ImportBatch, batch.id)

    assert loaded is not None
    assert loaded.loaded_at == datetime(2026, 3, 14, 2, 0, tzinfo=UTC)
    assert loaded.loaded_at.tzinfo is UTC
