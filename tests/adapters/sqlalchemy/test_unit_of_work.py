from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from assetsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)
from assetsync.domain.model import Plant

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    assert is_started() is False

    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    assert startup(engine=engine_b, force=True) is engine_b
    with SqlAlchemyUnitOfWork() as uow:
        assert uow.session.get_bind() is engine_b


def test_unit_of_work_commits_and_rolls_back(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyUnitOfWork() as uow:
        uow.repositories.assets.add(Plant(code="P100"))
        uow.commit()

    with pytest.raises(RuntimeError, match="boom"), SqlAlchemyUnitOfWork() as uow:
        uow.repositories.assets.add(Plant(code="P200"))
        uow.session.flush()
        raise RuntimeError("boom")

    with SqlAlchemyUnitOfWork() as uow:
        assert set(uow.repositories.assets.plants_by_code()) == {"P100"}


def test_repositories_unavailable_outside_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_unit_of_work_cannot_be_entered_twice(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyUnitOfWork()

    with uow, pytest.raises(StartupError, match="already open"), uow:
        pass

    with pytest.raises(StartupError):
        _ = uow.session


def test_shutdown_stops_accepting_units_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    assert is_started() is True

    shutdown()

    assert is_started() is False
    with pytest.raises(StartupError, match="not started"):
        SqlAlchemyUnitOfWork()
