"""Database startup and the unit of work the store adapters open per call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from assetsync.adapters.sqlalchemy.mappings import start_mappers
from assetsync.adapters.sqlalchemy.migrations import upgrade_head
from assetsync.adapters.sqlalchemy.repositories import (
    AssetSyncRepositories,
    SqlAlchemyAssetRepository,
    SqlAlchemyStagingRepository,
    SqlAlchemyStocktakeRepository,
)
from assetsync.config import get_database_uri

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when the database is used before ``startup`` or started twice."""


@dataclass(slots=True)
class _Database:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None


_DATABASE = _Database()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> Engine:
    """Map the entities and migrate the schema to head, then accept units of work.

    Without ``engine`` one is created from ``database_uri`` or ``DATABASE_URI``
    (a SQLite file in the data directory by default).
    """

    if _DATABASE.engine is not None and not force:
        raise StartupError("Database already started. Pass force=True to switch engines.")

    resolved = engine or create_engine(database_uri or get_database_uri(), future=True)
    start_mappers()
    upgrade_head(engine=resolved)
    _DATABASE.engine = resolved
    _DATABASE.sessions = sessionmaker(bind=resolved, expire_on_commit=False)
    return resolved


def is_started() -> bool:
    return _DATABASE.engine is not None


def shutdown() -> None:
    if _DATABASE.engine is not None:
        _DATABASE.engine.dispose()
    _DATABASE.engine = None
    _DATABASE.sessions = None


class SqlAlchemyUnitOfWork:
    """One session and its repositories for the span of a ``with`` block.

    Nothing is committed unless ``commit`` is called. Leaving the block with
    an exception rolls the session back; the session is always closed.
    """

    def __init__(self) -> None:
        if _DATABASE.sessions is None:
            raise StartupError(
                "Database not started. Call assetsync.adapters.sqlalchemy.startup() first."
            )
        self._sessions = _DATABASE.sessions
        self._session: Session | None = None
        self._repositories: AssetSyncRepositories | None = None

    def __enter__(self) -> Self:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        session = self._sessions()
        self._session = session
        self._repositories = AssetSyncRepositories(
            staging=SqlAlchemyStagingRepository(session),
            assets=SqlAlchemyAssetRepository(session),
            stocktakes=SqlAlchemyStocktakeRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def repositories(self) -> AssetSyncRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()
