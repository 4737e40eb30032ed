"""SQLAlchemy-backed unit of work for stored games."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from galmeta.adapters.sqlalchemy.mappings import create_all_tables
from galmeta.adapters.sqlalchemy.repositories import SqlAlchemyGameRepository
from galmeta.config.storage import get_storage_config

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """The game database is not open, or is already open."""


_session_factory: sessionmaker[Session] | None = None


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Open the game database, creating the ``games`` table when missing.

    Without ``engine`` or ``database_uri`` the location comes from
    ``get_storage_config()``. Reopening requires ``force=True``.
    """

    global _session_factory  # noqa: PLW0603
    if _session_factory is not None:
        if not force:
            raise StartupError("Game database already open; pass force=True to reopen it")
        shutdown()

    if engine is None:
        engine = create_engine(database_uri or get_storage_config().games_db_uri())
    create_all_tables(engine)
    log.debug("Opened game database at %s", engine.url)
    _session_factory = sessionmaker(bind=engine, expire_on_commit=False)


def is_started() -> bool:
    return _session_factory is not None


def shutdown() -> None:
    global _session_factory  # noqa: PLW0603
    if _session_factory is None:
        return
    engine = _session_factory.kw["bind"]
    _session_factory = None
    engine.dispose()


class SqlAlchemyGameUnitOfWork:
    """One session per ``with`` block; ``games`` is only usable inside it."""

    def __init__(self) -> None:
        if _session_factory is None:
            raise StartupError("Game database not open; call startup() first")
        self._factory = _session_factory
        self._session: Session | None = None
        self._games: SqlAlchemyGameRepository | None = None

    def __enter__(self) -> SqlAlchemyGameUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already in use")
        self._session = self._factory()
        self._games = SqlAlchemyGameRepository(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self._active_session()
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._games = None
        return False

    @property
    def games(self) -> SqlAlchemyGameRepository:
        if self._games is None:
            raise StartupError("Unit of work used outside its with block")
        return self._games

    def commit(self) -> None:
        self._active_session().commit()

    def rollback(self) -> None:
        self._active_session().rollback()

    def _active_session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work used outside its with block")
        return self._session


if TYPE_CHECKING:
    from galmeta.domain.ports.unit_of_work import GameUnitOfWork

    _uow_check: GameUnitOfWork = SqlAlchemyGameUnitOfWork()
