from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from galmeta.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyGameUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)
from galmeta.domain.model import CustomOverride, IdType, MergedRecord

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def _custom(name: str) -> MergedRecord:
    return MergedRecord(id_type=IdType.CUSTOM, custom_data=CustomOverride(name=name))


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyGameUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert is_started()


def test_unit_of_work_persists_games(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyGameUnitOfWork() as uow:
        game_id = uow.games.insert(_custom("Persisted"))
        uow.commit()

    with SqlAlchemyGameUnitOfWork() as uow:
        stored = uow.games.get(game_id)

    assert stored is not None
    assert stored.name == "Persisted"


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError), SqlAlchemyGameUnitOfWork() as uow:
        uow.games.insert(_custom("Discarded"))
        raise RuntimeError("abort")

    with SqlAlchemyGameUnitOfWork() as uow:
        assert uow.games.list_all() == []


def test_repositories_unavailable_outside_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyGameUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.games
