"""Tests for the SQLAlchemy game repository."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session  # noqa: TC002

from galmeta.adapters.sqlalchemy.repositories import GameNotFoundError, SqlAlchemyGameRepository
from galmeta.domain.model import CustomOverride, IdType, MergedRecord
from galmeta.domain.resolution import CLEARED, SetTo, SourceRecords, UpdatePayload, merge_records
from tests.helpers.records import make_bgm, make_vndb


def _record() -> MergedRecord:
    merged = merge_records(
        SourceRecords(bgm=make_bgm(), vndb=make_vndb()),
        custom=CustomOverride(tags=("favourite",)),
    )
    return MergedRecord(
        id_type=merged.id_type,
        bgm_id=merged.bgm_id,
        vndb_id=merged.vndb_id,
        bgm_data=merged.bgm_data,
        vndb_data=merged.vndb_data,
        custom_data=merged.custom_data,
        date=merged.date,
        localpath="/games/clannad",
        savepath="/saves/clannad",
        maxbackups=2,
    )


def test_insert_and_get_round_trip(sqlite_session: Session) -> None:
    repository = SqlAlchemyGameRepository(sqlite_session)

    game_id = repository.insert(_record())
    sqlite_session.commit()
    stored = repository.get(game_id)

    assert stored is not None
    assert stored.id == game_id
    assert stored.id_type is IdType.MIXED
    assert stored.bgm_data == make_bgm()
    assert stored.vndb_data == make_vndb()
    assert stored.custom_data == CustomOverride(tags=("favourite",))
    assert stored.name == "Bangumi Name"
    assert stored.tags == ("泣きゲー", "校园", "Drama", "favourite")
    assert stored.created_at is not None
    assert stored.created_at.tzinfo is not None


def test_update_distinguishes_unchanged_cleared_and_set(sqlite_session: Session) -> None:
    repository = SqlAlchemyGameRepository(sqlite_session)
    game_id = repository.insert(_record())

    repository.update(
        game_id,
        UpdatePayload(savepath=CLEARED, maxbackups=SetTo(5), custom_data=CLEARED),
    )
    sqlite_session.commit()
    stored = repository.get(game_id)

    assert stored is not None
    assert stored.localpath == "/games/clannad"
    assert stored.savepath is None
    assert stored.maxbackups == 5
    assert stored.custom_data is None
    assert stored.tags == ("泣きゲー", "校园", "Drama")


def test_update_replaces_source_data(sqlite_session: Session) -> None:
    repository = SqlAlchemyGameRepository(sqlite_session)
    game_id = repository.insert(_record())

    repository.update(game_id, UpdatePayload(vndb_data=SetTo(make_vndb(name="Renamed"))))
    stored = repository.get(game_id)

    assert stored is not None
    assert stored.vndb_data is not None
    assert stored.vndb_data.name == "Renamed"
    assert stored.bgm_data == make_bgm()


def test_update_missing_game_raises(sqlite_session: Session) -> None:
    repository = SqlAlchemyGameRepository(sqlite_session)

    with pytest.raises(GameNotFoundError):
        repository.update(404, UpdatePayload(localpath=SetTo("/x")))
    with pytest.raises(GameNotFoundError):
        repository.update(404, UpdatePayload())


def test_get_missing_and_list_all(sqlite_session: Session) -> None:
    repository = SqlAlchemyGameRepository(sqlite_session)

    assert repository.get(1) is None
    assert repository.list_all() == []

    first = repository.insert(_record())
    custom = MergedRecord(id_type=IdType.CUSTOM, custom_data=CustomOverride(name="Mine"))
    second = repository.insert(custom)

    assert [game.id for game in repository.list_all()] == [first, second]
    assert repository.list_all()[1].name == "Mine"
