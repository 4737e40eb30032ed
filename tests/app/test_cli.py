from __future__ import annotations

import json

import pytest

from galmeta.app import RefreshSummary
from galmeta.domain.identifiers import GameIdentifierSet
from galmeta.domain.model import DataSource, MergedRecord
from galmeta.ui import cli as cli_module


def test_search_defaults(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_search(query: str, **kwargs: object) -> list[MergedRecord]:
        captured["query"] = query
        captured.update(kwargs)
        return [MergedRecord(name="Ever17", vndb_id="v17")]

    monkeypatch.setattr(cli_module, "search_games", fake_search)

    cli_module.main(["search", "v17"])

    assert captured["query"] == "v17"
    assert captured["source"] is None
    assert captured["is_id_search"] is None
    assert captured["credential"] is None
    assert captured["timeout"] is None
    output = json.loads(capsys.readouterr().out)
    assert output[0]["name"] == "Ever17"
    assert output[0]["vndb_id"] == "v17"


def test_search_with_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}
    saved: list[MergedRecord] = []

    def fake_search(query: str, **kwargs: object) -> list[MergedRecord]:
        captured.update(kwargs, query=query)
        return [MergedRecord(name="1984")]

    def fake_save(record: MergedRecord, **kwargs: object) -> int:
        saved.append(record)
        captured["save_options"] = kwargs
        return 1

    monkeypatch.setattr(cli_module, "search_games", fake_search)
    monkeypatch.setattr(cli_module, "save_game", fake_save)

    cli_module.main(
        ["search", "1984", "--source", "vndb", "--name", "--token", "t", "--timeout", "5", "--save"]
    )

    assert captured["source"] is DataSource.VNDB
    assert captured["is_id_search"] is False
    assert captured["credential"] == "t"
    assert captured["timeout"] == 5.0
    assert [record.name for record in saved] == ["1984"]
    assert captured["save_options"] == {"credential": "t", "timeout": 5.0}


def test_ids_command_normalizes_ids(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_fetch(ids: GameIdentifierSet, **kwargs: object) -> MergedRecord | None:
        captured["ids"] = ids
        captured.update(kwargs)
        return None

    monkeypatch.setattr(cli_module, "fetch_game_by_ids", fake_fetch)

    cli_module.main(["ids", "--bgm", "42", "--vndb", "V9", "--ymgal", "ga30"])

    assert captured["ids"] == GameIdentifierSet(bgm_id="42", vndb_id="v9", ymgal_id="30")


def test_ids_command_requires_an_id() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["ids"])

    assert excinfo.value.code == 2


def test_invalid_id_is_a_validation_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["ids", "--vndb", "17"])

    assert excinfo.value.code == 2


def test_negative_timeout_is_rejected() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["search", "v17", "--timeout", "-1"])

    assert excinfo.value.code == 2


def test_lookup_failure_exits_with_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_search(*_: object, **__: object) -> list[MergedRecord]:
        raise RuntimeError("catalogs down")

    monkeypatch.setattr(cli_module, "search_games", failing_search)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["search", "Clannad"])

    assert excinfo.value.code == 1


def test_refresh_command(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_refresh(game_id: int, **kwargs: object) -> MergedRecord:
        captured["game_id"] = game_id
        captured.update(kwargs)
        return MergedRecord(id=game_id)

    monkeypatch.setattr(cli_module, "refresh_game", fake_refresh)

    cli_module.main(["refresh", "3", "--token", "t"])

    assert captured == {"game_id": 3, "credential": "t", "timeout": None}


def test_refresh_all_command_prints_a_summary(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_refresh_all(**kwargs: object) -> RefreshSummary:
        captured.update(kwargs)
        return RefreshSummary(total=3, succeeded=2, errors={7: "token required"})

    monkeypatch.setattr(cli_module, "refresh_all_games", fake_refresh_all)

    cli_module.main(["refresh-all", "--source", "bgm", "--timeout", "10"])

    assert captured == {"source": DataSource.BANGUMI, "credential": None, "timeout": 10.0}
    assert json.loads(capsys.readouterr().out) == {
        "total": 3,
        "succeeded": 2,
        "failed": 1,
        "errors": {"7": "token required"},
    }
