from __future__ import annotations

import asyncio
from dataclasses import replace

import pytest

from galmeta.domain.errors import (
    CustomRecordError,
    MalformedQueryError,
    MissingCredentialError,
    NoDataFromAnySourceError,
    NoParameterProvidedError,
    NotFoundError,
    SourceUnavailableError,
)
from galmeta.domain.identifiers import GameIdentifierSet
from galmeta.domain.model import CustomOverride, DataSource, IdType, MergedRecord
from galmeta.domain.resolution import MetadataService, apply_defaults
from galmeta.domain.result import Err, ErrorKind
from tests.helpers.records import make_bgm, make_vndb, make_ymgal
from tests.support.catalog import FakeCatalogSource


@pytest.fixture
def bgm() -> FakeCatalogSource:
    return FakeCatalogSource(DataSource.BANGUMI, requires_credential=True)


@pytest.fixture
def vndb() -> FakeCatalogSource:
    return FakeCatalogSource(DataSource.VNDB)


@pytest.fixture
def ymgal() -> FakeCatalogSource:
    return FakeCatalogSource(DataSource.YMGAL)


@pytest.fixture
def service(
    bgm: FakeCatalogSource, vndb: FakeCatalogSource, ymgal: FakeCatalogSource
) -> MetadataService:
    return MetadataService(bgm=bgm, vndb=vndb, ymgal=ymgal, search_limit=10)


def test_vndb_id_query_without_bangumi_credential(
    service: MetadataService,
    bgm: FakeCatalogSource,
    vndb: FakeCatalogSource,
    ymgal: FakeCatalogSource,
) -> None:
    vndb.by_id["v17"] = make_vndb("v17", name="Ever17")
    ymgal.by_name["Ever17"] = [make_ymgal("77", name="Ever17")]

    records = asyncio.run(service.search_games("v17"))

    assert len(records) == 1
    merged = records[0]
    assert merged.vndb_id == "v17"
    assert merged.bgm_id is None
    assert merged.ymgal_id == "77"
    assert merged.id_type is IdType.MIXED
    assert bgm.id_calls == []
    assert bgm.name_calls == []


def test_vndb_id_query_without_ymgal_hit_stays_single_source(
    service: MetadataService, vndb: FakeCatalogSource
) -> None:
    vndb.by_id["v17"] = make_vndb("v17", name="Ever17")

    (merged,) = asyncio.run(service.search_games("v17"))

    assert merged.id_type is IdType.VNDB
    assert merged.ymgal_id is None
    assert merged.ymgal_data is None


def test_name_query_with_no_results_raises(service: MetadataService) -> None:
    with pytest.raises(NoDataFromAnySourceError):
        asyncio.run(service.search_games("Clannad", credential="token"))


def test_multiple_ids_are_merged_as_mixed(
    service: MetadataService, bgm: FakeCatalogSource, vndb: FakeCatalogSource
) -> None:
    bgm.by_id["42"] = make_bgm("42")
    vndb.by_id["v9"] = make_vndb("v9")

    merged = asyncio.run(
        service.get_game_by_ids(GameIdentifierSet(bgm_id="42", vndb_id="v9"), credential="t")
    )

    assert merged is not None
    assert merged.id_type is IdType.MIXED
    assert merged.bgm_data == make_bgm("42")
    assert merged.vndb_data == make_vndb("v9")
    assert merged.ymgal_id is None
    assert merged.ymgal_data is None


def test_get_game_by_ids_without_ids_returns_none(service: MetadataService) -> None:
    assert asyncio.run(service.get_game_by_ids(GameIdentifierSet())) is None


def test_get_game_by_ids_without_data_returns_none(service: MetadataService) -> None:
    assert asyncio.run(service.get_game_by_ids(GameIdentifierSet(vndb_id="v1"))) is None


def test_explicit_id_search_requires_a_recognised_id(service: MetadataService) -> None:
    with pytest.raises(MalformedQueryError):
        asyncio.run(service.search_games("Clannad", is_id_search=True))


def test_forced_name_search_for_numeric_query(
    service: MetadataService, vndb: FakeCatalogSource
) -> None:
    vndb.by_name["1984"] = [make_vndb("v30", name="1984")]

    (merged,) = asyncio.run(service.search_games("1984", is_id_search=False))

    assert merged.vndb_id == "v30"
    assert vndb.id_calls == []


def test_single_source_name_search_returns_a_list(
    service: MetadataService, vndb: FakeCatalogSource
) -> None:
    vndb.by_name["Clannad"] = [make_vndb("v4"), make_vndb("v5"), make_vndb("v6")]

    records = asyncio.run(service.search_games("Clannad", source=DataSource.VNDB))

    assert [record.vndb_id for record in records] == ["v4", "v5", "v6"]
    assert all(record.id_type is IdType.VNDB for record in records)


def test_single_source_id_search_propagates_errors(
    service: MetadataService, vndb: FakeCatalogSource
) -> None:
    with pytest.raises(NotFoundError):
        asyncio.run(service.search_games("v404", source=DataSource.VNDB))

    vndb.failure = Err(ErrorKind.NETWORK, "VNDB is down", DataSource.VNDB)
    with pytest.raises(SourceUnavailableError, match="VNDB is down"):
        asyncio.run(service.search_games("v4", source=DataSource.VNDB))


def test_get_game_by_id_validates_and_normalizes(
    service: MetadataService, ymgal: FakeCatalogSource
) -> None:
    ymgal.by_id["30"] = make_ymgal("30")

    merged = asyncio.run(service.get_game_by_id("ga30", DataSource.YMGAL))

    assert merged.ymgal_id == "30"
    assert ymgal.id_calls == ["30"]
    with pytest.raises(MalformedQueryError):
        asyncio.run(service.get_game_by_id("v30", DataSource.YMGAL))


def test_get_game_by_id_surfaces_missing_credential(
    service: MetadataService, bgm: FakeCatalogSource
) -> None:
    bgm.failure = Err(ErrorKind.MISSING_CREDENTIAL, "token required", DataSource.BANGUMI)

    with pytest.raises(MissingCredentialError):
        asyncio.run(service.get_game_by_id("42", DataSource.BANGUMI))


def test_defaults_fill_empty_fields(service: MetadataService, vndb: FakeCatalogSource) -> None:
    vndb.by_id["v4"] = make_vndb(summary=None, tags=())

    (merged,) = asyncio.run(
        service.search_games(
            "v4",
            source=DataSource.VNDB,
            defaults={"summary": "No description", "tags": ("untagged",), "name": "ignored"},
        )
    )

    assert merged.summary == "No description"
    assert merged.tags == ("untagged",)
    assert merged.name == "VNDB Name"


def test_apply_defaults_rejects_unknown_fields() -> None:
    with pytest.raises(ValueError, match="nonsense"):
        apply_defaults(MergedRecord(), {"nonsense": 1})


def test_refresh_single_source_record(service: MetadataService, vndb: FakeCatalogSource) -> None:
    vndb.by_id["v4"] = make_vndb(summary="Updated")
    stored = MergedRecord(
        id=3,
        id_type=IdType.VNDB,
        vndb_id="v4",
        vndb_data=make_vndb(),
        localpath="/games/clannad",
    )

    refreshed = asyncio.run(service.refresh_record(stored))

    assert refreshed.id == 3
    assert refreshed.localpath == "/games/clannad"
    assert refreshed.summary == "Updated"
    assert vndb.name_calls == []


def test_refresh_mixed_record_uses_the_resolver(
    service: MetadataService, bgm: FakeCatalogSource, ymgal: FakeCatalogSource
) -> None:
    bgm.by_id["42"] = make_bgm("42")
    ymgal.by_id["30"] = make_ymgal("30", summary="Fresh")
    stored = MergedRecord(
        id=3,
        id_type=IdType.MIXED,
        bgm_id="42",
        ymgal_id="30",
        custom_data=CustomOverride(name="Mine"),
    )

    refreshed = asyncio.run(service.refresh_record(stored, credential="t"))

    assert refreshed.bgm_data == make_bgm("42")
    assert refreshed.summary == "Fresh"
    assert refreshed.name == "Mine"


def test_refresh_rejects_custom_and_id_less_records(service: MetadataService) -> None:
    with pytest.raises(CustomRecordError):
        asyncio.run(service.refresh_record(MergedRecord(id_type=IdType.CUSTOM)))
    with pytest.raises(NoParameterProvidedError):
        asyncio.run(service.refresh_record(MergedRecord()))


def test_bangumi_id_without_token_warns(
    service: MetadataService, bgm: FakeCatalogSource, caplog: pytest.LogCaptureFixture
) -> None:
    bgm.by_id["1001"] = make_bgm()

    with caplog.at_level("WARNING", logger="galmeta.domain.resolution.service"):
        records = asyncio.run(service.search_games("1001"))

    assert records == []
    assert bgm.id_calls == []
    assert "BGM_TOKEN" in caplog.text


def test_complete_ymgal_data_swaps_in_the_detail_record(
    service: MetadataService, ymgal: FakeCatalogSource
) -> None:
    listed = make_ymgal(summary=None, aliases=())
    ymgal.by_name["Clannad"] = [listed]
    ymgal.by_id["5678"] = make_ymgal()
    (record,) = asyncio.run(service.search_games("Clannad", source=DataSource.YMGAL))
    record = replace(record, vndb_id="v4", vndb_data=make_vndb(), localpath="/games/clannad")

    completed = asyncio.run(service.complete_ymgal_data(record))

    assert ymgal.id_calls == ["5678"]
    assert completed.ymgal_data == make_ymgal()
    assert completed.vndb_data == make_vndb()
    assert completed.summary == "YMGal introduction"
    assert "Clannad" in completed.aliases
    assert completed.localpath == "/games/clannad"
    assert completed.id_type is IdType.MIXED


def test_complete_ymgal_data_leaves_detail_records_alone(
    service: MetadataService, ymgal: FakeCatalogSource
) -> None:
    record = MergedRecord(ymgal_id="5678", ymgal_data=make_ymgal())

    assert asyncio.run(service.complete_ymgal_data(record)) is record
    assert asyncio.run(service.complete_ymgal_data(MergedRecord())) == MergedRecord()
    assert ymgal.id_calls == []
