"""Search and fetch merged game metadata."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from galmeta.domain.errors import (
    CustomRecordError,
    MalformedQueryError,
    NoParameterProvidedError,
)
from galmeta.domain.identifiers import (
    GameIdentifierSet,
    classify,
    is_id_query,
    is_valid_game_id,
    normalize_ymgal_id,
)
from galmeta.domain.model import DataSource, IdType, is_ymgal_data_complete
from galmeta.domain.ports import DEFAULT_SEARCH_LIMIT
from galmeta.domain.result import Err

from .merge import SourceRecords, merge_records
from .resolver import MixedResolver

if TYPE_CHECKING:
    from collections.abc import Awaitable, Mapping

    from galmeta.domain.model import MergedRecord, SourceRecord
    from galmeta.domain.ports import CatalogSource
    from galmeta.domain.result import FetchResult

log = getLogger(__name__)

type Defaults = Mapping[str, object]


class MetadataService:
    """Entry point for metadata lookups, built around three catalog sources."""

    def __init__(
        self,
        *,
        bgm: CatalogSource,
        vndb: CatalogSource,
        ymgal: CatalogSource,
        resolver: MixedResolver | None = None,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> None:
        self._sources: dict[DataSource, CatalogSource] = {
            DataSource.BANGUMI: bgm,
            DataSource.VNDB: vndb,
            DataSource.YMGAL: ymgal,
        }
        self._resolver = resolver or MixedResolver(bgm=bgm, vndb=vndb, ymgal=ymgal)
        self._search_limit = search_limit

    async def search_games(
        self,
        query: str,
        *,
        source: DataSource | None = None,
        credential: str | None = None,
        is_id_search: bool | None = None,
        defaults: Defaults | None = None,
    ) -> list[MergedRecord]:
        """Search one catalog, or all of them when ``source`` is not given.

        ``is_id_search`` overrides the guess made from the shape of ``query``.
        A single catalog returns one record for an id and a list for a name;
        the mixed search returns at most one merged record.
        """

        query = query.strip()
        is_id = is_id_search if is_id_search is not None else is_id_query(query)

        if source is not None:
            if is_id:
                record = await self.get_game_by_id(query, source, credential=credential)
                return [apply_defaults(record, defaults)]
            hits = await self._direct(
                source,
                self._sources[source].fetch_by_name(
                    query, credential=credential, limit=self._search_limit
                ),
            )
            return [apply_defaults(_single_source_record(hit), defaults) for hit in hits]

        if is_id:
            ids = classify(query)
            if ids.is_empty():
                raise MalformedQueryError(f"{query!r} is not a recognised game id")
            records = await self._resolver.resolve(ids=ids, credential=credential)
            if records.is_empty():
                if ids.bgm_id and self._missing_credential(DataSource.BANGUMI, credential):
                    log.warning(
                        "Bangumi id %s needs an access token; pass one or set BGM_TOKEN",
                        ids.bgm_id,
                    )
                return []
            return [apply_defaults(merge_records(records, ids=ids), defaults)]

        records = await self._resolver.resolve(name=query, credential=credential)
        return [apply_defaults(merge_records(records), defaults)]

    async def get_game_by_id(
        self,
        game_id: str,
        source: DataSource,
        *,
        credential: str | None = None,
    ) -> MergedRecord:
        """Fetch one catalog directly; failures raise."""

        game_id = game_id.strip()
        if not is_valid_game_id(game_id, source):
            raise MalformedQueryError(f"{game_id!r} is not a valid {source} id", source=source)
        if source is DataSource.YMGAL:
            game_id = normalize_ymgal_id(game_id)
        record = await self._direct(
            source, self._sources[source].fetch_by_id(game_id, credential=credential)
        )
        return _single_source_record(record)

    async def get_game_by_ids(
        self,
        ids: GameIdentifierSet,
        *,
        credential: str | None = None,
        defaults: Defaults | None = None,
    ) -> MergedRecord | None:
        if ids.is_empty():
            return None
        records = await self._resolver.resolve(ids=ids, credential=credential)
        if records.is_empty():
            return None
        return apply_defaults(merge_records(records, ids=ids), defaults)

    async def refresh_record(
        self,
        record: MergedRecord,
        *,
        credential: str | None = None,
    ) -> MergedRecord:
        """Re-fetch catalog data for a stored record.

        The result keeps the record's storage and library fields; pass it with
        the original to ``payload_from_refresh`` to persist it.
        """

        if record.id_type is IdType.CUSTOM:
            raise CustomRecordError("Manually created games have no catalog data to refresh")

        ids = GameIdentifierSet.of(record)
        if ids.is_empty():
            raise NoParameterProvidedError("The game has no catalog ids to refresh from")

        single = record.id_type.source
        if single is not None and ids.get(single):
            game_id = ids.get(single) or ""
            fetched = await self.get_game_by_id(game_id, single, credential=credential)
            return merge_records(
                SourceRecords.of(fetched),
                ids=ids,
                base=replace(record, bgm_data=None, vndb_data=None, ymgal_data=None),
            )

        records = await self._resolver.resolve(
            ids=ids,
            credential=credential,
            custom_name=record.custom_data.name if record.custom_data else None,
        )
        return merge_records(records, ids=ids, base=record)

    async def complete_ymgal_data(
        self,
        record: MergedRecord,
        *,
        credential: str | None = None,
    ) -> MergedRecord:
        """Swap list-mode YMGal data for the detail record before storing.

        YMGal name searches return neither summary nor aliases. Only
        ``ymgal_data`` is replaced; a failed fetch raises.
        """

        if not record.ymgal_id or is_ymgal_data_complete(record.ymgal_data):
            return record
        detail = await self.get_game_by_id(record.ymgal_id, DataSource.YMGAL, credential=credential)
        fetched = detail.ymgal_data
        if fetched is None:
            return record
        log.info("Completed YMGal data for ga%s", record.ymgal_id)
        return merge_records(SourceRecords.of(record).with_record(fetched), base=record)

    def _missing_credential(self, source: DataSource, credential: str | None) -> bool:
        return not credential and self._sources[source].requires_credential

    async def _direct[T](self, source: DataSource, operation: Awaitable[FetchResult[T]]) -> T:
        result = await operation
        if isinstance(result, Err):
            log.error("%s lookup failed (%s): %s", source, result.kind, result.message)
            raise result.to_exception()
        return result.value


def apply_defaults(record: MergedRecord, defaults: Defaults | None) -> MergedRecord:
    """Fill fields the fetched record left empty from ``defaults``."""

    if not defaults:
        return record
    filled: dict[str, object] = {}
    for name, value in defaults.items():
        if not hasattr(record, name):
            raise ValueError(f"Unknown game field in defaults: {name!r}")
        if getattr(record, name) in (None, ()):
            filled[name] = value
    return replace(record, **filled) if filled else record


def _single_source_record(record: SourceRecord) -> MergedRecord:
    return merge_records(SourceRecords().with_record(record))
