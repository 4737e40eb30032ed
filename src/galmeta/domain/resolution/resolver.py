"""Fan catalog lookups out across Bangumi, VNDB and YMGal."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from galmeta.domain.errors import NoDataFromAnySourceError, NoParameterProvidedError
from galmeta.domain.identifiers import GameIdentifierSet
from galmeta.domain.model import DataSource
from galmeta.domain.result import Err

from .merge import SourceRecords

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from galmeta.domain.model import SourceRecord
    from galmeta.domain.ports import CatalogSource
    from galmeta.domain.result import FetchResult

log = getLogger(__name__)

# YMGal names match the other catalogs best, Bangumi's the least
_NAME_PRIORITY = (DataSource.YMGAL, DataSource.VNDB, DataSource.BANGUMI)


async def safe_fetch[T](source: DataSource, operation: Awaitable[FetchResult[T]]) -> T | None:
    """Await a catalog call, turning any failure into ``None``."""

    try:
        result = await operation
    except Exception:  # noqa: BLE001
        log.warning("%s lookup raised, treating it as no data", source, exc_info=True)
        return None
    if isinstance(result, Err):
        log.warning("%s lookup failed (%s): %s", source, result.kind, result.message)
        return None
    return result.value


def extract_name(records: SourceRecords, custom_name: str | None = None) -> str | None:
    for source in _NAME_PRIORITY:
        record = records.get(source)
        if record is not None and record.name:
            return record.name
    return custom_name or None


class MixedResolver:
    """Collect one record per catalog for a query.

    With a single id the matching catalog is fetched first and its name is
    searched in the other two. With several ids every catalog is fetched by
    id. With no id all catalogs are searched by name. Catalogs requiring a
    credential are skipped when none is given.
    """

    def __init__(self, *, bgm: CatalogSource, vndb: CatalogSource, ymgal: CatalogSource) -> None:
        self._sources: dict[DataSource, CatalogSource] = {
            DataSource.BANGUMI: bgm,
            DataSource.VNDB: vndb,
            DataSource.YMGAL: ymgal,
        }

    async def resolve(
        self,
        *,
        ids: GameIdentifierSet | None = None,
        name: str | None = None,
        credential: str | None = None,
        custom_name: str | None = None,
    ) -> SourceRecords:
        ids = ids or GameIdentifierSet()
        if ids.count == 1:
            return await self._resolve_single_id(
                ids, credential=credential, custom_name=custom_name
            )
        if ids.count > 1:
            return await self._resolve_ids(ids, credential=credential)

        search_name = (name or "").strip()
        if not search_name:
            raise NoParameterProvidedError("Either a single catalog id or a game name is required")
        records = await self._search_all(search_name, tuple(DataSource), credential=credential)
        if records.is_empty():
            raise NoDataFromAnySourceError(f"No catalog returned data for {search_name!r}")
        return records

    async def _resolve_single_id(
        self,
        ids: GameIdentifierSet,
        *,
        credential: str | None,
        custom_name: str | None,
    ) -> SourceRecords:
        (source,) = ids.sources()
        game_id = ids.get(source) or ""
        record = await self._fetch_by_id(source, game_id, credential=credential)
        if record is None:
            log.info("%s id %s returned no data, skipping name propagation", source, game_id)
            return SourceRecords()

        known = SourceRecords().with_record(record)
        search_name = extract_name(known, custom_name)
        if not search_name:
            return known
        others = tuple(other for other in DataSource if other is not source)
        found = await self._search_all(search_name, others, credential=credential)
        return found.with_record(record)

    async def _resolve_ids(
        self, ids: GameIdentifierSet, *, credential: str | None
    ) -> SourceRecords:
        fetched = await asyncio.gather(
            *(
                self._fetch_by_id(source, ids.get(source) or "", credential=credential)
                for source in ids.sources()
            )
        )
        records = SourceRecords()
        for record in fetched:
            if record is not None:
                records = records.with_record(record)
        return records

    async def _search_all(
        self,
        name: str,
        sources: tuple[DataSource, ...],
        *,
        credential: str | None,
    ) -> SourceRecords:
        hits = await asyncio.gather(
            *(self._first_hit(source, name, credential=credential) for source in sources)
        )
        records = SourceRecords()
        for hit in hits:
            if hit is not None:
                records = records.with_record(hit)
        return records

    async def _fetch_by_id(
        self, source: DataSource, game_id: str, *, credential: str | None
    ) -> SourceRecord | None:
        catalog = self._sources[source]
        if self._skipped(catalog, credential):
            return None
        return await safe_fetch(source, catalog.fetch_by_id(game_id, credential=credential))

    async def _first_hit(
        self, source: DataSource, name: str, *, credential: str | None
    ) -> SourceRecord | None:
        catalog = self._sources[source]
        if self._skipped(catalog, credential):
            return None
        hits = await safe_fetch(source, catalog.fetch_by_name(name, credential=credential, limit=1))
        return hits[0] if hits else None

    @staticmethod
    def _skipped(catalog: CatalogSource, credential: str | None) -> bool:
        if catalog.requires_credential and not credential:
            log.debug("Skipping %s: no credential", catalog.source)
            return True
        return False
