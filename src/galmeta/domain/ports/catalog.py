"""Ports for fetching game metadata from external catalogs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from galmeta.domain.model import DataSource, SourceRecord
    from galmeta.domain.result import FetchResult

DEFAULT_SEARCH_LIMIT = 25


@runtime_checkable
class CatalogSource(Protocol):
    """One catalog API, already normalized to :class:`SourceRecord`.

    Implementations report failures as ``Err`` results instead of raising.
    """

    @property
    def source(self) -> DataSource: ...

    @property
    def requires_credential(self) -> bool: ...

    async def fetch_by_id(
        self,
        game_id: str,
        *,
        credential: str | None = None,
    ) -> FetchResult[SourceRecord]: ...

    async def fetch_by_name(
        self,
        name: str,
        *,
        credential: str | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> FetchResult[list[SourceRecord]]: ...
