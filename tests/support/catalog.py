"""In-memory catalog source used by resolution tests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from galmeta.domain.ports import DEFAULT_SEARCH_LIMIT
from galmeta.domain.result import Err, ErrorKind, Ok

if TYPE_CHECKING:
    from galmeta.domain.model import DataSource, SourceRecord
    from galmeta.domain.result import FetchResult


@dataclass
class FakeCatalogSource:
    source: DataSource
    by_id: dict[str, SourceRecord] = field(default_factory=dict)
    by_name: dict[str, list[SourceRecord]] = field(default_factory=dict)
    requires_credential: bool = False
    failure: Err | None = None
    raises: Exception | None = None
    delay: float = 0.0
    id_calls: list[str] = field(default_factory=list)
    name_calls: list[str] = field(default_factory=list)
    credentials: list[str | None] = field(default_factory=list)

    async def fetch_by_id(
        self,
        game_id: str,
        *,
        credential: str | None = None,
    ) -> FetchResult[SourceRecord]:
        self.id_calls.append(game_id)
        self.credentials.append(credential)
        await self._pause()
        if self.failure is not None:
            return self.failure
        record = self.by_id.get(game_id)
        if record is None:
            return Err(ErrorKind.NOT_FOUND, f"no game {game_id}", self.source)
        return Ok(record)

    async def fetch_by_name(
        self,
        name: str,
        *,
        credential: str | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> FetchResult[list[SourceRecord]]:
        self.name_calls.append(name)
        self.credentials.append(credential)
        await self._pause()
        if self.failure is not None:
            return self.failure
        return Ok(self.by_name.get(name, [])[:limit])

    async def _pause(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raises is not None:
            raise self.raises
