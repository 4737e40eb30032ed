"""VNDB catalog source."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from galmeta.domain.model import DataSource
from galmeta.domain.ports import DEFAULT_SEARCH_LIMIT
from galmeta.domain.result import Err, ErrorKind, Ok

from .client import VndbAPIError, VndbClient
from .translator import translate_vn

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from galmeta.config.vndb import VndbConfig
    from galmeta.domain.model import SourceRecord
    from galmeta.domain.result import FetchResult

    from .schema import VnQueryResponse

log = getLogger(__name__)


class VndbSource:
    """VNDB lookups; no credential is needed."""

    source = DataSource.VNDB
    requires_credential = False

    def __init__(self, *, config: VndbConfig, client: VndbClient | None = None) -> None:
        self._spoiler_level = config.spoiler_level
        self._client = client or VndbClient(config=config)

    async def fetch_by_id(
        self,
        game_id: str,
        *,
        credential: str | None = None,  # noqa: ARG002
    ) -> FetchResult[SourceRecord]:
        result = await _guard(self._client.fetch_vn(game_id))
        if isinstance(result, Err):
            return result
        if not result.value.results:
            return Err(ErrorKind.NOT_FOUND, f"VNDB has no entry {game_id!r}", DataSource.VNDB)
        return Ok(translate_vn(result.value.results[0], spoiler_level=self._spoiler_level))

    async def fetch_by_name(
        self,
        name: str,
        *,
        credential: str | None = None,  # noqa: ARG002
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> FetchResult[list[SourceRecord]]:
        result = await _guard(self._client.search_vns(name, limit=limit))
        if isinstance(result, Err):
            return result
        return Ok(
            [translate_vn(vn, spoiler_level=self._spoiler_level) for vn in result.value.results]
        )


async def _guard(operation: Awaitable[VnQueryResponse]) -> FetchResult[VnQueryResponse]:
    try:
        return Ok(await operation)
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        return Err(ErrorKind.NETWORK, f"VNDB answered HTTP {status}", DataSource.VNDB)
    except httpx.HTTPError as exc:
        log.debug("VNDB request failed", exc_info=True)
        return Err(ErrorKind.NETWORK, f"VNDB request failed: {exc}", DataSource.VNDB)
    except (ValidationError, VndbAPIError, json.JSONDecodeError) as exc:
        log.debug("VNDB payload rejected", exc_info=True)
        return Err(ErrorKind.MALFORMED_RESPONSE, f"Unexpected VNDB payload: {exc}", DataSource.VNDB)
