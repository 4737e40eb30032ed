"""YMGal catalog source."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from galmeta.domain.identifiers import normalize_ymgal_id
from galmeta.domain.model import DataSource
from galmeta.domain.ports import DEFAULT_SEARCH_LIMIT
from galmeta.domain.result import Err, ErrorKind, Ok

from .client import YmgalAPIError, YmgalAuthError, YmgalClient
from .translator import translate_game, translate_list_item

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from galmeta.adapters.credentials import TokenCache
    from galmeta.config.ymgal import YmgalConfig
    from galmeta.domain.model import SourceRecord
    from galmeta.domain.result import FetchResult

log = getLogger(__name__)


class YmgalSource:
    """YMGal lookups; the adapter obtains its own access token."""

    source = DataSource.YMGAL
    requires_credential = False

    def __init__(
        self,
        *,
        config: YmgalConfig,
        tokens: TokenCache | None = None,
        client: YmgalClient | None = None,
    ) -> None:
        self._client = client or YmgalClient(config=config, tokens=tokens)

    async def fetch_by_id(
        self,
        game_id: str,
        *,
        credential: str | None = None,  # noqa: ARG002
    ) -> FetchResult[SourceRecord]:
        gid = normalize_ymgal_id(game_id)
        result = await _guard(self._client.fetch_game(gid))
        if isinstance(result, Err):
            return result
        game, developer = result.value
        if game is None:
            return Err(ErrorKind.NOT_FOUND, f"YMGal has no game {gid!r}", DataSource.YMGAL)
        return Ok(translate_game(game, developer=developer))

    async def fetch_by_name(
        self,
        name: str,
        *,
        credential: str | None = None,  # noqa: ARG002
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> FetchResult[list[SourceRecord]]:
        result = await _guard(self._client.search_games(name, page_size=limit))
        if isinstance(result, Err):
            return result
        return Ok([translate_list_item(item) for item in result.value])


async def _guard[T](operation: Awaitable[T]) -> FetchResult[T]:
    try:
        return Ok(await operation)
    except YmgalAuthError as exc:
        return Err(ErrorKind.AUTH_FAILED, f"YMGal authentication failed: {exc}", DataSource.YMGAL)
    except YmgalAPIError as exc:
        return Err(ErrorKind.NETWORK, f"YMGal request failed: {exc}", DataSource.YMGAL)
    except httpx.HTTPError as exc:
        log.debug("YMGal request failed", exc_info=True)
        return Err(ErrorKind.NETWORK, f"YMGal request failed: {exc}", DataSource.YMGAL)
    except (ValidationError, json.JSONDecodeError) as exc:
        log.debug("YMGal payload rejected", exc_info=True)
        return Err(
            ErrorKind.MALFORMED_RESPONSE, f"Unexpected YMGal payload: {exc}", DataSource.YMGAL
        )
