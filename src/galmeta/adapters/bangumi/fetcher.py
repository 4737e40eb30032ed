"""Bangumi catalog source."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from galmeta.domain.model import DataSource
from galmeta.domain.ports import DEFAULT_SEARCH_LIMIT
from galmeta.domain.result import Err, ErrorKind, Ok

from .client import BangumiAPIError, BangumiClient
from .translator import translate_subject

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from galmeta.config.bangumi import BangumiConfig
    from galmeta.domain.model import SourceRecord
    from galmeta.domain.result import FetchResult

log = getLogger(__name__)

_NOT_FOUND_STATUSES = frozenset({400, 404})
_AUTH_STATUSES = frozenset({401, 403})


class BangumiSource:
    """Bangumi lookups; every request needs an access token.

    A token passed per call wins over the configured ``BGM_TOKEN``.
    """

    source = DataSource.BANGUMI

    def __init__(self, *, config: BangumiConfig, client: BangumiClient | None = None) -> None:
        self._config = config
        self._client = client or BangumiClient(config=config)

    @property
    def requires_credential(self) -> bool:
        return self._config.token is None

    async def fetch_by_id(
        self,
        game_id: str,
        *,
        credential: str | None = None,
    ) -> FetchResult[SourceRecord]:
        token = credential or self._config.token
        if not token:
            return _missing_token()
        result = await _guard(self._client.fetch_subject(game_id, token=token), subject=game_id)
        if isinstance(result, Err):
            return result
        return Ok(translate_subject(result.value))

    async def fetch_by_name(
        self,
        name: str,
        *,
        credential: str | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> FetchResult[list[SourceRecord]]:
        token = credential or self._config.token
        if not token:
            return _missing_token()
        result = await _guard(
            self._client.search_games(name, token=token, limit=limit), subject=name
        )
        if isinstance(result, Err):
            return result
        return Ok([translate_subject(subject) for subject in result.value.data])


def _missing_token() -> Err:
    return Err(
        ErrorKind.MISSING_CREDENTIAL,
        "Bangumi requires an access token (set BGM_TOKEN)",
        DataSource.BANGUMI,
    )


async def _guard[T](operation: Awaitable[T], *, subject: str) -> FetchResult[T]:
    try:
        return Ok(await operation)
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        if status in _NOT_FOUND_STATUSES:
            kind, message = ErrorKind.NOT_FOUND, f"Bangumi has no game for {subject!r}"
        elif status in _AUTH_STATUSES:
            kind, message = ErrorKind.AUTH_FAILED, "Bangumi rejected the access token"
        else:
            kind, message = ErrorKind.NETWORK, f"Bangumi answered HTTP {status}"
        return Err(kind, message, DataSource.BANGUMI)
    except httpx.HTTPError as exc:
        log.debug("Bangumi request failed", exc_info=True)
        return Err(ErrorKind.NETWORK, f"Bangumi request failed: {exc}", DataSource.BANGUMI)
    except (ValidationError, BangumiAPIError, json.JSONDecodeError) as exc:
        log.debug("Bangumi payload rejected", exc_info=True)
        return Err(
            ErrorKind.MALFORMED_RESPONSE,
            f"Unexpected Bangumi payload: {exc}",
            DataSource.BANGUMI,
        )
