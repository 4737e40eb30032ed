"""HTTP client for the YMGal open API.

Every call needs a client-credentials access token. The token lives in a
:class:`TokenCache`; when YMGal rejects it (HTTP 401/403 or the same codes in
the response envelope) the cache is invalidated and the call is retried once
with a fresh token.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from galmeta.adapters.credentials import TokenCache
from galmeta.adapters.http_resilience import ResilientClient

from .schema import (
    Envelope,
    GameArchive,
    GameDetail,
    GameListItem,
    GameSearchPage,
    OrganizationArchive,
    TokenResponse,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from galmeta.adapters.credentials import TokenGrant
    from galmeta.config.http_resilience import ResilienceConfig
    from galmeta.config.ymgal import YmgalConfig

log = getLogger(__name__)

_AUTH_CODES = frozenset({401, 403})
MAX_PAGE_SIZE = 20


class YmgalAPIError(RuntimeError):
    """Raised when YMGal reports an application-level error."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class YmgalAuthError(YmgalAPIError):
    """Raised when YMGal rejects the access token."""


class YmgalClient:
    def __init__(
        self,
        *,
        config: YmgalConfig,
        tokens: TokenCache | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._tokens = tokens or TokenCache(ttl_seconds=config.token_ttl_seconds)
        self._client_factory = client_factory or ResilientClient

    @property
    def tokens(self) -> TokenCache:
        return self._tokens

    async def fetch_game(self, gid: str) -> tuple[GameDetail | None, str | None]:
        """Return the game archive entry and its developer's display name."""

        async with self._client_factory(self._resilience) as client:
            data = await self._request(client, "/open/archive", {"gid": gid})
            game = GameArchive.model_validate(data or {}).game
            if game is None:
                return None, None
            developer = await self._organization_name(client, game.developer_id)
        return game, developer

    async def search_games(self, keyword: str, *, page_size: int) -> list[GameListItem]:
        params: dict[str, str | int] = {
            "mode": "list",
            "keyword": keyword.strip(),
            "pageNum": 1,
            "pageSize": max(1, min(page_size, MAX_PAGE_SIZE)),
        }
        async with self._client_factory(self._resilience) as client:
            data = await self._request(client, "/open/archive/search-game", params)
        return GameSearchPage.model_validate(data or {}).result

    async def _organization_name(self, client: ResilientClient, org_id: int | None) -> str | None:
        if not org_id:
            return None
        try:
            data = await self._request(client, "/open/archive", {"orgId": org_id})
        except (httpx.HTTPError, YmgalAPIError):
            log.debug("YMGal organization %s lookup failed", org_id, exc_info=True)
            return None
        org = OrganizationArchive.model_validate(data or {}).org
        if org is None:
            return None
        return org.chinese_name or org.name

    async def _request(
        self,
        client: ResilientClient,
        path: str,
        params: dict[str, str | int],
    ) -> dict[str, object] | None:
        token = await self._tokens.get_or_fetch(lambda: self._fetch_token(client))
        try:
            return await self._send(client, path, params, token)
        except YmgalAuthError:
            log.info("YMGal rejected the access token, requesting a new one")
            self._tokens.invalidate()
        token = await self._tokens.get_or_fetch(lambda: self._fetch_token(client))
        return await self._send(client, path, params, token)

    async def _send(
        self,
        client: ResilientClient,
        path: str,
        params: dict[str, str | int],
        token: str,
    ) -> dict[str, object] | None:
        response = await client.get(
            path, params=params, headers={"Authorization": f"Bearer {token}"}
        )
        if response.status_code in _AUTH_CODES:
            raise YmgalAuthError("YMGal rejected the access token", code=response.status_code)
        response.raise_for_status()

        envelope = Envelope.model_validate(response.json())
        if envelope.code in _AUTH_CODES:
            message = envelope.msg or "YMGal rejected the access token"
            raise YmgalAuthError(message, code=envelope.code)
        if not envelope.success or envelope.code != 0:
            raise YmgalAPIError(envelope.msg or "YMGal request failed", code=envelope.code)
        return envelope.data

    async def _fetch_token(self, client: ResilientClient) -> TokenGrant:
        log.debug("Requesting YMGal access token")
        response = await client.get(
            "/oauth/token",
            params={
                "grant_type": "client_credentials",
                "client_id": self._config.client_id,
                "client_secret": self._config.client_secret,
                "scope": self._config.scope,
            },
        )
        if response.status_code in _AUTH_CODES:
            raise YmgalAuthError("YMGal refused the client credentials", code=response.status_code)
        response.raise_for_status()
        grant = TokenResponse.model_validate(response.json())
        return grant.access_token, grant.expires_in
