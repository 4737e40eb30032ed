"""HTTP client for the Bangumi API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from galmeta.adapters.http_resilience import ResilientClient

from .schema import SubjectPayload, SubjectSearchResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from galmeta.config.bangumi import BangumiConfig
    from galmeta.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

GAME_SUBJECT_TYPE = 4


class BangumiAPIError(RuntimeError):
    """Raised when Bangumi answers with an unexpected payload."""


class BangumiClient:
    """Low-level client for the subject endpoints of the Bangumi API."""

    def __init__(
        self,
        *,
        config: BangumiConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    async def fetch_subject(self, subject_id: str, *, token: str) -> SubjectPayload:
        async with self._client_factory(self._resilience) as client:
            response = await client.get(f"/v0/subjects/{subject_id}", headers=_auth(token))
        return SubjectPayload.model_validate(_json_object(response))

    async def search_games(self, keyword: str, *, token: str, limit: int) -> SubjectSearchResponse:
        body = {"keyword": keyword.strip(), "filter": {"type": [GAME_SUBJECT_TYPE]}}
        async with self._client_factory(self._resilience) as client:
            response = await client.post(
                "/v0/search/subjects",
                json=body,
                params={"limit": str(limit)},
                headers=_auth(token),
            )
        return SubjectSearchResponse.model_validate(_json_object(response))


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _json_object(response: httpx.Response) -> dict[str, object]:
    response.raise_for_status()
    payload = response.json()
    if not isinstance(payload, dict):
        raise BangumiAPIError("Unexpected Bangumi response payload")
    return payload
