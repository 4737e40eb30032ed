"""HTTP client for the VNDB Kana API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from galmeta.adapters.http_resilience import ResilientClient

from .schema import VN_FIELDS, VnQueryResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from galmeta.config.http_resilience import ResilienceConfig
    from galmeta.config.vndb import VndbConfig

# the API refuses larger pages
MAX_RESULTS = 100


class VndbAPIError(RuntimeError):
    """Raised when VNDB answers with an unexpected payload."""


class VndbClient:
    def __init__(
        self,
        *,
        config: VndbConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    async def fetch_vn(self, vn_id: str) -> VnQueryResponse:
        return await self._query(["id", "=", vn_id.lower()], limit=1)

    async def search_vns(self, name: str, *, limit: int) -> VnQueryResponse:
        return await self._query(["search", "=", name.strip()], limit=limit)

    async def _query(self, filters: list[str], *, limit: int) -> VnQueryResponse:
        body = {
            "filters": filters,
            "fields": VN_FIELDS,
            "results": max(1, min(limit, MAX_RESULTS)),
        }
        async with self._client_factory(self._resilience) as client:
            response = await client.post("/vn", json=body)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise VndbAPIError("Unexpected VNDB response payload")
        return VnQueryResponse.model_validate(payload)
