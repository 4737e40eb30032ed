"""YMGal configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import float_env_var, optional_env_var
from .http_resilience import RateLimit, ResilienceConfig

YMGAL_BASE_URL = "https://www.ymgal.games"
# public client registered for open-archive access
YMGAL_DEFAULT_CLIENT_ID = "ymgal"
YMGAL_DEFAULT_CLIENT_SECRET = "luna0327"  # noqa: S105
YMGAL_SCOPE = "public"
YMGAL_DEFAULT_TOKEN_TTL_SECONDS = 3600.0


@dataclass(frozen=True, slots=True)
class YmgalConfig:
    resilience: ResilienceConfig
    client_id: str = YMGAL_DEFAULT_CLIENT_ID
    client_secret: str = YMGAL_DEFAULT_CLIENT_SECRET
    scope: str = YMGAL_SCOPE
    token_ttl_seconds: float | None = YMGAL_DEFAULT_TOKEN_TTL_SECONDS


def get_ymgal_config(*, resilience: ResilienceConfig | None = None) -> YmgalConfig:
    return YmgalConfig(
        client_id=optional_env_var("YMGAL_CLIENT_ID") or YMGAL_DEFAULT_CLIENT_ID,
        client_secret=optional_env_var("YMGAL_CLIENT_SECRET") or YMGAL_DEFAULT_CLIENT_SECRET,
        token_ttl_seconds=float_env_var("YMGAL_TOKEN_TTL_SECONDS", YMGAL_DEFAULT_TOKEN_TTL_SECONDS),
        resilience=resilience
        or ResilienceConfig(
            name="ymgal",
            base_url=YMGAL_BASE_URL,
            ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
            # responses depend on the bearer token, never share them
            cache=None,
            default_headers={"Accept": "application/json;charset=utf-8", "version": "1"},
        ),
    )
