"""VNDB configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import int_env_var
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, get_cache_config

VNDB_BASE_URL = "https://api.vndb.org/kana"
MAX_SPOILER_LEVEL = 2


@dataclass(frozen=True, slots=True)
class VndbConfig:
    resilience: ResilienceConfig
    spoiler_level: int = 0


def get_vndb_config(*, resilience: ResilienceConfig | None = None) -> VndbConfig:
    spoiler_level = int_env_var("VNDB_SPOILER_LEVEL", 0)
    if not 0 <= spoiler_level <= MAX_SPOILER_LEVEL:
        raise ConfigurationError(
            "VNDB_SPOILER_LEVEL", f"must be between 0 and {MAX_SPOILER_LEVEL}, got {spoiler_level}"
        )
    return VndbConfig(
        spoiler_level=spoiler_level,
        resilience=resilience
        or ResilienceConfig(
            name="vndb",
            base_url=VNDB_BASE_URL,
            # the public API allows 200 requests per 5 minutes
            ratelimit=RateLimit(max_calls=200, per_seconds=300.0),
            cache=get_cache_config(),
            default_headers={"Accept": "application/json"},
        ),
    )
