"""Bangumi configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from galmeta import __version__

from .env import optional_env_var
from .http_resilience import RateLimit, ResilienceConfig, get_cache_config

BANGUMI_BASE_URL = "https://api.bgm.tv"
BANGUMI_USER_AGENT = f"galmeta/{__version__} (https://pypi.org/project/galmeta/)"


@dataclass(frozen=True, slots=True)
class BangumiConfig:
    """Bangumi settings; the access token is optional and only gates requests."""

    resilience: ResilienceConfig
    token: str | None = None


def get_bangumi_config(*, resilience: ResilienceConfig | None = None) -> BangumiConfig:
    user_agent = optional_env_var("BGM_USER_AGENT") or BANGUMI_USER_AGENT
    return BangumiConfig(
        token=optional_env_var("BGM_TOKEN"),
        resilience=resilience
        or ResilienceConfig(
            name="bangumi",
            base_url=BANGUMI_BASE_URL,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            cache=get_cache_config(),
            default_headers={"Accept": "application/json", "User-Agent": user_agent},
        ),
    )
