"""Configuration types for the catalog HTTP clients."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace

import httpx

from .env import float_env_var, optional_env_var
from .errors import ConfigurationError

CACHE_ENV = "GALMETA_HTTP_CACHE"
CACHE_TTL_ENV = "GALMETA_HTTP_CACHE_TTL_SECONDS"
DEFAULT_CACHE_TTL_SECONDS = 6 * 60 * 60.0


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    total: int = 3
    backoff_factor: float = 0.5
    max_backoff_wait: float = 30.0
    respect_retry_after_header: bool = True
    # catalog searches are POST requests and are safe to repeat
    allowed_methods: frozenset[str] = field(default_factory=lambda: frozenset({"GET", "POST"}))
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = DEFAULT_CACHE_TTL_SECONDS


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 20.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = field(default_factory=CacheConfig)
    default_headers: Mapping[str, str] | None = None

    def with_headers(self, headers: Mapping[str, str]) -> ResilienceConfig:
        """Return a copy whose default headers are extended by ``headers``."""

        merged = dict(self.default_headers or {})
        merged.update(headers)
        return replace(self, default_headers=merged)


def get_cache_config() -> CacheConfig | None:
    """Response cache for public catalog data.

    Responses are kept in ``http_cache.db`` under the data directory so they
    outlive the short-lived clients; ``GALMETA_HTTP_CACHE=off`` disables it.
    """

    mode = (optional_env_var(CACHE_ENV) or "sqlite").lower()
    if mode == "off":
        return None
    if mode != "sqlite":
        raise ConfigurationError(CACHE_ENV, f"must be sqlite or off, got {mode!r}")
    ttl = float_env_var(CACHE_TTL_ENV, DEFAULT_CACHE_TTL_SECONDS)
    return CacheConfig(default_ttl_seconds=ttl if ttl is None or ttl > 0 else None)
