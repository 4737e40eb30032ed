"""Application configuration helpers."""

from __future__ import annotations

from .bangumi import BangumiConfig, get_bangumi_config
from .env import optional_env_var
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .resolution import ResolutionConfig, get_resolution_config
from .storage import StorageConfig, get_storage_config
from .vndb import VndbConfig, get_vndb_config
from .ymgal import YmgalConfig, get_ymgal_config

__all__ = [
    "BangumiConfig",
    "CacheConfig",
    "ConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "ResolutionConfig",
    "RetryPolicy",
    "StorageConfig",
    "VndbConfig",
    "YmgalConfig",
    "configure_logging",
    "get_bangumi_config",
    "get_resolution_config",
    "get_storage_config",
    "get_vndb_config",
    "get_ymgal_config",
    "optional_env_var",
]
