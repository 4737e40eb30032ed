"""Defaults for metadata resolution calls."""

from __future__ import annotations

from dataclasses import dataclass

from .env import float_env_var, int_env_var
from .errors import ConfigurationError

DEFAULT_RESOLUTION_TIMEOUT_SECONDS = 30.0
DEFAULT_NAME_SEARCH_LIMIT = 25


@dataclass(frozen=True, slots=True)
class ResolutionConfig:
    timeout_seconds: float | None = DEFAULT_RESOLUTION_TIMEOUT_SECONDS
    name_search_limit: int = DEFAULT_NAME_SEARCH_LIMIT


def get_resolution_config() -> ResolutionConfig:
    timeout = float_env_var("GALMETA_TIMEOUT_SECONDS", DEFAULT_RESOLUTION_TIMEOUT_SECONDS)
    if timeout is not None and timeout <= 0:
        timeout = None
    limit = int_env_var("GALMETA_NAME_SEARCH_LIMIT", DEFAULT_NAME_SEARCH_LIMIT)
    if limit < 1:
        raise ConfigurationError("GALMETA_NAME_SEARCH_LIMIT", f"must be positive, got {limit}")
    return ResolutionConfig(timeout_seconds=timeout, name_search_limit=limit)
