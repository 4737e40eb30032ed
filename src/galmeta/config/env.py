"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable


def optional_env_var(name: str) -> str | None:
    """Return an environment variable, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def int_env_var(name: str, default: int) -> int:
    return _parsed_env_var(name, default, int, "must be an integer")


def float_env_var(name: str, default: float | None) -> float | None:
    return _parsed_env_var(name, default, float, "must be a number")


def _parsed_env_var[T, D](name: str, default: D, parse: Callable[[str], T], hint: str) -> T | D:
    value = optional_env_var(name)
    if value is None:
        return default
    try:
        return parse(value)
    except ValueError as exc:
        raise ConfigurationError(name, f"{hint}, got {value!r}") from exc
