from __future__ import annotations

import pytest

from galmeta.config import (
    ConfigurationError,
    get_bangumi_config,
    get_resolution_config,
    get_vndb_config,
    get_ymgal_config,
    optional_env_var,
)
from galmeta.config.http_resilience import get_cache_config
from galmeta.config.ymgal import YMGAL_DEFAULT_CLIENT_ID


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    assert optional_env_var("EXAMPLE_VAR") is None


def test_bangumi_token_is_optional(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BGM_TOKEN", raising=False)
    monkeypatch.setenv("BGM_USER_AGENT", "tester/1.0")

    config = get_bangumi_config()

    assert config.token is None
    assert config.resilience.default_headers is not None
    assert config.resilience.default_headers["User-Agent"] == "tester/1.0"


def test_bangumi_token_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BGM_TOKEN", " secret ")

    assert get_bangumi_config().token == "secret"


def test_vndb_spoiler_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("VNDB_SPOILER_LEVEL", raising=False)
    assert get_vndb_config().spoiler_level == 0

    monkeypatch.setenv("VNDB_SPOILER_LEVEL", "2")
    assert get_vndb_config().spoiler_level == 2

    monkeypatch.setenv("VNDB_SPOILER_LEVEL", "3")
    with pytest.raises(ConfigurationError):
        get_vndb_config()

    monkeypatch.setenv("VNDB_SPOILER_LEVEL", "lots")
    with pytest.raises(ConfigurationError):
        get_vndb_config()


def test_ymgal_defaults_to_public_client(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("YMGAL_CLIENT_ID", raising=False)
    monkeypatch.setenv("YMGAL_TOKEN_TTL_SECONDS", "120")

    config = get_ymgal_config()

    assert config.client_id == YMGAL_DEFAULT_CLIENT_ID
    assert config.token_ttl_seconds == 120.0
    assert config.resilience.cache is None


def test_resolution_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GALMETA_TIMEOUT_SECONDS", "0")
    monkeypatch.setenv("GALMETA_NAME_SEARCH_LIMIT", "5")

    config = get_resolution_config()

    assert config.timeout_seconds is None
    assert config.name_search_limit == 5

    monkeypatch.setenv("GALMETA_NAME_SEARCH_LIMIT", "0")
    with pytest.raises(ConfigurationError):
        get_resolution_config()


def test_invalid_number_names_the_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GALMETA_TIMEOUT_SECONDS", "soon")

    with pytest.raises(ConfigurationError) as excinfo:
        get_resolution_config()

    assert excinfo.value.variable == "GALMETA_TIMEOUT_SECONDS"
    assert "soon" in str(excinfo.value)


def test_http_cache_defaults_to_sqlite(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GALMETA_HTTP_CACHE", raising=False)
    monkeypatch.delenv("GALMETA_HTTP_CACHE_TTL_SECONDS", raising=False)

    cache = get_cache_config()

    assert cache is not None
    assert cache.sqlite_path is None
    assert cache.default_ttl_seconds == 6 * 60 * 60.0
    assert get_bangumi_config().resilience.cache == cache


def test_http_cache_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GALMETA_HTTP_CACHE", "SQLite")
    monkeypatch.setenv("GALMETA_HTTP_CACHE_TTL_SECONDS", "0")

    cache = get_cache_config()

    assert cache is not None
    assert cache.default_ttl_seconds is None

    monkeypatch.setenv("GALMETA_HTTP_CACHE", "off")
    assert get_cache_config() is None
    assert get_vndb_config().resilience.cache is None

    monkeypatch.setenv("GALMETA_HTTP_CACHE", "memory")
    with pytest.raises(ConfigurationError) as excinfo:
        get_cache_config()
    assert excinfo.value.variable == "GALMETA_HTTP_CACHE"
