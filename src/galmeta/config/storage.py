"""Where galmeta keeps its game database and HTTP cache."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "galmeta"
GAMES_DB_FILENAME: Final[str] = "games.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Local files live under ``data_dir``; ``database_uri`` overrides the games store."""

    data_dir: Path
    database_uri: str | None = None

    def _file(self, filename: str) -> Path:
        directory = self.data_dir.expanduser().resolve()
        directory.mkdir(parents=True, exist_ok=True)
        return directory / filename

    def games_db_path(self) -> Path:
        return self._file(GAMES_DB_FILENAME)

    def http_cache_path(self) -> Path:
        return self._file(HTTP_CACHE_FILENAME)

    def games_db_uri(self) -> str:
        if self.database_uri:
            return self.database_uri
        return f"sqlite+pysqlite:///{self.games_db_path()}"


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = optional_env_var("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = optional_env_var("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    data_dir = optional_env_var("GALMETA_DATA_DIR")
    return StorageConfig(
        data_dir=Path(data_dir) if data_dir else _platform_data_home() / APP_DIR_NAME,
        database_uri=optional_env_var("DATABASE_URI"),
    )
