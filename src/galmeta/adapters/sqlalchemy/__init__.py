"""SQLAlchemy adapter package for galmeta."""

from __future__ import annotations

from .mappings import create_all_tables, games_table, metadata
from .repositories import GameNotFoundError, SqlAlchemyGameRepository
from .unit_of_work import SqlAlchemyGameUnitOfWork, shutdown, startup

__all__ = [
    "GameNotFoundError",
    "SqlAlchemyGameRepository",
    "SqlAlchemyGameUnitOfWork",
    "create_all_tables",
    "games_table",
    "metadata",
    "shutdown",
    "startup",
]
