"""Domain ports."""

from __future__ import annotations

from galmeta.domain.ports.catalog import DEFAULT_SEARCH_LIMIT, CatalogSource
from galmeta.domain.ports.persistence import GameRepository
from galmeta.domain.ports.unit_of_work import GameUnitOfWork

__all__ = [
    "DEFAULT_SEARCH_LIMIT",
    "CatalogSource",
    "GameRepository",
    "GameUnitOfWork",
]
