"""Classify free-text queries into catalog identifiers."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from galmeta.domain.model.enums import DataSource

if TYPE_CHECKING:
    from galmeta.domain.model import MergedRecord

_VNDB_ID = re.compile(r"^v\d+$", re.IGNORECASE)
_YMGAL_ID = re.compile(r"^ga(\d+)$", re.IGNORECASE)
_NUMERIC_ID = re.compile(r"^\d+$")


@dataclass(frozen=True, slots=True)
class GameIdentifierSet:
    """Known catalog ids for one game, at most one per source."""

    bgm_id: str | None = None
    vndb_id: str | None = None
    ymgal_id: str | None = None

    @classmethod
    def of(cls, record: MergedRecord) -> GameIdentifierSet:
        return cls(bgm_id=record.bgm_id, vndb_id=record.vndb_id, ymgal_id=record.ymgal_id)

    @property
    def count(self) -> int:
        return len(self.sources())

    def is_empty(self) -> bool:
        return self.count == 0

    def sources(self) -> tuple[DataSource, ...]:
        """Sources with a non-empty id, in Bangumi, VNDB, YMGal order."""

        return tuple(source for source in DataSource if self.get(source))

    def get(self, source: DataSource) -> str | None:
        match source:
            case DataSource.BANGUMI:
                value = self.bgm_id
            case DataSource.VNDB:
                value = self.vndb_id
            case DataSource.YMGAL:
                value = self.ymgal_id
        return value or None

    def with_id(self, source: DataSource, value: str | None) -> GameIdentifierSet:
        match source:
            case DataSource.BANGUMI:
                return replace(self, bgm_id=value)
            case DataSource.VNDB:
                return replace(self, vndb_id=value)
            case DataSource.YMGAL:
                return replace(self, ymgal_id=value)

    def union(self, other: GameIdentifierSet) -> GameIdentifierSet:
        """Combine two sets; ids already present here win."""

        return GameIdentifierSet(
            bgm_id=self.bgm_id or other.bgm_id,
            vndb_id=self.vndb_id or other.vndb_id,
            ymgal_id=self.ymgal_id or other.ymgal_id,
        )


def classify(query: str) -> GameIdentifierSet:
    """Return the identifier a query stands for.

    Patterns are tried in a fixed order: ``v123`` is a VNDB id, ``ga123`` a
    YMGal id (the prefix is dropped) and a bare number a Bangumi id. Anything
    else is a name query and yields an empty set. A bare number is never read
    as a YMGal id even though YMGal accepts numeric ids.
    """

    if _VNDB_ID.match(query):
        return GameIdentifierSet(vndb_id=query)
    if match := _YMGAL_ID.match(query):
        return GameIdentifierSet(ymgal_id=match.group(1))
    if _NUMERIC_ID.match(query):
        return GameIdentifierSet(bgm_id=query)
    return GameIdentifierSet()


def is_id_query(query: str) -> bool:
    return bool(_VNDB_ID.match(query) or _YMGAL_ID.match(query) or _NUMERIC_ID.match(query))


def is_valid_game_id(value: str, source: DataSource) -> bool:
    match source:
        case DataSource.BANGUMI:
            return bool(_NUMERIC_ID.match(value))
        case DataSource.VNDB:
            return bool(_VNDB_ID.match(value))
        case DataSource.YMGAL:
            return bool(_YMGAL_ID.match(value) or _NUMERIC_ID.match(value))


def normalize_ymgal_id(value: str) -> str:
    """Strip the ``ga`` prefix from a YMGal id, if present."""

    if match := _YMGAL_ID.match(value):
        return match.group(1)
    return value


def normalize_game_id(value: str, source: DataSource) -> str:
    """Canonical stored form: trimmed, VNDB lowercased, YMGal without ``ga``."""

    value = value.strip()
    match source:
        case DataSource.VNDB:
            return value.lower()
        case DataSource.YMGAL:
            return normalize_ymgal_id(value)
        case DataSource.BANGUMI:
            return value
