"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class DataSource(StrEnum):
    """Catalogs that metadata is fetched from."""

    BANGUMI = "bgm"
    VNDB = "vndb"
    YMGAL = "ymgal"


class IdType(StrEnum):
    """Discriminator describing which source ids identify a stored game."""

    BANGUMI = "bgm"
    VNDB = "vndb"
    YMGAL = "ymgal"
    MIXED = "mixed"
    CUSTOM = "custom"
    UNKNOWN = "unknown"

    @classmethod
    def for_source(cls, source: DataSource) -> IdType:
        return cls(source.value)

    @property
    def source(self) -> DataSource | None:
        """The single source this id type stands for, if any."""

        try:
            return DataSource(self.value)
        except ValueError:
            return None
