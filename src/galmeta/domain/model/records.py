"""Game records: per-source catalog data, user overrides and the merged view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .enums import DataSource, IdType

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceRecord:
    """Normalized record returned by one catalog.

    ``rank`` is only reported by Bangumi, ``average_hours`` and ``all_titles``
    only by VNDB. The other sources leave them empty.
    """

    source: DataSource
    source_id: str
    name: str
    name_cn: str | None = None
    aliases: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    summary: str | None = None
    developer: str | None = None
    score: float | None = None
    rank: int | None = None
    average_hours: float | None = None
    all_titles: tuple[str, ...] = ()
    image: str | None = None
    date: str | None = None
    nsfw: bool | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CustomOverride:
    """User-authored partial record.

    Scalars replace the computed value when set; ``tags`` and ``aliases`` are
    added to the computed arrays.
    """

    name: str | None = None
    image: str | None = None
    summary: str | None = None
    developer: str | None = None
    nsfw: bool | None = None
    date: str | None = None
    tags: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return (
            self.name is None
            and self.image is None
            and self.summary is None
            and self.developer is None
            and self.nsfw is None
            and self.date is None
            and not self.tags
            and not self.aliases
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class MergedRecord:
    """Canonical game record: ids, per-source data and the flattened display fields."""

    id: int | None = None
    id_type: IdType = IdType.UNKNOWN
    bgm_id: str | None = None
    vndb_id: str | None = None
    ymgal_id: str | None = None

    bgm_data: SourceRecord | None = None
    vndb_data: SourceRecord | None = None
    ymgal_data: SourceRecord | None = None
    custom_data: CustomOverride | None = None

    date: str | None = None

    # library fields, owned by the user rather than by any catalog
    localpath: str | None = None
    savepath: str | None = None
    autosave: bool | None = None
    maxbackups: int | None = None
    clear: bool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    name: str | None = None
    name_cn: str | None = None
    image: str | None = None
    summary: str | None = None
    developer: str | None = None
    nsfw: bool | None = None
    score: float | None = None
    rank: int | None = None
    average_hours: float | None = None
    all_titles: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()

    def source_data(self, source: DataSource) -> SourceRecord | None:
        match source:
            case DataSource.BANGUMI:
                return self.bgm_data
            case DataSource.VNDB:
                return self.vndb_data
            case DataSource.YMGAL:
                return self.ymgal_data


def is_ymgal_data_complete(record: SourceRecord | None) -> bool:
    """Whether a YMGal record came from the detail endpoint.

    Search results in list mode carry neither a summary nor aliases.
    """

    return record is not None and bool(record.summary) and bool(record.aliases)
