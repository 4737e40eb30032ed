"""Merge per-source catalog records into one display record.

Field priorities:

- ``date``: Bangumi, then VNDB, then YMGal.
- ``name``, ``name_cn``, ``image``, ``developer``, ``nsfw``: Bangumi, then VNDB,
  then YMGal for mixed records; a single-source record reads its own source.
- ``summary``: YMGal, then Bangumi, then VNDB for mixed records. This order
  differs from the basic fields on purpose; stored records depend on it.
- ``score``: Bangumi, then VNDB. ``rank`` comes from Bangumi only,
  ``average_hours`` and ``all_titles`` from VNDB only.
- ``tags`` and ``aliases``: de-duplicated union over every source.

A custom override is applied last: its scalars replace, its arrays are added.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, TypedDict

from galmeta.domain.identifiers import GameIdentifierSet
from galmeta.domain.model import DataSource, IdType, MergedRecord

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from galmeta.domain.model import CustomOverride, SourceRecord

_BASIC_PRIORITY = (DataSource.BANGUMI, DataSource.VNDB, DataSource.YMGAL)
_SUMMARY_PRIORITY = (DataSource.YMGAL, DataSource.BANGUMI, DataSource.VNDB)
_DATE_PRIORITY = (DataSource.BANGUMI, DataSource.VNDB, DataSource.YMGAL)
_SCORE_PRIORITY = (DataSource.BANGUMI, DataSource.VNDB)


@dataclass(frozen=True, slots=True)
class SourceRecords:
    """What each catalog returned for one resolution; ``None`` means no data."""

    bgm: SourceRecord | None = None
    vndb: SourceRecord | None = None
    ymgal: SourceRecord | None = None

    @classmethod
    def of(cls, record: MergedRecord) -> SourceRecords:
        return cls(bgm=record.bgm_data, vndb=record.vndb_data, ymgal=record.ymgal_data)

    def get(self, source: DataSource) -> SourceRecord | None:
        match source:
            case DataSource.BANGUMI:
                return self.bgm
            case DataSource.VNDB:
                return self.vndb
            case DataSource.YMGAL:
                return self.ymgal

    def with_record(self, record: SourceRecord) -> SourceRecords:
        match record.source:
            case DataSource.BANGUMI:
                return replace(self, bgm=record)
            case DataSource.VNDB:
                return replace(self, vndb=record)
            case DataSource.YMGAL:
                return replace(self, ymgal=record)

    def present(self) -> tuple[SourceRecord, ...]:
        return tuple(record for record in (self.bgm, self.vndb, self.ymgal) if record is not None)

    def is_empty(self) -> bool:
        return not self.present()

    def ids(self) -> GameIdentifierSet:
        ids = GameIdentifierSet()
        for record in self.present():
            ids = ids.with_id(record.source, record.source_id)
        return ids


class _DisplayFields(TypedDict):
    date: str | None
    name: str | None
    name_cn: str | None
    image: str | None
    summary: str | None
    developer: str | None
    nsfw: bool | None
    score: float | None
    rank: int | None
    average_hours: float | None
    all_titles: tuple[str, ...]
    tags: tuple[str, ...]
    aliases: tuple[str, ...]


def determine_id_type(ids: GameIdentifierSet, *, manual: bool = False) -> IdType:
    """Derive ``id_type`` from the non-empty ids alone, regardless of fetch outcome."""

    sources = ids.sources()
    if len(sources) >= 2:  # noqa: PLR2004
        return IdType.MIXED
    if sources:
        return IdType.for_source(sources[0])
    return IdType.CUSTOM if manual else IdType.UNKNOWN


def merge_records(
    records: SourceRecords,
    *,
    ids: GameIdentifierSet | None = None,
    custom: CustomOverride | None = None,
    manual: bool = False,
    base: MergedRecord | None = None,
) -> MergedRecord:
    """Build a :class:`MergedRecord` from catalog data.

    ``ids`` are the ids the caller already knows; ids of returned records are
    added to them. ``base`` supplies storage and library fields (and ids and
    custom data when not given explicitly). Never raises.
    """

    if ids is None:
        ids = GameIdentifierSet.of(base) if base is not None else GameIdentifierSet()
    known_ids = ids.union(records.ids())
    if custom is None and base is not None:
        custom = base.custom_data
    id_type = determine_id_type(known_ids, manual=manual)

    merged = replace(
        base or MergedRecord(),
        id_type=id_type,
        bgm_id=known_ids.bgm_id,
        vndb_id=known_ids.vndb_id,
        ymgal_id=known_ids.ymgal_id,
        bgm_data=records.bgm,
        vndb_data=records.vndb,
        ymgal_data=records.ymgal,
        custom_data=custom,
    )
    return replace(merged, **_display_fields(id_type, records, custom, fallback_date=merged.date))


def refresh_display(record: MergedRecord) -> MergedRecord:
    """Recompute the display fields of a stored record, keeping its ``id_type``."""

    fields = _display_fields(
        record.id_type,
        SourceRecords.of(record),
        record.custom_data,
        fallback_date=record.date,
    )
    return replace(record, **fields)


def _display_fields(
    id_type: IdType,
    records: SourceRecords,
    custom: CustomOverride | None,
    *,
    fallback_date: str | None,
) -> _DisplayFields:
    single = id_type.source
    basic_order = (single,) if single is not None else _BASIC_PRIORITY
    summary_order = (single,) if single is not None else _SUMMARY_PRIORITY

    def pick[T](
        order: Iterable[DataSource], getter: Callable[[SourceRecord], T | None]
    ) -> T | None:
        for source in order:
            record = records.get(source)
            if record is None:
                continue
            value = getter(record)
            if value is not None and value != "":
                return value
        return None

    present = records.present()
    vndb = records.vndb
    fields = _DisplayFields(
        date=pick(_DATE_PRIORITY, lambda r: r.date) or fallback_date,
        name=pick(basic_order, lambda r: r.name),
        name_cn=pick(basic_order, lambda r: r.name_cn),
        image=pick(basic_order, lambda r: r.image),
        summary=pick(summary_order, lambda r: r.summary),
        developer=pick(basic_order, lambda r: r.developer),
        nsfw=pick(basic_order, lambda r: r.nsfw),
        score=pick(_SCORE_PRIORITY, lambda r: r.score),
        rank=records.bgm.rank if records.bgm is not None else None,
        average_hours=vndb.average_hours if vndb is not None else None,
        all_titles=vndb.all_titles if vndb is not None else (),
        tags=_union(*(record.tags for record in present)),
        aliases=_union(*(record.aliases for record in present)),
    )
    if custom is not None:
        _apply_custom(fields, custom)
    return fields


def _apply_custom(fields: _DisplayFields, custom: CustomOverride) -> None:
    if custom.name is not None:
        fields["name"] = custom.name
    if custom.image is not None:
        fields["image"] = custom.image
    if custom.summary is not None:
        fields["summary"] = custom.summary
    if custom.developer is not None:
        fields["developer"] = custom.developer
    if custom.nsfw is not None:
        fields["nsfw"] = custom.nsfw
    if custom.date is not None:
        fields["date"] = custom.date
    fields["tags"] = _union(fields["tags"], custom.tags)
    fields["aliases"] = _union(fields["aliases"], custom.aliases)


def _union(*arrays: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(item for array in arrays for item in array if item))
