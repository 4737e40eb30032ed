"""SQLAlchemy table metadata for stored games."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
)

from galmeta.domain.model import CustomOverride, DataSource, IdType, SourceRecord

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)

_ARRAY_FIELDS = frozenset({"aliases", "tags", "all_titles"})


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _load_object(value: str | None) -> dict[str, Any] | None:
    if value is None:
        return None
    loaded = json.loads(value)
    if not isinstance(loaded, dict):
        return None
    data = cast(dict[str, Any], loaded)
    for name in _ARRAY_FIELDS.intersection(data):
        data[name] = tuple(data[name] or ())
    return data


class SourceRecordType(TypeDecorator[SourceRecord]):
    """Stores a catalog record as a JSON object."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: SourceRecord | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(asdict(value), ensure_ascii=False)

    def process_result_value(self, value: str | None, dialect: Dialect) -> SourceRecord | None:
        _ = dialect
        data = _load_object(value)
        if data is None:
            return None
        data["source"] = DataSource(data["source"])
        return SourceRecord(**data)


class CustomOverrideType(TypeDecorator[CustomOverride]):
    impl = Text
    cache_ok = True

    def process_bind_param(self, value: CustomOverride | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(asdict(value), ensure_ascii=False)

    def process_result_value(self, value: str | None, dialect: Dialect) -> CustomOverride | None:
        _ = dialect
        data = _load_object(value)
        if data is None:
            return None
        return CustomOverride(**data)


games_table = Table(
    "games",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("bgm_id", String, nullable=True, index=True),
    Column("vndb_id", String, nullable=True, index=True),
    Column("ymgal_id", String, nullable=True, index=True),
    Column(
        "id_type",
        Enum(IdType, native_enum=False, values_callable=lambda enum: [item.value for item in enum]),
        nullable=False,
        default=IdType.UNKNOWN,
    ),
    Column("date", String, nullable=True),
    Column("localpath", String, nullable=True),
    Column("savepath", String, nullable=True),
    Column("autosave", Boolean, nullable=True),
    Column("maxbackups", Integer, nullable=True),
    Column("clear", Boolean, nullable=True),
    Column("bgm_data", SourceRecordType, nullable=True),
    Column("vndb_data", SourceRecordType, nullable=True),
    Column("ymgal_data", SourceRecordType, nullable=True),
    Column("custom_data", CustomOverrideType, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)

# columns a caller may write; ``id`` and the timestamps are managed here
GAME_COLUMNS: tuple[str, ...] = tuple(
    column.name
    for column in games_table.columns
    if column.name not in {"id", "created_at", "updated_at"}
)


def create_all_tables(bind: Engine | Connection) -> None:
    metadata.create_all(bind)
