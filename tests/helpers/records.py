"""Builders for catalog records."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from galmeta.domain.model import DataSource, SourceRecord


def make_bgm(source_id: str = "1001", **overrides: Any) -> SourceRecord:
    record = SourceRecord(
        source=DataSource.BANGUMI,
        source_id=source_id,
        name="Bangumi Name",
        name_cn="番组名",
        summary="Bangumi summary",
        developer="Key",
        score=8.1,
        rank=12,
        image="https://lain.bgm.tv/cover.jpg",
        date="2004-04-30",
        nsfw=False,
        tags=("泣きゲー", "校园"),
        aliases=("Clannad",),
    )
    return replace(record, **overrides)


def make_vndb(source_id: str = "v4", **overrides: Any) -> SourceRecord:
    record = SourceRecord(
        source=DataSource.VNDB,
        source_id=source_id,
        name="VNDB Name",
        summary="VNDB description",
        developer="Key",
        score=8.76,
        average_hours=65.3,
        all_titles=("CLANNAD", "クラナド"),
        image="https://t.vndb.org/cv/v4.jpg",
        date="2004-04-28",
        tags=("Drama", "校园"),
        aliases=("Kuranado",),
    )
    return replace(record, **overrides)


def make_ymgal(source_id: str = "5678", **overrides: Any) -> SourceRecord:
    record = SourceRecord(
        source=DataSource.YMGAL,
        source_id=source_id,
        name="YMGal Name",
        name_cn="团子大家族",
        summary="YMGal introduction",
        developer="Key社",
        image="https://store.ymgal.games/main.webp",
        date="2004-05-01",
        nsfw=True,
        aliases=("Clannad",),
    )
    return replace(record, **overrides)
