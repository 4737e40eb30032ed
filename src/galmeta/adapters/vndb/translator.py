"""Translate VNDB payloads into source records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from galmeta.domain.model import DataSource, SourceRecord

if TYPE_CHECKING:
    from .schema import VisualNovelPayload

CHINESE_LANGS = frozenset({"zh-Hans", "zh-Hant", "zh"})


def translate_vn(payload: VisualNovelPayload, *, spoiler_level: int = 0) -> SourceRecord:
    main_title = next((title.title for title in payload.titles if title.main), "")
    chinese_title = next(
        (title.title for title in payload.titles if title.lang in CHINESE_LANGS), None
    )
    tags = sorted(payload.tags, key=lambda tag: tag.rating, reverse=True)
    developers = "/".join(developer.name for developer in payload.developers)
    return SourceRecord(
        source=DataSource.VNDB,
        source_id=payload.id,
        name=main_title,
        name_cn=chinese_title or None,
        aliases=tuple(payload.aliases),
        tags=tuple(tag.name for tag in tags if tag.spoiler <= spoiler_level),
        summary=payload.description or None,
        developer=developers or None,
        score=round(payload.rating / 10, 2) if payload.rating is not None else None,
        average_hours=(
            round(payload.length_minutes / 60, 1) if payload.length_minutes is not None else None
        ),
        all_titles=tuple(title.title for title in payload.titles),
        image=payload.image.url if payload.image is not None else None,
        date=payload.released or None,
    )
