"""Translate Bangumi payloads into source records."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from galmeta.domain.model import DataSource, SourceRecord

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .schema import SubjectPayload

ALIAS_KEY = "别名"
DEVELOPER_KEYS = frozenset({"开发", "游戏开发商", "开发商"})
SENSITIVE_TAG_KEYWORDS = ("台独", "港独", "藏独", "分裂", "反华", "辱华")

_DEVELOPER_SEPARATOR = re.compile(r"、|×")


def translate_subject(payload: SubjectPayload) -> SourceRecord:
    rating = payload.rating
    return SourceRecord(
        source=DataSource.BANGUMI,
        source_id=str(payload.id),
        name=payload.name,
        name_cn=payload.name_cn,
        aliases=_aliases(payload),
        tags=filter_sensitive_tags(tag.name for tag in payload.tags),
        summary=payload.summary,
        developer=_developer(payload),
        score=rating.score if rating is not None else None,
        rank=rating.rank if rating is not None else None,
        image=payload.images.large if payload.images is not None else None,
        date=payload.date,
        nsfw=payload.nsfw,
    )


def filter_sensitive_tags(tags: Iterable[str]) -> tuple[str, ...]:
    return tuple(
        tag for tag in tags if not any(keyword in tag for keyword in SENSITIVE_TAG_KEYWORDS)
    )


def _aliases(payload: SubjectPayload) -> tuple[str, ...]:
    for item in payload.infobox:
        if item.key == ALIAS_KEY:
            return tuple(value for value in item.values() if value)
    return ()


def _developer(payload: SubjectPayload) -> str | None:
    names = [
        name.strip()
        for item in payload.infobox
        if item.key in DEVELOPER_KEYS
        for value in item.values()
        for name in _DEVELOPER_SEPARATOR.split(value)
        if name.strip()
    ]
    return "/".join(names) or None
