"""Pydantic models describing the Bangumi API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class BangumiBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class InfoboxValue(BangumiBaseModel):
    v: str
    k: str | None = None


class InfoboxItem(BangumiBaseModel):
    key: str
    value: str | list[InfoboxValue | str] = ""

    def values(self) -> list[str]:
        if isinstance(self.value, str):
            return [self.value]
        return [item if isinstance(item, str) else item.v for item in self.value]


class SubjectTag(BangumiBaseModel):
    name: str
    count: int | None = None


class SubjectRating(BangumiBaseModel):
    rank: int | None = None
    score: float | None = None
    total: int | None = None


class SubjectImages(BangumiBaseModel):
    large: str | None = None
    common: str | None = None
    medium: str | None = None

    _normalize_urls = field_validator("large", "common", "medium", mode="before")(_blank_to_none)


class SubjectPayload(BangumiBaseModel):
    id: int
    type: int | None = None
    name: str = ""
    name_cn: str | None = None
    summary: str | None = None
    date: str | None = None
    nsfw: bool | None = None
    images: SubjectImages | None = None
    tags: list[SubjectTag] = Field(default_factory=list["SubjectTag"])
    infobox: list[InfoboxItem] = Field(default_factory=list["InfoboxItem"])
    rating: SubjectRating | None = None

    _normalize_text = field_validator("name_cn", "summary", "date", mode="before")(_blank_to_none)


class SubjectSearchResponse(BangumiBaseModel):
    total: int = 0
    limit: int | None = None
    offset: int | None = None
    data: list[SubjectPayload] = Field(default_factory=list["SubjectPayload"])
