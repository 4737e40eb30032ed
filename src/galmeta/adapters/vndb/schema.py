"""Pydantic models describing the VNDB Kana API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# fields requested from POST /vn, in the API's dotted selection syntax
VN_FIELDS = (
    "id,titles.title,titles.lang,titles.main,aliases,image.url,released,rating,"
    "tags.name,tags.rating,tags.spoiler,description,developers.name,length_minutes"
)


class VndbBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class VnTitle(VndbBaseModel):
    title: str
    lang: str | None = None
    main: bool = False


class VnImage(VndbBaseModel):
    url: str | None = None


class VnTag(VndbBaseModel):
    name: str
    rating: float = 0.0
    spoiler: int = 0


class VnDeveloper(VndbBaseModel):
    name: str


class VisualNovelPayload(VndbBaseModel):
    id: str
    titles: list[VnTitle] = Field(default_factory=list["VnTitle"])
    aliases: list[str] = Field(default_factory=list[str])
    image: VnImage | None = None
    released: str | None = None
    rating: float | None = None
    tags: list[VnTag] = Field(default_factory=list["VnTag"])
    description: str | None = None
    developers: list[VnDeveloper] = Field(default_factory=list["VnDeveloper"])
    length_minutes: int | None = None


class VnQueryResponse(VndbBaseModel):
    results: list[VisualNovelPayload] = Field(default_factory=list["VisualNovelPayload"])
    more: bool = False
