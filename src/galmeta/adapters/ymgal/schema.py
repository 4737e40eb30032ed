"""Pydantic models describing the YMGal open API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class YmgalBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TokenResponse(YmgalBaseModel):
    access_token: str
    token_type: str | None = None
    expires_in: float | None = None


class Envelope(YmgalBaseModel):
    """Wrapper around every open-archive answer."""

    success: bool = False
    code: int = 0
    msg: str | None = None
    data: dict[str, object] | None = None


class ExtensionName(YmgalBaseModel):
    name: str = ""
    type: str | None = None
    desc: str | None = None


class GameDetail(YmgalBaseModel):
    gid: int
    developer_id: int | None = Field(default=None, alias="developerId")
    release_date: str | None = Field(default=None, alias="releaseDate")
    restricted: bool | None = None
    name: str = ""
    chinese_name: str | None = Field(default=None, alias="chineseName")
    extension_name: list[ExtensionName] = Field(
        default_factory=list["ExtensionName"], alias="extensionName"
    )
    introduction: str | None = None
    main_img: str | None = Field(default=None, alias="mainImg")

    _normalize_text = field_validator(
        "release_date", "chinese_name", "introduction", "main_img", mode="before"
    )(_blank_to_none)


class GameArchive(YmgalBaseModel):
    game: GameDetail | None = None


class Organization(YmgalBaseModel):
    org_id: int | None = Field(default=None, alias="orgId")
    name: str | None = None
    chinese_name: str | None = Field(default=None, alias="chineseName")

    _normalize_names = field_validator("name", "chinese_name", mode="before")(_blank_to_none)


class OrganizationArchive(YmgalBaseModel):
    org: Organization | None = None


class GameListItem(YmgalBaseModel):
    id: int
    org_id: int | None = Field(default=None, alias="orgId")
    org_name: str | None = Field(default=None, alias="orgName")
    release_date: str | None = Field(default=None, alias="releaseDate")
    restricted: bool | None = None
    name: str = ""
    chinese_name: str | None = Field(default=None, alias="chineseName")
    main_img: str | None = Field(default=None, alias="mainImg")

    _normalize_text = field_validator(
        "org_name", "release_date", "chinese_name", "main_img", mode="before"
    )(_blank_to_none)


class GameSearchPage(YmgalBaseModel):
    result: list[GameListItem] = Field(default_factory=list["GameListItem"])
    total: int | None = None
