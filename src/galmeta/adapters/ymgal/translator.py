"""Translate YMGal payloads into source records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from galmeta.domain.model import DataSource, SourceRecord

if TYPE_CHECKING:
    from .schema import GameDetail, GameListItem


def translate_game(game: GameDetail, *, developer: str | None = None) -> SourceRecord:
    return SourceRecord(
        source=DataSource.YMGAL,
        source_id=str(game.gid),
        name=game.name,
        name_cn=game.chinese_name,
        aliases=tuple(ext.name for ext in game.extension_name if ext.name),
        summary=game.introduction,
        developer=developer,
        image=game.main_img,
        date=game.release_date,
        nsfw=game.restricted,
    )


def translate_list_item(item: GameListItem) -> SourceRecord:
    """List-mode results carry no summary or aliases."""

    return SourceRecord(
        source=DataSource.YMGAL,
        source_id=str(item.id),
        name=item.name,
        name_cn=item.chinese_name,
        developer=item.org_name,
        image=item.main_img,
        date=item.release_date,
        nsfw=item.restricted,
    )
