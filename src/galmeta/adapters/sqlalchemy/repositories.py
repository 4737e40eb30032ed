"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import insert, select, update

from galmeta.adapters.sqlalchemy.mappings import GAME_COLUMNS, games_table
from galmeta.domain.model import MergedRecord
from galmeta.domain.resolution.merge import refresh_display

if TYPE_CHECKING:
    from sqlalchemy import RowMapping
    from sqlalchemy.orm import Session

    from galmeta.domain.resolution.diff import UpdatePayload


class GameNotFoundError(LookupError):
    """Raised when updating a game id that is not stored."""


class SqlAlchemyGameRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def insert(self, record: MergedRecord) -> int:
        now = datetime.now(UTC)
        values = {name: getattr(record, name) for name in GAME_COLUMNS}
        stmt = insert(games_table).values(**values, created_at=now, updated_at=now)
        result = self.session.execute(stmt)
        return int(result.inserted_primary_key[0])  # pyright: ignore[reportOptionalSubscript]

    def update(self, game_id: int, payload: UpdatePayload) -> None:
        """Apply ``payload``: skipped keys stay, ``None`` clears, values overwrite."""

        values = payload.to_patch()
        if not values:
            if self.get(game_id) is None:
                raise GameNotFoundError(f"No game with id {game_id}")
            return
        stmt = (
            update(games_table)
            .where(games_table.c.id == game_id)
            .values(**values, updated_at=datetime.now(UTC))
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            raise GameNotFoundError(f"No game with id {game_id}")

    def get(self, game_id: int) -> MergedRecord | None:
        stmt = select(games_table).where(games_table.c.id == game_id)
        row = self.session.execute(stmt).mappings().one_or_none()
        return _to_record(row) if row is not None else None

    def list_all(self) -> list[MergedRecord]:
        stmt = select(games_table).order_by(games_table.c.id)
        return [_to_record(row) for row in self.session.execute(stmt).mappings()]


def _to_record(row: RowMapping) -> MergedRecord:
    return refresh_display(MergedRecord(**{key: row[key] for key in row.keys()}))  # noqa: SIM118
