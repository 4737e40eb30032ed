"""Ports for persisting game records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from galmeta.domain.model import MergedRecord
    from galmeta.domain.resolution.diff import UpdatePayload


@runtime_checkable
class GameRepository(Protocol):
    """Persistence contract for games.

    ``update`` must keep the three change states apart: ``Unchanged`` leaves
    the column alone, ``Cleared`` writes NULL and ``SetTo`` overwrites.
    """

    def insert(self, record: MergedRecord) -> int: ...

    def update(self, game_id: int, payload: UpdatePayload) -> None: ...

    def get(self, game_id: int) -> MergedRecord | None: ...

    def list_all(self) -> list[MergedRecord]: ...
