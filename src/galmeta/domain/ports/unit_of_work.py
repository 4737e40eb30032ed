"""Transaction boundary around the game store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from galmeta.domain.ports.persistence import GameRepository


@runtime_checkable
class GameUnitOfWork(Protocol):
    """Context manager yielding a game repository.

    Leaving the block with an exception discards pending changes; anything not
    committed explicitly is dropped when the block ends.
    """

    @property
    def games(self) -> GameRepository: ...

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
