"""Race a resolution against a timeout and a cancellation event.

Giving up only stops waiting: the underlying lookups keep running in the
background and their outcome is discarded when they finish.
"""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from galmeta.domain.errors import ResolutionCancelledError, ResolutionTimeoutError

if TYPE_CHECKING:
    from collections.abc import Awaitable

log = getLogger(__name__)

_abandoned: set[asyncio.Future[object]] = set()


async def await_outcome[T](
    awaitable: Awaitable[T],
    *,
    timeout: float | None = None,
    cancel: asyncio.Event | None = None,
) -> T:
    """Await ``awaitable`` unless ``timeout`` expires or ``cancel`` is set first."""

    if timeout is None and cancel is None:
        return await awaitable

    task: asyncio.Future[T] = asyncio.ensure_future(awaitable)
    if cancel is not None and cancel.is_set():
        _abandon(task)
        raise ResolutionCancelledError("Resolution was cancelled before it started")

    cancel_waiter = asyncio.ensure_future(cancel.wait()) if cancel is not None else None
    waiters: set[asyncio.Future[object]] = {task}
    if cancel_waiter is not None:
        waiters.add(cancel_waiter)
    try:
        done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        _abandon(task)
        raise
    finally:
        if cancel_waiter is not None:
            cancel_waiter.cancel()

    if cancel_waiter is not None and cancel_waiter in done:
        _abandon(task)
        raise ResolutionCancelledError("Resolution was cancelled")
    if task in done:
        return task.result()
    _abandon(task)
    raise ResolutionTimeoutError(f"Resolution did not finish within {timeout} seconds")


def _abandon(task: asyncio.Future[object]) -> None:
    if task.done():
        _discard(task)
        return
    _abandoned.add(task)
    task.add_done_callback(_discard)


def _discard(task: asyncio.Future[object]) -> None:
    _abandoned.discard(task)
    if task.cancelled():
        return
    if (exc := task.exception()) is not None:
        log.debug("Discarded outcome of abandoned resolution: %r", exc)
