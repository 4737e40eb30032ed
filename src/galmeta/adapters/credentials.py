"""In-memory access-token cache with an expiry."""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = getLogger(__name__)

type TokenGrant = tuple[str, float | None]
"""An access token and its lifetime in seconds, if the server reported one."""


class TokenCache:
    """Holds one access token until it expires or is invalidated.

    Each adapter owns its own cache; nothing is shared between instances.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._token: str | None = None
        self._expires_at: float | None = None

    def get(self) -> str | None:
        if self._token is None:
            return None
        if self._expires_at is not None and self._clock() >= self._expires_at:
            log.debug("Cached access token expired")
            self.invalidate()
            return None
        return self._token

    def store(self, token: str, *, expires_in: float | None = None) -> None:
        """Cache ``token``; the shorter of ``expires_in`` and the configured TTL wins."""

        lifetimes = [value for value in (expires_in, self._ttl_seconds) if value is not None]
        self._token = token
        self._expires_at = self._clock() + min(lifetimes) if lifetimes else None

    def invalidate(self) -> None:
        self._token = None
        self._expires_at = None

    async def get_or_fetch(self, fetch: Callable[[], Awaitable[TokenGrant]]) -> str:
        token = self.get()
        if token is not None:
            return token
        token, expires_in = await fetch()
        self.store(token, expires_in=expires_in)
        return token
