"""Bangumi catalog adapter."""

from __future__ import annotations

from .client import BangumiAPIError, BangumiClient
from .fetcher import BangumiSource

__all__ = ["BangumiAPIError", "BangumiClient", "BangumiSource"]
