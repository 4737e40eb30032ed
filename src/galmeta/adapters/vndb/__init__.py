"""VNDB catalog adapter."""

from __future__ import annotations

from .client import VndbAPIError, VndbClient
from .fetcher import VndbSource

__all__ = ["VndbAPIError", "VndbClient", "VndbSource"]
