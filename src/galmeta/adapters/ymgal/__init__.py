"""YMGal catalog adapter."""

from __future__ import annotations

from .client import YmgalAPIError, YmgalAuthError, YmgalClient
from .fetcher import YmgalSource

__all__ = ["YmgalAPIError", "YmgalAuthError", "YmgalClient", "YmgalSource"]
