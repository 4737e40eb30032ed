"""Public domain model surface."""

from __future__ import annotations

from galmeta.domain.model.enums import DataSource, IdType
from galmeta.domain.model.records import (
    CustomOverride,
    MergedRecord,
    SourceRecord,
    is_ymgal_data_complete,
)

__all__ = [
    "CustomOverride",
    "DataSource",
    "IdType",
    "MergedRecord",
    "SourceRecord",
    "is_ymgal_data_complete",
]
