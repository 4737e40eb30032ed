"""Metadata resolution: fan-out lookup, merge and update diffs."""

from __future__ import annotations

from .diff import (
    CLEARED,
    UNCHANGED,
    Cleared,
    FieldChange,
    GameEditForm,
    SetTo,
    Unchanged,
    UpdatePayload,
    apply_payload,
    build_update_payload,
    diff_array,
    diff_bool,
    diff_scalar,
    payload_from_refresh,
)
from .merge import SourceRecords, determine_id_type, merge_records, refresh_display
from .resolver import MixedResolver, extract_name, safe_fetch
from .service import MetadataService, apply_defaults
from .timeouts import await_outcome

__all__ = [
    "CLEARED",
    "UNCHANGED",
    "Cleared",
    "FieldChange",
    "GameEditForm",
    "MetadataService",
    "MixedResolver",
    "SetTo",
    "SourceRecords",
    "Unchanged",
    "UpdatePayload",
    "apply_defaults",
    "apply_payload",
    "await_outcome",
    "build_update_payload",
    "determine_id_type",
    "diff_array",
    "diff_bool",
    "diff_scalar",
    "extract_name",
    "merge_records",
    "payload_from_refresh",
    "refresh_display",
    "safe_fetch",
]
