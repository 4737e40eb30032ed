"""Three-state field diffs used to build partial updates.

Every updatable column carries a :data:`FieldChange`: ``Unchanged`` leaves
the stored value alone, ``Cleared`` writes NULL and ``SetTo`` overwrites.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING, Literal

from galmeta.domain.identifiers import GameIdentifierSet, normalize_game_id
from galmeta.domain.model import CustomOverride, DataSource, IdType

from .merge import determine_id_type, refresh_display

if TYPE_CHECKING:
    from collections.abc import Sequence

    from galmeta.domain.model import MergedRecord, SourceRecord


@dataclass(frozen=True, slots=True)
class Unchanged:
    kind: Literal["unchanged"] = "unchanged"


@dataclass(frozen=True, slots=True)
class Cleared:
    kind: Literal["cleared"] = "cleared"


@dataclass(frozen=True, slots=True)
class SetTo[T]:
    value: T
    kind: Literal["set"] = "set"


type FieldChange[T] = Unchanged | Cleared | SetTo[T]

UNCHANGED = Unchanged()
CLEARED = Cleared()


def diff_scalar[T: (str, int, float)](current: T | None, original: T | None) -> FieldChange[T]:
    """Diff a string or number against its stored value.

    A missing original counts as ``""`` or ``0``; strings are compared and
    stored trimmed.
    """

    if isinstance(current, str) or isinstance(original, str):
        current_text = (current or "").strip()
        original_text = (original or "").strip()
        if current_text == original_text:
            return UNCHANGED
        if not current_text:
            return CLEARED
        return SetTo(current_text)  # pyright: ignore[reportReturnType]

    original_number = original if original is not None else 0
    if current is None:
        return UNCHANGED if original_number == 0 else CLEARED
    if current == original_number:
        return UNCHANGED
    return SetTo(current)


def diff_array[T](current: Sequence[T], original: Sequence[T] | None) -> FieldChange[tuple[T, ...]]:
    current_items = tuple(current)
    original_items = tuple(original) if original is not None else ()
    if current_items == original_items:
        return UNCHANGED
    if not current_items:
        return CLEARED
    return SetTo(current_items)


def diff_bool(current: bool, original: bool | None) -> FieldChange[bool]:  # noqa: FBT001
    """Booleans have no cleared state; ``False`` is written as a value."""

    if current == bool(original):
        return UNCHANGED
    return SetTo(current)


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdatePayload:
    bgm_id: FieldChange[str] = UNCHANGED
    vndb_id: FieldChange[str] = UNCHANGED
    ymgal_id: FieldChange[str] = UNCHANGED
    id_type: FieldChange[IdType] = UNCHANGED
    date: FieldChange[str] = UNCHANGED
    localpath: FieldChange[str] = UNCHANGED
    savepath: FieldChange[str] = UNCHANGED
    autosave: FieldChange[bool] = UNCHANGED
    maxbackups: FieldChange[int] = UNCHANGED
    clear: FieldChange[bool] = UNCHANGED
    bgm_data: FieldChange[SourceRecord] = UNCHANGED
    vndb_data: FieldChange[SourceRecord] = UNCHANGED
    ymgal_data: FieldChange[SourceRecord] = UNCHANGED
    custom_data: FieldChange[CustomOverride] = UNCHANGED

    def changes(self) -> dict[str, Cleared | SetTo[object]]:
        """Changed fields only, keyed by column name."""

        result: dict[str, Cleared | SetTo[object]] = {}
        for item in fields(self):
            change = getattr(self, item.name)
            if not isinstance(change, Unchanged):
                result[item.name] = change
        return result

    def is_empty(self) -> bool:
        return not self.changes()

    def to_patch(self) -> dict[str, object]:
        """Wire form: absent key, ``None`` for a clear, or the new value."""

        return {
            name: None if isinstance(change, Cleared) else change.value
            for name, change in self.changes().items()
        }


def apply_payload(record: MergedRecord, payload: UpdatePayload) -> MergedRecord:
    """Return ``record`` with ``payload`` applied and display fields recomputed."""

    values = {
        name: None if isinstance(change, Cleared) else change.value
        for name, change in payload.changes().items()
    }
    return refresh_display(replace(record, **values))


@dataclass(slots=True, kw_only=True)
class GameEditForm:
    """Values currently held by an edit form."""

    bgm_id: str = ""
    vndb_id: str = ""
    ymgal_id: str = ""
    date: str = ""
    localpath: str = ""
    savepath: str = ""
    autosave: bool = False
    maxbackups: int = 0
    clear: bool = False

    custom_name: str = ""
    custom_image: str = ""
    custom_summary: str = ""
    custom_developer: str = ""
    custom_date: str = ""
    custom_nsfw: bool | None = None
    custom_tags: tuple[str, ...] = field(default_factory=tuple)
    custom_aliases: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_record(cls, record: MergedRecord) -> GameEditForm:
        custom = record.custom_data or CustomOverride()
        return cls(
            bgm_id=record.bgm_id or "",
            vndb_id=record.vndb_id or "",
            ymgal_id=record.ymgal_id or "",
            date=record.date or "",
            localpath=record.localpath or "",
            savepath=record.savepath or "",
            autosave=bool(record.autosave),
            maxbackups=record.maxbackups or 0,
            clear=bool(record.clear),
            custom_name=custom.name or "",
            custom_image=custom.image or "",
            custom_summary=custom.summary or "",
            custom_developer=custom.developer or "",
            custom_date=custom.date or "",
            custom_nsfw=custom.nsfw,
            custom_tags=custom.tags,
            custom_aliases=custom.aliases,
        )


def build_update_payload(form: GameEditForm, original: MergedRecord) -> UpdatePayload:
    """Diff the form against the stored record, field by field."""

    bgm_id = diff_scalar(normalize_game_id(form.bgm_id, DataSource.BANGUMI), original.bgm_id)
    vndb_id = diff_scalar(normalize_game_id(form.vndb_id, DataSource.VNDB), original.vndb_id)
    ymgal_id = diff_scalar(normalize_game_id(form.ymgal_id, DataSource.YMGAL), original.ymgal_id)

    id_type: FieldChange[IdType] = UNCHANGED
    if any(not isinstance(change, Unchanged) for change in (bgm_id, vndb_id, ymgal_id)):
        ids = GameIdentifierSet(
            bgm_id=_resolve(bgm_id, original.bgm_id),
            vndb_id=_resolve(vndb_id, original.vndb_id),
            ymgal_id=_resolve(ymgal_id, original.ymgal_id),
        )
        recomputed = determine_id_type(ids, manual=original.id_type is IdType.CUSTOM)
        if recomputed is not original.id_type:
            id_type = SetTo(recomputed)

    return UpdatePayload(
        bgm_id=bgm_id,
        vndb_id=vndb_id,
        ymgal_id=ymgal_id,
        id_type=id_type,
        date=diff_scalar(form.date, original.date),
        localpath=diff_scalar(form.localpath, original.localpath),
        savepath=diff_scalar(form.savepath, original.savepath),
        autosave=diff_bool(form.autosave, original.autosave),
        maxbackups=diff_scalar(form.maxbackups, original.maxbackups),
        clear=diff_bool(form.clear, original.clear),
        custom_data=_diff_custom(form, original.custom_data),
    )


def _diff_custom(
    form: GameEditForm, original: CustomOverride | None
) -> FieldChange[CustomOverride]:
    base = original or CustomOverride()
    nsfw: FieldChange[bool] = UNCHANGED
    if form.custom_nsfw != base.nsfw:
        nsfw = CLEARED if form.custom_nsfw is None else SetTo(form.custom_nsfw)

    updated = CustomOverride(
        name=_resolve(diff_scalar(form.custom_name, base.name), base.name),
        image=_resolve(diff_scalar(form.custom_image, base.image), base.image),
        summary=_resolve(diff_scalar(form.custom_summary, base.summary), base.summary),
        developer=_resolve(diff_scalar(form.custom_developer, base.developer), base.developer),
        date=_resolve(diff_scalar(form.custom_date, base.date), base.date),
        nsfw=_resolve(nsfw, base.nsfw),
        tags=_resolve(diff_array(form.custom_tags, base.tags), base.tags) or (),
        aliases=_resolve(diff_array(form.custom_aliases, base.aliases), base.aliases) or (),
    )
    if updated == base:
        return UNCHANGED
    if updated.is_empty():
        return CLEARED if original is not None else UNCHANGED
    return SetTo(updated)


def payload_from_refresh(original: MergedRecord, refreshed: MergedRecord) -> UpdatePayload:
    """Payload storing the catalog data of ``refreshed`` over ``original``.

    Refreshing never clears anything: ids, dates and sub-objects the refresh
    did not produce keep their stored values.
    """

    def replaced[T](new: T | None, old: T | None) -> FieldChange[T]:
        if new is None or new == "" or new == old:
            return UNCHANGED
        return SetTo(new)

    return UpdatePayload(
        bgm_id=replaced(refreshed.bgm_id, original.bgm_id),
        vndb_id=replaced(refreshed.vndb_id, original.vndb_id),
        ymgal_id=replaced(refreshed.ymgal_id, original.ymgal_id),
        id_type=replaced(refreshed.id_type, original.id_type),
        date=replaced(refreshed.date, original.date),
        bgm_data=replaced(refreshed.source_data(DataSource.BANGUMI), original.bgm_data),
        vndb_data=replaced(refreshed.source_data(DataSource.VNDB), original.vndb_data),
        ymgal_data=replaced(refreshed.source_data(DataSource.YMGAL), original.ymgal_data),
    )


def _resolve[T](change: FieldChange[T], original: T | None) -> T | None:
    if isinstance(change, Unchanged):
        return original
    if isinstance(change, Cleared):
        return None
    return change.value
