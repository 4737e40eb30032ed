"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from galmeta.adapters.bangumi import BangumiSource
from galmeta.adapters.credentials import TokenCache
from galmeta.adapters.sqlalchemy.repositories import GameNotFoundError
from galmeta.adapters.sqlalchemy.unit_of_work import SqlAlchemyGameUnitOfWork, is_started, startup
from galmeta.adapters.vndb import VndbSource
from galmeta.adapters.ymgal import YmgalSource
from galmeta.config import (
    get_bangumi_config,
    get_resolution_config,
    get_vndb_config,
    get_ymgal_config,
)
from galmeta.domain.errors import MetadataError
from galmeta.domain.identifiers import GameIdentifierSet
from galmeta.domain.model import is_ymgal_data_complete
from galmeta.domain.ports.unit_of_work import GameUnitOfWork
from galmeta.domain.resolution import (
    MetadataService,
    apply_payload,
    await_outcome,
    build_update_payload,
    payload_from_refresh,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from galmeta.config import BangumiConfig, ResolutionConfig, VndbConfig, YmgalConfig
    from galmeta.domain.model import DataSource, MergedRecord
    from galmeta.domain.resolution import GameEditForm
    from galmeta.domain.resolution.service import Defaults

UnitOfWorkFactory = Callable[[], GameUnitOfWork]


log = getLogger(__name__)


def build_metadata_service(
    *,
    bangumi: BangumiConfig | None = None,
    vndb: VndbConfig | None = None,
    ymgal: YmgalConfig | None = None,
    resolution: ResolutionConfig | None = None,
    tokens: TokenCache | None = None,
) -> MetadataService:
    """Wire the three HTTP catalog sources into a :class:`MetadataService`."""

    ymgal_config = ymgal or get_ymgal_config()
    resolution_config = resolution or get_resolution_config()
    return MetadataService(
        bgm=BangumiSource(config=bangumi or get_bangumi_config()),
        vndb=VndbSource(config=vndb or get_vndb_config()),
        ymgal=YmgalSource(
            config=ymgal_config,
            tokens=tokens or TokenCache(ttl_seconds=ymgal_config.token_ttl_seconds),
        ),
        search_limit=resolution_config.name_search_limit,
    )


def search_games(
    query: str,
    *,
    source: DataSource | None = None,
    credential: str | None = None,
    is_id_search: bool | None = None,
    defaults: Defaults | None = None,
    timeout: float | None = None,
    service: MetadataService | None = None,
) -> list[MergedRecord]:
    """Search the catalogs for ``query`` and block until the records arrive."""

    effective_service = service or build_metadata_service()
    log.info("Searching for %r: source=%s, id_search=%s", query, source, is_id_search)
    records = _run(
        effective_service.search_games(
            query,
            source=source,
            credential=credential,
            is_id_search=is_id_search,
            defaults=defaults,
        ),
        timeout=timeout,
    )
    log.info("Search for %r returned %d record(s)", query, len(records))
    return records


def fetch_game_by_ids(
    ids: GameIdentifierSet,
    *,
    credential: str | None = None,
    defaults: Defaults | None = None,
    timeout: float | None = None,
    service: MetadataService | None = None,
) -> MergedRecord | None:
    effective_service = service or build_metadata_service()
    log.info("Resolving ids: bgm=%s, vndb=%s, ymgal=%s", ids.bgm_id, ids.vndb_id, ids.ymgal_id)
    return _run(
        effective_service.get_game_by_ids(ids, credential=credential, defaults=defaults),
        timeout=timeout,
    )


def save_game(
    record: MergedRecord,
    *,
    credential: str | None = None,
    timeout: float | None = None,
    service: MetadataService | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    """Store a new game and return its id.

    YMGal data from a name search is replaced by the detail record first.
    """

    if record.ymgal_id and not is_ymgal_data_complete(record.ymgal_data):
        effective_service = service or build_metadata_service()
        record = _run(
            effective_service.complete_ymgal_data(record, credential=credential),
            timeout=timeout,
        )
    with _unit_of_work(unit_of_work_factory) as uow:
        game_id = uow.games.insert(record)
        uow.commit()
    log.info("Stored game %s (%s)", game_id, record.name)
    return game_id


def list_games(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> list[MergedRecord]:
    with _unit_of_work(unit_of_work_factory) as uow:
        return uow.games.list_all()


def update_game(
    game_id: int,
    form: GameEditForm,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> MergedRecord:
    """Persist the fields of ``form`` that differ from the stored game."""

    with _unit_of_work(unit_of_work_factory) as uow:
        original = _load(uow, game_id)
        payload = build_update_payload(form, original)
        if payload.is_empty():
            log.info("Game %s unchanged, nothing to update", game_id)
            return original
        uow.games.update(game_id, payload)
        uow.commit()
    log.info("Updated game %s: %s", game_id, ", ".join(payload.changes()))
    return apply_payload(original, payload)


def refresh_game(
    game_id: int,
    *,
    credential: str | None = None,
    timeout: float | None = None,
    service: MetadataService | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> MergedRecord:
    """Re-fetch catalog data for a stored game and persist what changed."""

    effective_service = service or build_metadata_service()
    with _unit_of_work(unit_of_work_factory) as uow:
        original = _load(uow, game_id)
        refreshed = _refresh_stored(
            uow, original, effective_service, credential=credential, timeout=timeout
        )
        uow.commit()
    return refreshed


@dataclass(slots=True)
class RefreshSummary:
    total: int = 0
    succeeded: int = 0
    errors: dict[int, str] = field(default_factory=dict)

    @property
    def failed(self) -> int:
        return len(self.errors)


def refresh_all_games(
    *,
    source: DataSource | None = None,
    credential: str | None = None,
    timeout: float | None = None,
    service: MetadataService | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> RefreshSummary:
    """Refresh every stored game that has a catalog id, or an id for ``source``.

    A game that fails is recorded in the summary and the batch carries on;
    each game is committed on its own. ``timeout`` applies per game.
    """

    effective_service = service or build_metadata_service()
    summary = RefreshSummary()
    with _unit_of_work(unit_of_work_factory) as uow:
        for game in uow.games.list_all():
            ids = GameIdentifierSet.of(game)
            if game.id is None or ids.is_empty() or (source is not None and not ids.get(source)):
                continue
            summary.total += 1
            try:
                _refresh_stored(
                    uow, game, effective_service, credential=credential, timeout=timeout
                )
            except MetadataError as exc:
                log.warning("Could not refresh game %s (%s): %s", game.id, game.name, exc)
                summary.errors[game.id] = str(exc)
                continue
            uow.commit()
            summary.succeeded += 1
    log.info(
        "Batch refresh done: %d of %d game(s) refreshed, %d failed",
        summary.succeeded,
        summary.total,
        summary.failed,
    )
    return summary


def _refresh_stored(
    uow: GameUnitOfWork,
    original: MergedRecord,
    service: MetadataService,
    *,
    credential: str | None,
    timeout: float | None,
) -> MergedRecord:
    if original.id is None:
        raise GameNotFoundError("Stored game has no id")
    refreshed = _run(service.refresh_record(original, credential=credential), timeout=timeout)
    payload = payload_from_refresh(original, refreshed)
    if not payload.is_empty():
        uow.games.update(original.id, payload)
    log.info("Refreshed game %s: changed=%s", original.id, ", ".join(payload.changes()) or "-")
    return apply_payload(original, payload)


def _run[T](coro: Awaitable[T], *, timeout: float | None) -> T:
    effective_timeout = get_resolution_config().timeout_seconds if timeout is None else timeout
    if effective_timeout is not None and effective_timeout <= 0:
        effective_timeout = None

    async def runner() -> T:
        return await await_outcome(coro, timeout=effective_timeout)

    return asyncio.run(runner())


def _unit_of_work(factory: UnitOfWorkFactory | None) -> GameUnitOfWork:
    if factory is not None:
        return factory()
    if not is_started():
        startup()
    return SqlAlchemyGameUnitOfWork()


def _load(uow: GameUnitOfWork, game_id: int) -> MergedRecord:
    record = uow.games.get(game_id)
    if record is None:
        raise GameNotFoundError(f"No game with id {game_id}")
    return record
