from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from galmeta.app import (
    fetch_game_by_ids,
    list_games,
    refresh_all_games,
    refresh_game,
    save_game,
    search_games,
)
from galmeta.config import configure_logging
from galmeta.domain.identifiers import GameIdentifierSet, is_valid_game_id, normalize_game_id
from galmeta.domain.model import DataSource

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from galmeta.domain.model import MergedRecord

log = logging.getLogger(__name__)

_SOURCE_CHOICES = [source.value for source in DataSource]


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Look up galgame metadata")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Search games by id or name")
    search.add_argument("query", type=str, help="Catalog id (e.g. v17, ga123, 1234) or name")
    search.add_argument(
        "--source",
        choices=_SOURCE_CHOICES,
        help="Query a single catalog instead of merging all three",
    )
    kind = search.add_mutually_exclusive_group()
    kind.add_argument(
        "--id",
        dest="is_id_search",
        action="store_const",
        const=True,
        help="Treat the query as a catalog id",
    )
    kind.add_argument(
        "--name",
        dest="is_id_search",
        action="store_const",
        const=False,
        help="Treat the query as a game name",
    )
    _add_common_options(search)

    ids = subparsers.add_parser("ids", help="Fetch and merge a game by its catalog ids")
    ids.add_argument("--bgm", type=str, help="Bangumi subject id")
    ids.add_argument("--vndb", type=str, help="VNDB id, e.g. v17")
    ids.add_argument("--ymgal", type=str, help="YMGal id, e.g. ga123")
    _add_common_options(ids)

    subparsers.add_parser("list", help="Print stored games")

    refresh = subparsers.add_parser("refresh", help="Re-fetch catalog data for a stored game")
    refresh.add_argument("game_id", type=int, help="Stored game id")
    refresh.add_argument("--token", type=str, help="Bangumi access token")
    refresh.add_argument("--timeout", type=float, help="Seconds to wait (0 disables)")

    refresh_all = subparsers.add_parser(
        "refresh-all", help="Re-fetch catalog data for every stored game"
    )
    refresh_all.add_argument(
        "--source",
        choices=_SOURCE_CHOICES,
        help="Only games with an id for this catalog",
    )
    refresh_all.add_argument("--token", type=str, help="Bangumi access token")
    refresh_all.add_argument("--timeout", type=float, help="Seconds to wait per game (0 disables)")

    return parser.parse_args(list(argv))


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--token",
        type=str,
        help="Bangumi access token (defaults to BGM_TOKEN)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds to wait for the catalogs (defaults to config, 0 disables)",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Store the resulting games in the local database",
    )


def _parse_ids(args: argparse.Namespace) -> GameIdentifierSet:
    ids = GameIdentifierSet()
    for source, value in (
        (DataSource.BANGUMI, args.bgm),
        (DataSource.VNDB, args.vndb),
        (DataSource.YMGAL, args.ymgal),
    ):
        if not value:
            continue
        candidate = value.strip()
        if not is_valid_game_id(candidate, source):
            raise ValueError(f"Invalid {source} id: {value}")
        ids = ids.with_id(source, normalize_game_id(candidate, source))
    if ids.is_empty():
        raise ValueError("Pass at least one of --bgm, --vndb or --ymgal")
    return ids


def _validate(args: argparse.Namespace) -> None:
    if getattr(args, "timeout", None) is not None and args.timeout < 0:
        raise ValueError("Timeout must be non-negative")
    if args.command == "search" and not args.query.strip():
        raise ValueError("Query must not be blank")


def _emit(records: Sequence[MergedRecord]) -> None:
    _write_json([asdict(record) for record in records])


def _write_json(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2, default=str))
    sys.stdout.write("\n")


def _save_all(records: Sequence[MergedRecord], args: argparse.Namespace) -> None:
    for record in records:
        save_game(record, credential=args.token, timeout=args.timeout)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    ids: GameIdentifierSet | None = None
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
        if parsed_args.command == "ids":
            ids = _parse_ids(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        records: list[MergedRecord]
        if parsed_args.command == "search":
            records = search_games(
                parsed_args.query,
                source=DataSource(parsed_args.source) if parsed_args.source else None,
                credential=parsed_args.token,
                is_id_search=parsed_args.is_id_search,
                timeout=parsed_args.timeout,
            )
            if parsed_args.save:
                _save_all(records, parsed_args)
        elif parsed_args.command == "ids" and ids is not None:
            found = fetch_game_by_ids(
                ids, credential=parsed_args.token, timeout=parsed_args.timeout
            )
            if found is None:
                log.warning("No catalog returned data for the given ids")
            records = [found] if found is not None else []
            if parsed_args.save:
                _save_all(records, parsed_args)
        elif parsed_args.command == "list":
            records = list_games()
        elif parsed_args.command == "refresh":
            records = [
                refresh_game(
                    parsed_args.game_id,
                    credential=parsed_args.token,
                    timeout=parsed_args.timeout,
                )
            ]
        elif parsed_args.command == "refresh-all":
            summary = refresh_all_games(
                source=DataSource(parsed_args.source) if parsed_args.source else None,
                credential=parsed_args.token,
                timeout=parsed_args.timeout,
            )
            _write_json(
                {
                    "total": summary.total,
                    "succeeded": summary.succeeded,
                    "failed": summary.failed,
                    "errors": summary.errors,
                }
            )
            return
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
        _emit(records)

    except Exception:
        log.exception("Fatal error during lookup")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
