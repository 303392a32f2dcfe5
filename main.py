"""Main CLI entry-point."""
from __future__ import annotations

import argparse
import asyncio
import sys

from core.logging.config import bootstrap_logging, shutdown_logging
from config import settings
from domain.enums import Platform, TimeRange


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pubg-matches",
        description="Find PUBG tournament matches for a player or a roster.",
    )
    platforms = [p.value for p in Platform.all_platforms()]
    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="search recent matches")
    search.add_argument("-p", "--player", dest="players", action="append", required=True,
                        help="player name; repeat for a roster (max 5)")
    search.add_argument("--platform", default=settings.DEFAULT_PLATFORM, choices=platforms)
    search.add_argument("--range", dest="time_range", default=TimeRange.LAST_24H.value,
                        choices=[t.value for t in TimeRange if t is not TimeRange.CUSTOM])
    search.add_argument("--all-types", action="store_true",
                        help="keep ranked and public matches (single player only)")
    search.add_argument("--mode", default="all", help="game mode filter, e.g. squad-fpp")
    search.add_argument("--map", dest="map_name", default="all", help="map filter, e.g. Baltic_Main")

    match = sub.add_parser("match", help="show one classified match")
    match.add_argument("match_id")
    match.add_argument("--platform", default=settings.DEFAULT_PLATFORM, choices=platforms)
    match.add_argument("--bypass-cache", action="store_true")

    telemetry = sub.add_parser("telemetry", help="download match telemetry")
    telemetry.add_argument("match_id")
    telemetry.add_argument("--platform", default=settings.DEFAULT_PLATFORM, choices=platforms)
    telemetry.add_argument("--summary", action="store_true", help="print the event count only")
    return parser


def _command(args: argparse.Namespace):
    # Lazy imports keep --help fast
    from presentation.cli import MatchCommand, SearchCommand, TelemetryCommand

    if args.command == "search":
        return SearchCommand(
            args.players,
            platform=args.platform,
            time_range=args.time_range,
            custom_only=not args.all_types,
            game_mode=args.mode,
            map_name=args.map_name,
        )
    if args.command == "match":
        return MatchCommand(args.match_id, platform=args.platform, bypass_cache=args.bypass_cache)
    return TelemetryCommand(args.match_id, platform=args.platform, summary=args.summary)


def main(argv: list[str]) -> int:
    args = _parser().parse_args(argv)
    bootstrap_logging(
        service="pubg-matches",
        level=settings.LOG_LEVEL,
        log_dir=settings.LOG_DIR,
        log_file_name="pubg-matches.jsonl",
    )
    try:
        return asyncio.run(_command(args).run())
    finally:
        shutdown_logging()


def _entry() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(_entry())
