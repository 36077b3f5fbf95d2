#!/usr/bin/env python3
"""
Print a league leaderboard, its character sheets or one player's profile.

Usage:
    # Top 10 of league 1, every game kind
    python scripts/show_leaderboard.py --league 1

    # Commander games only, top 25
    python scripts/show_leaderboard.py --league 1 --game-kind commander --limit 25

    # Character sheets instead of the leaderboard
    python scripts/show_leaderboard.py --league 1 --sheets

    # One player's profile within league 1
    python scripts/show_leaderboard.py --league 1 --player 12

    # Machine-readable output
    python scripts/show_leaderboard.py --league 1 --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from leagueboard.config import settings
from leagueboard.db import get_session
from leagueboard.standings.service import StandingsService

LOG_FORMATS = {
    "console": "%(asctime)s [%(levelname)s] %(message)s",
    "json": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
}

logging.basicConfig(
    level=settings.log_level,
    format=LOG_FORMATS[settings.log_format],
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

TREND_ARROWS = {"up": "^", "down": "v", "same": "-"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show league standings.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--league",
        type=int,
        default=None,
        help="League ID (default: every league).",
    )
    parser.add_argument(
        "--game-kind",
        default="all",
        help="Game kind filter: all, commander, draft or standard.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=settings.leaderboard_default_limit,
        help=f"Number of leaderboard entries (default: {settings.leaderboard_default_limit}).",
    )
    parser.add_argument(
        "--sheets",
        action="store_true",
        help="Print character sheets instead of the leaderboard.",
    )
    parser.add_argument(
        "--player",
        type=int,
        default=None,
        help="Print this player's profile instead of the leaderboard.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON instead of a table.",
    )
    return parser


def print_leaderboard(entries) -> None:
    print(f"{'#':>3} {'Player':<24} {'Pts':>5} {'GP':>4} {'W':>4} {'L':>4} {'Win%':>6} {'Elo':>5}  Form")
    print("-" * 72)
    for entry in entries:
        print(
            f"{entry.rank:>3} {entry.name[:24]:<24} {entry.total_points:>5} "
            f"{entry.games_played:>4} {entry.wins:>4} {entry.losses:>4} "
            f"{entry.win_rate:>6.1f} {entry.elo_rating:>5}  "
            f"{''.join(entry.recent_form):<5} {TREND_ARROWS.get(entry.trend, '')}"
        )


def print_sheets(sheets) -> None:
    for sheet in sheets:
        stats = sheet.stats
        print(f"#{sheet.rank} {sheet.name}  (level {sheet.level}, {sheet.xp}/{sheet.next_level_xp} XP)")
        print(
            f"    POW {stats.power:>2}  CON {stats.consistency:>2}  VIC {stats.victory_rate:>2}  "
            f"ADA {stats.adaptability:>2}  EXP {stats.experience:>2}"
        )
        print(f"    {', '.join(sheet.achievements)}")


def print_profile(profile) -> None:
    agg = profile.aggregate
    rank = f"#{profile.rank}" if profile.rank is not None else "unranked"
    print(f"{profile.name} ({rank})")
    print(
        f"    {agg.total_points} pts, {agg.games_played} games, {agg.wins}W/{agg.losses}L, "
        f"{profile.win_rate:.1f}% wins, Elo {profile.form.elo_rating}, "
        f"streak {profile.form.current_streak} (best {profile.form.best_streak})"
    )
    for result in profile.recent_games:
        played = result.played_on.isoformat() if result.played_on else "undated"
        print(f"    {played}  game {result.game_id:<6} place {result.place}  {result.points:>3} pts")


def main() -> int:
    args = _build_parser().parse_args()

    with get_session() as session:
        service = StandingsService.from_session(session)
        try:
            if args.player is not None:
                profile = service.compute_player_profile(args.player, args.league, args.game_kind)
            elif args.sheets:
                rows = service.compute_character_sheets(args.league, args.game_kind)
            else:
                rows = service.compute_leaderboard(args.league, args.game_kind, limit=args.limit)
        except (ValueError, LookupError) as exc:
            print(f"ERROR: {exc}")
            return 1

    if args.player is not None:
        if args.json:
            print(json.dumps(profile.to_dict(), indent=2))
        else:
            print_profile(profile)
        return 0

    if args.json:
        print(json.dumps([row.to_dict() for row in rows], indent=2))
    elif not rows:
        print("No players in scope.")
    elif args.sheets:
        print_sheets(rows)
    else:
        print_leaderboard(rows)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
