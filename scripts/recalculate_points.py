#!/usr/bin/env python3
"""
Recalculate stored game points against the current scoring rules.

Run after a league's scoring rules change, so past games are re-scored
with the new values.

Normal usage (every league, write changes):
    python scripts/recalculate_points.py

One league only:
    python scripts/recalculate_points.py --league 3

Dry run (report what would change without writing anything):
    python scripts/recalculate_points.py --dry-run
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from time import perf_counter

# Add src to path so this script can be run directly
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


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Re-score stored games with the current scoring rules.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--league",
        type=int,
        default=None,
        help="League ID to recalculate (default: every league).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report changes but do not write to the database.",
    )
    parser.add_argument(
        "--show-changes",
        action="store_true",
        help="Print every changed placement.",
    )
    parser.add_argument(
        "--metrics-json",
        default=None,
        help="Write a JSON summary to this path on completion.",
    )
    return parser


def main() -> int:
    args = _build_parser().parse_args()

    started_at = _utc_now_iso()
    scope = f"league={args.league}" if args.league is not None else "all leagues"
    print(f"POINTS RECALCULATION  {scope}  dry_run={args.dry_run}  started={started_at}")
    print("-" * 60)

    t_start = perf_counter()

    with get_session() as session:
        service = StandingsService.from_session(session)
        result = service.recalculate_points(args.league, apply=not args.dry_run)

        if args.dry_run:
            session.rollback()
            print("(dry run - nothing written)")

    elapsed = perf_counter() - t_start

    if args.show_changes:
        for change in result.changes:
            print(
                f"  game {change.game_id:>6}  player {change.player_id:>6}  "
                f"{change.old_points:>4} -> {change.new_points:<4} ({change.delta:+d})"
            )

    print("-" * 60)
    print(f"Placements examined:    {result.examined}")
    print(f"Placements changed:     {result.changed}")
    print(f"Games skipped:          {result.skipped_games}")
    print(f"Elapsed:                {elapsed:.2f}s")

    if args.metrics_json:
        payload = {
            "status": "success",
            "league_id": args.league,
            "dry_run": args.dry_run,
            "started_at": started_at,
            "elapsed_s": round(elapsed, 3),
            "examined": result.examined,
            "changed": result.changed,
            "skipped_games": result.skipped_games,
            "applied": result.applied,
        }
        metrics_path = Path(args.metrics_json)
        metrics_path.parent.mkdir(parents=True, exist_ok=True)
        metrics_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
