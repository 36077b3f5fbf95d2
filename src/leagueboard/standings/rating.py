"""
Rating and form metrics from a player's result history.

The rating is a simplified, Elo-like number derived only from the player's
all-time win rate:

    rating = 1500 + (win_rate - 0.5) * 1000

rounded half-up to an integer. There is no opponent-strength adjustment and
no K-factor; a 50% player sits at 1500, an unbeaten player at 2000 and a
winless one at 1000. It is a display approximation, not true Elo.

Streaks and form read the chronological history (oldest first):
- current streak: wins counted backward from the newest result
- best streak: the longest run of wins anywhere in the history
- recent form: the last 5 results as "W"/"L", most recent last
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from leagueboard.constants import (
    DEFAULT_RATING,
    LOSS_TOKEN,
    RATING_SPREAD,
    RECENT_FORM_WINDOW,
    WIN_TOKEN,
)
from leagueboard.standings.aggregator import GameResult


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 → 3)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def elo_rating(wins: int, games_played: int) -> int:
    """
    Compute the Elo-like rating from a win/loss record.

    Examples:
        elo_rating(0, 0)    # → 1500 (no games)
        elo_rating(3, 4)    # → 1750
        elo_rating(1, 3)    # → 1333
    """
    if games_played <= 0:
        return DEFAULT_RATING
    win_rate = wins / games_played
    return round_half_up(DEFAULT_RATING + (win_rate - 0.5) * RATING_SPREAD)


def current_streak(results: Sequence[GameResult]) -> int:
    """Consecutive wins ending at the most recent result."""
    streak = 0
    for result in reversed(results):
        if not result.won:
            break
        streak += 1
    return streak


def best_streak(results: Sequence[GameResult]) -> int:
    """Longest run of consecutive wins in the history."""
    best = 0
    running = 0
    for result in results:
        if result.won:
            running += 1
            best = max(best, running)
        else:
            running = 0
    return best


def recent_form(results: Sequence[GameResult], window: int = RECENT_FORM_WINDOW) -> list[str]:
    """The last `window` results as W/L tokens, most recent last."""
    if window <= 0:
        return []
    return [WIN_TOKEN if r.won else LOSS_TOKEN for r in results[-window:]]


@dataclass(frozen=True)
class FormSummary:
    """Rating, streak and form metrics for one player."""
    elo_rating: int
    current_streak: int
    best_streak: int
    recent_form: tuple[str, ...]


def summarise_form(results: Sequence[GameResult]) -> FormSummary:
    """
    Compute all rating and form metrics from a chronological history.

    The history is read, never modified.
    """
    wins = sum(1 for r in results if r.won)
    return FormSummary(
        elo_rating=elo_rating(wins, len(results)),
        current_streak=current_streak(results),
        best_streak=best_streak(results),
        recent_form=tuple(recent_form(results)),
    )
