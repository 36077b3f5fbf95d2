"""
Leaderboard assembly.

Combines the three consumers of the aggregate into display rows: the
ranking (rank and trend), the rating/form metrics (Elo-like rating,
streaks, recent form) and the player's name.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional

from leagueboard.constants import UNKNOWN_PLAYER_NAME
from leagueboard.records.types import GameRecord
from leagueboard.standings.aggregator import aggregate_games, collect_histories
from leagueboard.standings.ranking import rank_aggregates
from leagueboard.standings.rating import round_half_up, summarise_form


@dataclass(frozen=True)
class LeaderboardEntry:
    """One leaderboard row."""
    rank: int
    player_id: int
    name: str
    total_points: int
    games_played: int
    wins: int
    losses: int
    win_rate: float  # percent, one decimal place
    last_active: Optional[date]
    trend: str
    previous_rank: Optional[int]
    elo_rating: int
    current_streak: int
    best_streak: int
    recent_form: tuple[str, ...]
    average_placement: float
    gold_objectives: int = 0
    silver_objectives: int = 0

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "playerId": self.player_id,
            "name": self.name,
            "points": self.total_points,
            "gamesPlayed": self.games_played,
            "wins": self.wins,
            "losses": self.losses,
            "winRate": self.win_rate,
            "lastActive": self.last_active.isoformat() if self.last_active else None,
            "trend": self.trend,
            "previousRank": self.previous_rank,
            "eloRating": self.elo_rating,
            "currentStreak": self.current_streak,
            "bestStreak": self.best_streak,
            "recentForm": list(self.recent_form),
            "averagePlacement": self.average_placement,
            "goldObjectives": self.gold_objectives,
            "silverObjectives": self.silver_objectives,
        }


def win_rate_percent(wins: int, games_played: int) -> float:
    """Win rate as a percentage rounded to one decimal (2 of 3 → 66.7)."""
    if games_played <= 0:
        return 0.0
    return round_half_up(wins / games_played * 1000) / 10


def build_leaderboard(
    games: Iterable[GameRecord],
    names: Mapping[int, Optional[str]],
    previous_ranks: Optional[Mapping[int, int]] = None,
    limit: Optional[int] = None,
) -> list[LeaderboardEntry]:
    """
    Rank every player in `names` plus anyone found in the games.

    Args:
        games: Games in scope (already filtered by league and kind)
        names: player_id → display name for the seeded players; players
               missing here are shown as "Unknown Player"
        previous_ranks: Optional earlier snapshot used for trend
        limit: Return only the top `limit` rows (None for all)

    Returns:
        LeaderboardEntry list ordered by rank
    """
    games = list(games)
    aggregates = aggregate_games(games, names.keys())
    histories = collect_histories(games, aggregates.keys())

    entries = []
    for ranked in rank_aggregates(aggregates.values(), previous_ranks):
        agg = ranked.aggregate
        form = summarise_form(histories.get(agg.player_id, []))
        entries.append(LeaderboardEntry(
            rank=ranked.rank,
            player_id=agg.player_id,
            name=names.get(agg.player_id) or UNKNOWN_PLAYER_NAME,
            total_points=agg.total_points,
            games_played=agg.games_played,
            wins=agg.wins,
            losses=agg.losses,
            win_rate=win_rate_percent(agg.wins, agg.games_played),
            last_active=agg.last_active,
            trend=ranked.trend,
            previous_rank=ranked.previous_rank,
            elo_rating=form.elo_rating,
            current_streak=form.current_streak,
            best_streak=form.best_streak,
            recent_form=form.recent_form,
            average_placement=agg.average_placement,
            gold_objectives=agg.objective_count("gold"),
            silver_objectives=agg.objective_count("silver"),
        ))

    if limit is not None:
        entries = entries[:limit]
    return entries
